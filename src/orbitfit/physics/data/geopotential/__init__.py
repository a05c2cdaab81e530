"""Normalized spherical harmonic geopotential coefficients."""
