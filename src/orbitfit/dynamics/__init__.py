"""Defines the numerically integrated dynamics & the force models driving them."""
