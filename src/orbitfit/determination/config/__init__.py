"""Defines the pydantic models describing an orbit determination request."""
