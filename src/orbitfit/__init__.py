"""Batch least-squares orbit determination from heterogeneous tracking measurements."""

from __future__ import annotations

__version__ = "1.0.0"
