"""Contains classes defining Solar System bodies and their properties."""

from __future__ import annotations

# Local Imports
from .earth import Earth
from .third_body import Moon, Sun

__all__ = ["Earth", "Moon", "Sun"]
