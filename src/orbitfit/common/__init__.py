"""Configuration, logging, labels & errors shared by every ``orbitfit`` package."""

from __future__ import annotations

# Standard Library Imports
from datetime import datetime


def pathSafeTime(dt: datetime | None = None) -> str:
    """Time stamp of `dt`, now by default, usable inside a file name on any platform."""
    return (dt or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S%f")
