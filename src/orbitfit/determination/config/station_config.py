"""Defines the :class:`.Station` model for ground based observers."""

# ruff: noqa: UP007

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING, Optional

# Third Party Imports
from numpy import array
from pydantic import BaseModel, ConfigDict

# Local Imports
from ...physics.constants import DEG2RAD
from ...physics.transforms.methods import ecef2sezRotation, lla2ecef
from .base import DegreeNeg90to90, DegreeNeg180to360

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


class Station(BaseModel):
    R"""Geodetic location of a ground station, read-only during estimation."""

    model_config = ConfigDict(frozen=True)

    code: str
    R"""``str``: unique participant code measurements refer to the station by."""

    latitude: DegreeNeg90to90
    R"""``float``: geodetic latitude, degrees."""

    longitude: DegreeNeg180to360
    R"""``float``: longitude, degrees."""

    altitude: float = 0.0
    R"""``float``: height above the ellipsoid, km."""

    name: Optional[str] = None
    R"""``str``: human readable station name."""

    @property
    def lla(self) -> ndarray:
        """``ndarray``: 3x1 geodetic position, (radians, radians, km)."""
        return array([self.latitude * DEG2RAD, self.longitude * DEG2RAD, self.altitude])

    @property
    def ecef(self) -> ndarray:
        """``ndarray``: 3x1 ECEF position, km."""
        return lla2ecef(self.lla)[:3]

    @property
    def ecef_2_sez(self) -> ndarray:
        """``ndarray``: 3x3 rotation from ECEF into the station's topocentric SEZ frame."""
        return ecef2sezRotation(self.latitude * DEG2RAD, self.longitude * DEG2RAD)
