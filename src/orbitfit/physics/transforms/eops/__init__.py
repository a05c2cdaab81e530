"""Earth orientation parameters (EOPs) consumed by the FK5 reduction."""

from __future__ import annotations

# Standard Library Imports
import datetime
from dataclasses import dataclass


@dataclass(frozen=True)
class EarthOrientationParameter:
    """Daily Earth orientation values, angles already converted to radians."""

    date: datetime.date
    """``datetime.date``: UTC calendar date the values hold for."""

    x_p: float
    """``float``: polar motion x coordinate, (radians)."""

    y_p: float
    """``float``: polar motion y coordinate, (radians)."""

    d_delta_psi: float
    """``float``: correction to the IAU-1980 nutation in longitude, (radians)."""

    d_delta_eps: float
    """``float``: correction to the IAU-1980 nutation in obliquity, (radians)."""

    delta_ut1: float
    """``float``: UT1 - UTC, (seconds)."""

    length_of_day: float
    """``float``: excess length of day, (seconds)."""

    delta_atomic_time: int
    """``int``: TAI - UTC, the accumulated leap seconds, (seconds)."""

    @classmethod
    def leapSecondsOnly(cls, date: datetime.date, delta_atomic_time: int) -> EarthOrientationParameter:
        """Values for an ideal Earth: no polar motion, no UT1 offset, no nutation corrections."""
        return cls(date, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, delta_atomic_time)


class MissingEOP(LookupError):  # noqa: N818
    """No EOP values are available for a requested date."""


# Local Imports
# forward-facing API import
from .getter import getEarthOrientationParameters, setEarthOrientationParameters  # noqa: F401, E402
