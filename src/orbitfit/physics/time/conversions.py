"""Time scale & sidereal time conversions used by the frame reductions."""

from __future__ import annotations

# Standard Library Imports
from datetime import date, datetime, timezone

# Third Party Imports
from numpy import polyval

# Local Imports
from .. import constants as const
from ..maths import wrapAngle2Pi
from .stardate import JulianDate

_GMST_POLYNOMIAL: tuple[float, ...] = (-6.2e-6, 0.093104, 876600 * 3600 + 8640184.812866, 67310.54841)
"""``tuple``: GMST in seconds of time as a cubic in UT1 Julian centuries, Vallado Eqn 3-47."""

_SIDEREAL_RATE_POLYNOMIAL: tuple[float, ...] = (-5.9e-15, 5.9006e-11, 1.002737909350795)
"""``tuple``: sidereal revolutions per solar day as a quadratic in Julian centuries, Vallado Eqn 3-40."""


def utcNaive(date_time: datetime) -> datetime:
    """`date_time` as a naive UTC ``datetime``; naive inputs are assumed to be UTC already."""
    if date_time.tzinfo is None:
        return date_time
    return date_time.astimezone(timezone.utc).replace(tzinfo=None)


def _julianCenturies(julian_date: float) -> float:
    return (float(julian_date) - const.J2000_JD) / const.JULIAN_CENTURY


def greenwichMeanTime(julian_date):
    """Greenwich mean sidereal time of a UT1 Julian date, (radians in :math:`[0, 2\\pi)`).

    References:
        :cite:t:`vallado_2013_astro`, Eqn 3-47
    """
    gmst_seconds = polyval(_GMST_POLYNOMIAL, _julianCenturies(julian_date))
    # 240 seconds of time per degree
    return wrapAngle2Pi(gmst_seconds / 240.0 * const.DEG2RAD)


def greenwichApparentTime(year, elapsed_days, eq_equinox):
    """Greenwich apparent sidereal time, advanced from 0h January 1st of `year`.

    References:
        :cite:t:`vallado_2013_astro`, Section 3.5.2

    Args:
        year (``int``): calendar year.
        elapsed_days (``float``): days & day fraction since 0h January 1st, in UT1.
        eq_equinox (``float``): equation of the equinoxes, (radians).

    Returns:
        ``float``: apparent sidereal time, (radians in :math:`[0, 2\\pi)`).
    """
    new_year = JulianDate.getJulianDate(year, 1, 1, 0, 0, 0)
    sidereal_rate = polyval(_SIDEREAL_RATE_POLYNOMIAL, _julianCenturies(new_year))
    return wrapAngle2Pi(greenwichMeanTime(new_year) + sidereal_rate * elapsed_days * const.TWOPI + eq_equinox)


def utc2TerrestrialTime(year, month, day, hour, minute, second, delta_atomic_time):
    """Terrestrial time of a UTC calendar instant.

    References:
        :cite:t:`vallado_2013_astro`, Algorithm 16

    Args:
        delta_atomic_time (``float``): TAI - UTC, the accumulated leap seconds.

    Returns:
        ``tuple``: terrestrial time as seconds of the UTC day, and in Julian centuries since J2000.
    """
    tt_seconds = hour * 3600 + minute * 60 + second + delta_atomic_time + const.TT_TAI
    julian_date = JulianDate.getJulianDate(year, month, day, 0, 0, 0) + tt_seconds * const.SEC2DAYS
    return tt_seconds, _julianCenturies(julian_date)


def dayOfYear(year, month, day, hour, minute, second):
    """Fractional day of the year, 1.0 at 0h January 1st.

    References:
        :cite:t:`vallado_2013_astro`, Section 3.6.4
    """
    day_number = (date(year, month, day) - date(year, 1, 1)).days + 1
    return day_number + (hour * 3600 + minute * 60 + second) / const.DAYS2SEC
