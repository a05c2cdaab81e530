"""Julian dates & their conversions to and from ``datetime``."""

from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timedelta

# Third Party Imports
from numpy import floor

# Local Imports
from .. import constants as const

J2000_DATETIME: datetime = datetime(2000, 1, 1, 12)
"""``datetime``: calendar instant of Julian date 2451545.0, used as the conversion anchor."""

_CALENDAR_LIMITS: tuple[tuple[str, float, float], ...] = (
    ("Month", 1, 12),
    ("Day", 1, 31),
    ("Hour", 0, 24),
    ("Minute", 0, 60),
    ("Second", 0, 60),
)


class JulianDate(float):
    """A Julian date that can go anywhere a ``float`` goes, but still says what it is when printed."""

    @classmethod
    def getJulianDate(cls, year, month, day, hour, minute, second):
        """Julian date of a UTC calendar instant, valid between 1900 and 2100.

        References:
            :cite:t:`vallado_2013_astro`, Algorithm 14

        Raises:
            ``ValueError``: a calendar field is out of range.
        """
        for (field, lower, upper), value in zip(_CALENDAR_LIMITS, (month, day, hour, minute, second)):
            if not lower <= value <= upper:
                raise ValueError(f"JulianDate: {field} must be within [{lower}, {upper}], not {value}")

        day_number = (
            367 * year
            - floor(7 * (year + floor((month + 9) / 12)) / 4)
            + floor(275 * month / 9)
            + day
            + 1721013.5
        )
        return cls(day_number + (hour * 3600 + minute * 60 + second) / const.DAYS2SEC)

    def __repr__(self):
        iso = julianDateToDatetime(self).isoformat(timespec="microseconds")
        return f"JulianDate({float(self)}, ISO={iso})"

    __str__ = __repr__


def datetimeToJulianDate(date_time: datetime) -> JulianDate:
    """:class:`.JulianDate` of a naive UTC ``datetime``, keeping its microseconds."""
    return JulianDate.getJulianDate(
        date_time.year,
        date_time.month,
        date_time.day,
        date_time.hour,
        date_time.minute,
        date_time.second + date_time.microsecond * 1e-6,
    )


def julianDateToDatetime(julian_date: float) -> datetime:
    """Naive UTC ``datetime`` of a Julian date, rounded to the millisecond.

    A double precision Julian date only resolves about 20 microseconds, so finer digits are noise.
    """
    elapsed = timedelta(days=float(julian_date) - const.J2000_JD)
    return J2000_DATETIME + timedelta(milliseconds=round(elapsed / timedelta(milliseconds=1)))
