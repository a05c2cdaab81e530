"""Sources of daily Earth orientation parameters, plus the leap second table."""

from __future__ import annotations

# Standard Library Imports
import datetime
from abc import ABC, abstractmethod
from bisect import bisect_right
from pathlib import Path

# Local Imports
from ....common.utilities import loadDatFile
from ... import constants as const
from . import EarthOrientationParameter, MissingEOP

LEAP_SECONDS: tuple[tuple[datetime.date, int], ...] = (
    (datetime.date(1972, 1, 1), 10),
    (datetime.date(1972, 7, 1), 11),
    (datetime.date(1973, 1, 1), 12),
    (datetime.date(1974, 1, 1), 13),
    (datetime.date(1975, 1, 1), 14),
    (datetime.date(1976, 1, 1), 15),
    (datetime.date(1977, 1, 1), 16),
    (datetime.date(1978, 1, 1), 17),
    (datetime.date(1979, 1, 1), 18),
    (datetime.date(1980, 1, 1), 19),
    (datetime.date(1981, 7, 1), 20),
    (datetime.date(1982, 7, 1), 21),
    (datetime.date(1983, 7, 1), 22),
    (datetime.date(1985, 7, 1), 23),
    (datetime.date(1988, 1, 1), 24),
    (datetime.date(1990, 1, 1), 25),
    (datetime.date(1991, 1, 1), 26),
    (datetime.date(1992, 7, 1), 27),
    (datetime.date(1993, 7, 1), 28),
    (datetime.date(1994, 7, 1), 29),
    (datetime.date(1996, 1, 1), 30),
    (datetime.date(1997, 7, 1), 31),
    (datetime.date(1999, 1, 1), 32),
    (datetime.date(2006, 1, 1), 33),
    (datetime.date(2009, 1, 1), 34),
    (datetime.date(2012, 7, 1), 35),
    (datetime.date(2015, 7, 1), 36),
    (datetime.date(2017, 1, 1), 37),
)
"""``tuple``: (effective date, TAI - UTC in seconds) pairs, in ascending order."""


def getLeapSeconds(eop_date: datetime.date) -> int:
    """Return TAI - UTC, in whole seconds, in effect on `eop_date`.

    Raises:
        :class:`.MissingEOP`: `eop_date` precedes the first leap second entry.
    """
    index = bisect_right([entry[0] for entry in LEAP_SECONDS], eop_date)
    if index == 0:
        msg = f"No leap second data before {LEAP_SECONDS[0][0]}: {eop_date}"
        raise MissingEOP(msg)
    return LEAP_SECONDS[index - 1][1]


class EOPLoader(ABC):
    """Daily EOP values from one source, read lazily on first lookup.

    Values stored through :meth:`.setEOPData` take precedence over the source's own.
    """

    def __init__(self, location: str):
        """Remember where the EOP source lives, without reading it yet.

        Args:
            location (``str``): where the EOP content to load is located.
        """
        self._location: str = location
        self._eop_data: dict[datetime.date, EarthOrientationParameter] = {}
        self._is_loaded: bool = False

    @abstractmethod
    def load(self):
        """Read the source into :attr:`._eop_data`."""
        raise NotImplementedError

    def _missing(self, eop_date: datetime.date) -> EarthOrientationParameter:
        """Values for a date the source does not cover.

        Raises:
            :class:`.MissingEOP`: always, unless a subclass can synthesize values.
        """
        raise MissingEOP(f"Could not retrieve EOP data for specified date: {eop_date}")

    def getEarthOrientationParameters(self, eop_date: datetime.date) -> EarthOrientationParameter:
        """Return the :class:`.EarthOrientationParameter` valid on `eop_date`."""
        if not self._is_loaded:
            self.load()
            self._is_loaded = True

        if eop_date not in self._eop_data:
            self._eop_data[eop_date] = self._missing(eop_date)
        return self._eop_data[eop_date]

    def setEOPData(self, eop_date: datetime.date, eops: EarthOrientationParameter):
        """Store `eops` as the values for `eop_date`, which may also be a ``datetime``.

        Raises:
            ``TypeError``: `eop_date` is neither a ``date`` nor a ``datetime``.
        """
        if not isinstance(eop_date, datetime.date):
            raise TypeError(f"Unexpected 'eop_date' type: {type(eop_date)}")
        if isinstance(eop_date, datetime.datetime):
            eop_date = eop_date.date()
        self._eop_data[eop_date] = eops


class LeapSecondEOPLoader(EOPLoader):
    """Zero-valued EOPs carrying only the leap seconds, so no data file is needed.

    Polar motion, dUT1, length of day & the nutation corrections are all zero, which keeps frame
    transformations consistent at the meter level.
    """

    def load(self):
        """Nothing to read; values are synthesized per date."""

    def _missing(self, eop_date: datetime.date) -> EarthOrientationParameter:
        return EarthOrientationParameter.leapSecondsOnly(eop_date, getLeapSeconds(eop_date))


class LocalDotDatEOPLoader(EOPLoader):
    """EOPs from a local, whitespace separated Celestrak-style ``.dat`` file.

    Each row holds: year, month, day, MJD, x_p (arcsec), y_p (arcsec), dUT1 (s), LOD (s),
    dPsi (arcsec), dEps (arcsec), dX, dY, TAI - UTC (s).
    """

    def load(self):
        """Parse every row of the file."""
        for row in loadDatFile(Path(self._location)):
            year, month, day, _, x_p, y_p, dut1, lod, d_psi, d_eps = row[:10]
            eop_date = datetime.date(int(year), int(month), int(day))
            self._eop_data.setdefault(
                eop_date,
                EarthOrientationParameter(
                    date=eop_date,
                    x_p=x_p * const.ARCSEC2RAD,
                    y_p=y_p * const.ARCSEC2RAD,
                    d_delta_psi=d_psi * const.ARCSEC2RAD,
                    d_delta_eps=d_eps * const.ARCSEC2RAD,
                    delta_ut1=dut1,
                    length_of_day=lod,
                    delta_atomic_time=int(row[12]),
                ),
            )
