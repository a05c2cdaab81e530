"""Module selecting the :class:`.EOPLoader` that EOP lookups go through."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING, NamedTuple

# Local Imports
from ....common.behavioral_config import BehavioralConfig
from .loaders import LeapSecondEOPLoader, LocalDotDatEOPLoader

if TYPE_CHECKING:
    # Standard Library Imports
    import datetime

    # Local Imports
    from . import EarthOrientationParameter
    from .loaders import EOPLoader


class LoaderTag(NamedTuple):
    """Key identifying a configured :class:`.EOPLoader`."""

    loader_name: str
    loader_location: str


_LOADER_MAP: dict[str, type[EOPLoader]] = {
    loader.__name__: loader for loader in (LeapSecondEOPLoader, LocalDotDatEOPLoader)
}
"""``dict``: loader classes by class name, as named in the ``eop`` configuration section."""

_EOP_LOADERS: dict[LoaderTag, EOPLoader] = {}
"""``dict``: loaders already built, so each EOP source is read at most once."""


def _loadLoader(loader_name: str | None = None, loader_location: str | None = None) -> EOPLoader:
    """Return the loader for `loader_name` & `loader_location`, building it on first use.

    Unspecified arguments come from the ``eop`` configuration section.

    Raises:
        ``ValueError``: the named loader does not exist.
    """
    eop_config = BehavioralConfig.getConfig().eop
    tag = LoaderTag(
        eop_config.LoaderName if loader_name is None else loader_name,
        eop_config.LoaderLocation if loader_location is None else loader_location,
    )
    if tag not in _EOP_LOADERS:
        if tag.loader_name not in _LOADER_MAP:
            raise ValueError(f"Specified loader '{tag.loader_name}' is undefined")
        _EOP_LOADERS[tag] = _LOADER_MAP[tag.loader_name](tag.loader_location)
    return _EOP_LOADERS[tag]


def getEarthOrientationParameters(
    eop_date: datetime.date,
    loader_name: str | None = None,
    loader_location: str | None = None,
) -> EarthOrientationParameter:
    """Return the :class:`.EarthOrientationParameter` for the specified calendar date.

    Args:
        eop_date (``datetime.date``): Date at which to get EOP values.
        loader_name (``str``, optional): name of the concrete :class:`.EOPLoader` implementation.
        loader_location (``str``, optional): location the :class:`.EOPLoader` reads EOP data from.

    Raises:
        :class:`.MissingEOP`: the configured EOP data has no entry for the specified date.
    """
    return _loadLoader(loader_name, loader_location).getEarthOrientationParameters(eop_date)


def setEarthOrientationParameters(
    eop_date: datetime.date,
    eop_data: EarthOrientationParameter,
    loader_name: str | None = None,
    loader_location: str | None = None,
):
    """Override the EOP values a loader returns for `eop_date`."""
    _loadLoader(loader_name, loader_location).setEOPData(eop_date, eop_data)
