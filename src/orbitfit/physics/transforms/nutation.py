"""Bundled IAU-1980 nutation series used by the FK5 reduction."""

from __future__ import annotations

# Standard Library Imports
from functools import lru_cache
from importlib import resources
from typing import TYPE_CHECKING, NamedTuple

# Third Party Imports
from numpy import array

# Local Imports
from ...common.utilities import loadDatFile
from .. import constants as const

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


NUTATION_DATA: str = "orbitfit.physics.data.nutation"
"""``str``: package holding the nutation tables."""

NUT80_FILE: str = "nut80.dat"
"""``str``: IAU-1980 series, truncated to its largest 30 terms."""

_NUT80_UNITS: float = 1e-4 * const.ARCSEC2RAD
"""``float``: amplitudes are tabulated in units of 0.0001 arcsec."""


class NutationSeries(NamedTuple):
    """Terms of a nutation series, one row per term."""

    coefficients: ndarray
    """``ndarray``: Nx4 longitude & obliquity amplitudes :math:`A, B, C, D`, (radians)."""

    multipliers: ndarray
    """``ndarray``: Nx5 integer multipliers of the Delaunay arguments."""


@lru_cache(maxsize=1)
def get1980NutationSeries() -> NutationSeries:
    """Load the IAU-1980 series, reading the bundled table only once.

    References:
        :cite:t:`vallado_2013_astro`, Eqn 3-83, Pg. 226
    """
    with resources.as_file(resources.files(NUTATION_DATA).joinpath(NUT80_FILE)) as table:
        rows = array(loadDatFile(table))

    # Columns 9+ hold the term index, which is only there for reference
    return NutationSeries(coefficients=rows[:, 5:9] * _NUT80_UNITS, multipliers=rows[:, :5])
