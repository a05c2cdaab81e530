"""Functions that define the topocentric geometry of ground station measurements.

Every function accepts a single 3x1 SEZ slant range vector or a stack of them with shape
``(..., 3)``, so a whole set of candidate states is evaluated in one call.
"""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import arcsin, arctan2, asarray, einsum, mod
from numpy.linalg import norm

# Local Imports
from .constants import TWOPI

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


def getSlantRangeSEZ(position_ecef: ndarray, station_ecef: ndarray, ecef_2_sez: ndarray) -> ndarray:
    """Rotate the station to satellite vector(s) into the station's SEZ frame.

    Args:
        position_ecef (``ndarray``): 3x1 | Kx3 ECEF satellite position(s), (km)
        station_ecef (``ndarray``): 3x1 ECEF station position, (km)
        ecef_2_sez (``ndarray``): 3x3 rotation from ECEF into the station's SEZ frame

    Returns:
        ``ndarray``: 3x1 | Kx3 SEZ slant range vector(s), (km)
    """
    relative = asarray(position_ecef) - station_ecef
    return einsum("ij,...j->...i", ecef_2_sez, relative)


def getAzimuth(slant_range_sez: ndarray) -> ndarray:
    r"""Calculate the azimuth angle for slant range vector(s).

    Note:
        The zenith singularity is not special-cased, the azimuth there is whatever ``arctan2``
        returns for a vanishing horizontal component.

    References:
        :cite:t:`vallado_2013_astro`, Section 4.4.3, Algorithm 27

    Args:
        slant_range_sez (``ndarray``): 3x1 | Kx3 slant range vector(s) in SEZ frame (km)

    Returns:
        ``ndarray``: azimuth angle(s) in radians, :math:`[0, 2\pi)`.
    """
    slant_range_sez = asarray(slant_range_sez)
    return mod(arctan2(slant_range_sez[..., 1], -slant_range_sez[..., 0]), TWOPI)


def getElevation(slant_range_sez: ndarray) -> ndarray:
    r"""Calculate the elevation angle for slant range vector(s).

    References:
        :cite:t:`vallado_2013_astro`, Section 4.4.3, Algorithm 27

    Args:
        slant_range_sez (``ndarray``): 3x1 | Kx3 slant range vector(s) in SEZ frame (km)

    Returns:
        ``ndarray``: elevation angle(s) in radians, :math:`[\frac{-\pi}{2}, \frac{\pi}{2}]`
    """
    slant_range_sez = asarray(slant_range_sez)
    return arcsin(slant_range_sez[..., 2] / getRange(slant_range_sez))


def getRange(slant_range_sez: ndarray) -> ndarray:
    """Calculate the range (i.e. euclidean norm) for slant range vector(s), (km)."""
    return norm(asarray(slant_range_sez)[..., :3], axis=-1)
