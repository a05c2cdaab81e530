"""The orbits package converts between Cartesian states & orbital element sets.

Classical elements describe states for humans, while equinoctial elements are non-singular for
the near-circular, near-equatorial orbits that dominate two-line element catalogs, which makes
them the estimation parameters of the SGP4 propagator.

References:
    :cite:t:`vallado_2003_aiaa_covariance`, Pg 11
"""

from __future__ import annotations

# Local Imports
from .. import constants as const

ECCENTRICITY_LIMIT: float = 1e-7
"""``float``: eccentricities below this are treated as circular (:cite:p:`vallado_2003_aiaa_covariance`)."""

INCLINATION_LIMIT: float = 1e-7 * const.DEG2RAD
"""``float``: inclinations within this of 0 or 180 degrees are treated as equatorial, (radians)."""


class InvalidElementError(ValueError):
    """An orbital element lies outside the range describing a closed orbit."""


def fixAngleQuadrant(angle: float, check: float) -> float:
    r"""Resolve the quadrant :math:`\arccos` loses, giving :math:`2\pi - \theta` when `check` is negative.

    References:
        :cite:t:`vallado_2013_astro`, Algorithm 9
    """
    return const.TWOPI - angle if check < 0.0 else angle


def isInclined(inc: float, tol: float = INCLINATION_LIMIT) -> bool:
    r"""Whether an inclination in :math:`[0, \pi]` radians is numerically away from the equator.

    Raises:
        :class:`.InvalidElementError`: `inc` is outside :math:`[0, \pi]`.
    """
    if not 0.0 <= inc <= const.PI:
        raise InvalidElementError(f"Invalid inclination, must be in [0, 180]. inc={inc * const.RAD2DEG:.1f} deg")
    return tol <= inc <= const.PI - tol


def isEccentric(ecc: float, tol: float = ECCENTRICITY_LIMIT) -> bool:
    """Whether an eccentricity is numerically non-circular.

    Raises:
        :class:`.InvalidElementError`: `ecc` is negative or describes an open orbit.
    """
    if not 0.0 <= ecc <= 1.0 - tol:
        raise InvalidElementError(f"Invalid eccentricity, must be in [0, 1 - tol). ecc={ecc:.2f}")
    return ecc >= tol
