"""Element-level helpers shared by the Cartesian & element conversions."""

from __future__ import annotations

# Third Party Imports
from numpy import arctan, array, ndarray, sqrt, vdot
from scipy.linalg import norm

# Local Imports
from ..bodies import Earth
from ..maths import fpe_equals, safeArccos
from . import InvalidElementError, fixAngleQuadrant


def angleFromCosine(cos_angle: float, check: float) -> float:
    r"""Angle in :math:`[0,2\pi)` from its cosine, in the lower half-plane when `check` is negative.

    Every classical angle follows this pattern with a different cosine & sign check:

    ========================  ==================================  ==========================
    Angle                     Cosine                              Check
    ========================  ==================================  ==========================
    :math:`\Omega`            :math:`\hat{n}_x`                   :math:`\hat{n}_y`
    :math:`\omega`            :math:`\hat{n}\cdot\hat{e}`         :math:`\hat{e}_z`
    :math:`\nu`               :math:`\hat{e}\cdot\hat{r}`         :math:`\vec{r}\cdot\vec{v}`
    :math:`u`                 :math:`\hat{n}\cdot\hat{r}`         :math:`r_z`
    :math:`\tilde{\omega}`    :math:`\hat{e}_x`                   :math:`\hat{e}_y`
    :math:`\lambda_{true}`    :math:`\hat{r}_x`                   :math:`r_y`
    ========================  ==================================  ==========================

    References:
        :cite:t:`vallado_2013_astro`, Eqn 2-84 - 2-92
    """
    return fixAngleQuadrant(safeArccos(cos_angle), check)


def getInclinationFromEQE(p: float, q: float) -> float:
    r"""Prograde inclination, :math:`i\in[0,\pi)`, from EQE :math:`p` & :math:`q` (Danielson 2.1.3 Eqn 2)."""
    return 2.0 * arctan(sqrt(p**2 + q**2))


def getEccentricityFromEQE(h: float, k: float) -> float:
    r"""Eccentricity from EQE :math:`h` & :math:`k` (Danielson 2.1.3 Eqn 2).

    Raises:
        :class:`.InvalidElementError`: the terms describe an open orbit.
    """
    if (ecc := sqrt(h**2 + k**2)) >= 1.0:
        raise InvalidElementError(f"Parabolic or hyperbolic orbit. ecc={ecc}")
    return ecc


def getEquinoctialBasisVectors(p: float, q: float) -> tuple[ndarray, ndarray]:
    r"""In-plane basis vectors :math:`\hat{f}` & :math:`\hat{g}` of the prograde equinoctial frame.

    References:
        :cite:t:`danielson_1995_sast`, Section 2.1.4, Eqn 1
    """
    scale = 1.0 / (1.0 + p * p + q * q)
    f_hat = scale * array([1.0 - p * p + q * q, 2.0 * p * q, -2.0 * p])
    g_hat = scale * array([2.0 * p * q, 1.0 + p * p - q * q, 2.0 * q])
    return f_hat, g_hat


def getEccentricity(r_vec: ndarray, v_vec: ndarray, mu: float = Earth.mu) -> tuple[float, ndarray]:
    r"""Eccentricity & its direction from an inertial position & velocity (Vallado Eqn 2-78).

    Args:
        r_vec (``ndarray``): 3x1 inertial position, (km).
        v_vec (``ndarray``): 3x1 inertial velocity, (km/sec).
        mu (``float``, optional): gravitational parameter, (km^3/sec^2). Defaults to :attr:`.Earth.mu`.

    Returns:
        ``tuple``: :math:`e` and the unit vector :math:`\hat{e}`. A circular orbit returns its
        near-zero raw eccentricity vector instead of a unit vector.
    """
    ecc_vec = (vdot(v_vec, v_vec) - mu / norm(r_vec)) * r_vec - vdot(r_vec, v_vec) * v_vec
    ecc_vec /= mu
    ecc = norm(ecc_vec)
    if fpe_equals(ecc, 0.0):
        return ecc, ecc_vec
    return ecc, ecc_vec / ecc


def getSemiMajorAxis(r: float, v: float, mu: float = Earth.mu) -> float:
    """Semi-major axis from the vis-viva energy, (km)."""
    return mu / (2.0 * mu / r - v * v)
