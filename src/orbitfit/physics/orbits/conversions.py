"""Conversions between inertial Cartesian states, classical elements (COEs) & equinoctial elements (EQEs)."""

from __future__ import annotations

# Third Party Imports
from numpy import arccos, arctan2, array, concatenate, cos, cross, ndarray, sin, sqrt, tan, vdot
from scipy.linalg import norm

# Local Imports
from ..bodies import Earth
from ..maths import fpe_equals, rot1, rot3, wrapAngle2Pi
from . import isEccentric, isInclined
from .utils import (
    angleFromCosine,
    getEccentricity,
    getEccentricityFromEQE,
    getEquinoctialBasisVectors,
    getInclinationFromEQE,
    getSemiMajorAxis,
)

# ruff: noqa: N806

OrbitalElementTuple = tuple[float, float, float, float, float, float]

_K_HAT: ndarray = array([0.0, 0.0, 1.0])


def coe2eci(
    sma: float,
    ecc: float,
    inc: float,
    raan: float,
    argp: float,
    true_anom: float,
    mu: float = Earth.mu,
) -> ndarray:
    r"""Inertial state from classical elements, through the perifocal frame.

    References:
        :cite:t:`vallado_2013_astro`, Algorithm 10

    Args:
        sma (``float``): semi-major axis, :math:`a` (km).
        ecc (``float``): eccentricity, :math:`e\in[0,1)`.
        inc (``float``): inclination, :math:`i\in[0,\pi]`, (radians).
        raan (``float``): right ascension of the ascending node, :math:`\Omega`, (radians).
        argp (``float``): argument of perigee, :math:`\omega`, (radians).
        true_anom (``float``): true anomaly, :math:`\nu`, (radians).
        mu (``float``, optional): gravitational parameter, (km^3/sec^2). Defaults to :attr:`.Earth.mu`.

    Returns:
        ``ndarray``: 6x1 inertial state vector (km; km/sec).
    """
    semi_latus = sma * (1.0 - ecc * ecc)
    radius = semi_latus / (1.0 + ecc * cos(true_anom))
    r_pqw = radius * array([cos(true_anom), sin(true_anom), 0.0])
    v_pqw = sqrt(mu / semi_latus) * array([-sin(true_anom), ecc + cos(true_anom), 0.0])

    pqw_2_eci = rot3(-raan) @ rot1(-inc) @ rot3(-argp)
    return concatenate((pqw_2_eci @ r_pqw, pqw_2_eci @ v_pqw))


def eci2coe(eci_state: ndarray, mu: float = Earth.mu) -> OrbitalElementTuple:
    r"""Classical elements of an inertial state.

    Circular and/or equatorial orbits report their undefined angles as zero, and carry the
    anomaly as the argument of latitude, the true longitude of periapsis, or the true longitude.

    References:
        :cite:t:`vallado_2013_astro`, Algorithm 9

    Args:
        eci_state (``ndarray``): 6x1 inertial state vector (km; km/sec).
        mu (``float``, optional): gravitational parameter, (km^3/sec^2). Defaults to :attr:`.Earth.mu`.

    Returns:
        ``tuple``: (sma, ecc, inc, raan, argp, true_anom), (km, unit-less, radians...).
    """
    r_vec, v_vec = array(eci_state[:3], dtype=float), array(eci_state[3:], dtype=float)
    r_mag = norm(r_vec)

    sma = getSemiMajorAxis(r_mag, norm(v_vec), mu=mu)
    h_vec = cross(r_vec, v_vec)
    inc = arccos(h_vec[2] / norm(h_vec))
    ecc, e_hat = getEccentricity(r_vec, v_vec, mu=mu)

    n_vec = cross(_K_HAT, h_vec)
    if not fpe_equals(norm(n_vec), 0.0):
        n_vec /= norm(n_vec)

    inclined, eccentric = isInclined(inc), isEccentric(ecc)
    raan = angleFromCosine(n_vec[0], n_vec[1]) if inclined else 0.0
    if eccentric:
        # Equatorial orbits measure perigee from the vernal equinox instead of the node
        argp = angleFromCosine(vdot(n_vec, e_hat), e_hat[2]) if inclined else angleFromCosine(e_hat[0], e_hat[1])
        anom = angleFromCosine(vdot(e_hat, r_vec) / r_mag, vdot(r_vec, v_vec))
    elif inclined:
        argp = 0.0
        anom = angleFromCosine(vdot(n_vec, r_vec) / r_mag, r_vec[2])
    else:
        argp = 0.0
        anom = angleFromCosine(r_vec[0] / r_mag, r_vec[1])

    return sma, ecc, inc, raan, argp, anom


def eci2eqe(eci_state: ndarray, mu: float = Earth.mu) -> OrbitalElementTuple:
    r"""Prograde equinoctial elements of an inertial state.

    The prograde set is singular only for exactly retrograde equatorial orbits.

    References:
        :cite:t:`danielson_1995_sast`, Section 2.1.5

    Args:
        eci_state (``ndarray``): 6x1 inertial state vector (km; km/sec).
        mu (``float``, optional): gravitational parameter, (km^3/sec^2). Defaults to :attr:`.Earth.mu`.

    Returns:
        ``tuple``: :math:`(a, h, k, p, q, \lambda_M)` where :math:`h, k` project the eccentricity
        vector on :math:`\hat{g}, \hat{f}`, :math:`p, q` are :math:`\tan(i/2)\sin\Omega` &
        :math:`\tan(i/2)\cos\Omega`, and the mean longitude is in :math:`[0,2\pi)`.
    """
    r_vec, v_vec = array(eci_state[:3], dtype=float), array(eci_state[3:], dtype=float)
    sma = getSemiMajorAxis(norm(r_vec), norm(v_vec), mu=mu)

    w_hat = cross(r_vec, v_vec)
    w_hat /= norm(w_hat)
    p = w_hat[0] / (1.0 + w_hat[2])
    q = -w_hat[1] / (1.0 + w_hat[2])
    f_hat, g_hat = getEquinoctialBasisVectors(p, q)

    ecc, e_hat = getEccentricity(r_vec, v_vec, mu=mu)
    h = ecc * vdot(e_hat, g_hat)
    k = ecc * vdot(e_hat, f_hat)

    # Eccentric longitude from the in-plane position, Danielson 2.1.5 Eqn 4
    X, Y = vdot(r_vec, f_hat), vdot(r_vec, g_hat)
    root = sqrt(1.0 - h * h - k * k)
    beta = 1.0 / (1.0 + root)
    F = arctan2(
        h + ((1.0 - h * h * beta) * Y - h * k * beta * X) / (sma * root),
        k + ((1.0 - k * k * beta) * X - h * k * beta * Y) / (sma * root),
    )

    # Kepler equation in equinoctial form, Danielson Section 2.1.4 Eqn 2
    return sma, h, k, p, q, wrapAngle2Pi(F + h * cos(F) - k * sin(F))


def eqe2MeanCOE(h: float, k: float, p: float, q: float, mean_long: float) -> tuple[float, float, float, float, float]:
    r"""Convert the angular prograde EQEs to classical elements with a *mean* anomaly.

    No Kepler solve is needed, so this is exact for mean element sets such as two-line elements.

    Args:
        h (``float``): eccentricity term, :math:`h=e\sin(\omega + \Omega)`.
        k (``float``): eccentricity term, :math:`k=e\cos(\omega + \Omega)`.
        p (``float``): inclination term, :math:`p=\tan(\frac{i}{2})\sin(\Omega)`.
        q (``float``): inclination term, :math:`q=\tan(\frac{i}{2})\cos(\Omega)`.
        mean_long (``float``): mean longitude, :math:`\lambda_M`, in radians.

    Returns:
        ``tuple``: (ecc, inc, raan, argp, mean_anom), angles in radians within :math:`[0,2\pi)`.
    """
    ecc = getEccentricityFromEQE(h, k)
    inc = getInclinationFromEQE(p, q)
    raan = wrapAngle2Pi(arctan2(p, q)) if isInclined(inc) else 0.0
    long_periapsis = arctan2(h, k) if isEccentric(ecc) else raan
    argp = wrapAngle2Pi(long_periapsis - raan)
    mean_anom = wrapAngle2Pi(mean_long - long_periapsis)
    return ecc, inc, raan, argp, mean_anom


def meanCOE2EQE(ecc: float, inc: float, raan: float, argp: float, mean_anom: float) -> tuple[float, float, float, float, float]:
    r"""Inverse of :func:`.eqe2MeanCOE`, returns (h, k, p, q, mean_long)."""
    long_periapsis = argp + raan
    tan_half_inc = tan(0.5 * inc)
    return (
        ecc * sin(long_periapsis),
        ecc * cos(long_periapsis),
        tan_half_inc * sin(raan),
        tan_half_inc * cos(raan),
        wrapAngle2Pi(mean_anom + long_periapsis),
    )
