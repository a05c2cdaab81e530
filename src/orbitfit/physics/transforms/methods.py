"""Defines reference frame & coordinate system conversion functions.

Inertial states reach ECEF through the pseudo Earth-fixed frame (PEF) of an :class:`.FK5Reduction`.
ECI uses the full precession, nutation & sidereal rotation, TEME only the mean sidereal one.
"""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import (
    arccos,
    arctan,
    arctan2,
    array,
    asarray,
    concatenate,
    cos,
    cross,
    eye,
    finfo,
    float64,
    sign,
    sin,
    sqrt,
)

# Local Imports
from ...common.labels import FrameLabel
from .. import constants as const
from ..bodies import Earth
from ..maths import rot2, rot3
from .reductions import FK5Reduction

if TYPE_CHECKING:
    # Standard Library Imports
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

# ruff: noqa: N806


def _inertialToECEF(state: ndarray, to_pef: ndarray, reduction: FK5Reduction) -> ndarray:
    """Rotate an inertial 6x1 state into ECEF, removing the transport velocity in PEF."""
    r_pef = to_pef @ state[:3]
    v_pef = to_pef @ state[3:6] - cross(reduction.omega, r_pef)
    return concatenate((reduction.rot_w.T @ r_pef, reduction.rot_w.T @ v_pef))


def _ecefToInertial(state: ndarray, from_pef: ndarray, reduction: FK5Reduction) -> ndarray:
    """Inverse of :func:`._inertialToECEF`."""
    r_pef = reduction.rot_w @ state[:3]
    v_pef = reduction.rot_w @ state[3:6] + cross(reduction.omega, r_pef)
    return concatenate((from_pef @ r_pef, from_pef @ v_pef))


def eci2ecef(x_eci: ndarray, utc_date: datetime) -> ndarray:
    """Convert an ECI state vector into an ECEF state vector.

    References:
        :cite:t:`vallado_2013_astro`, Sections 3.7 - 3.7.2

    Args:
        x_eci (``np.ndarray``): 6x1 ECI state vector, (km; km/sec)
        utc_date (``datetime``): UTC date and time that this transformation takes place.

    Returns:
        (``np.ndarray``): 6x1 ECEF state vector, (km; km/sec)
    """
    reduction = FK5Reduction.build(utc_date)
    return _inertialToECEF(x_eci, reduction.pef_2_eci.T, reduction)


def ecef2eci(x_ecef: ndarray, utc_date: datetime) -> ndarray:
    """Convert an ECEF state vector into an ECI state vector, the inverse of :func:`.eci2ecef`."""
    reduction = FK5Reduction.build(utc_date)
    return _ecefToInertial(x_ecef, reduction.pef_2_eci, reduction)


def teme2ecef(x_teme: ndarray, utc_date: datetime) -> ndarray:
    """Convert an SGP4 output state vector (TEME) into an ECEF state vector.

    References:
        :cite:t:`vallado_2013_astro`, Section 3.7.4

    Args:
        x_teme (``ndarray``): 6x1 TEME state vector (km; km/sec)
        utc_date (``datetime``): Epoch corresponding to when the transformation takes place

    Returns:
        ``ndarray``: 6x1 ECEF state vector (km; km/sec)
    """
    reduction = FK5Reduction.build(utc_date)
    return _inertialToECEF(x_teme, reduction.teme_2_pef, reduction)


def ecef2teme(x_ecef: ndarray, utc_date: datetime) -> ndarray:
    """Convert an ECEF state vector into a TEME state vector, the inverse of :func:`.teme2ecef`."""
    reduction = FK5Reduction.build(utc_date)
    return _ecefToInertial(x_ecef, reduction.teme_2_pef.T, reduction)


def positionRotationToECEF(frame: FrameLabel, utc_date: datetime) -> ndarray:
    """Rotation matrix taking *position* vectors from `frame` into ECEF at `utc_date`.

    Args:
        frame (:class:`.FrameLabel`): source frame.
        utc_date (``datetime``): UTC epoch of the rotation.

    Returns:
        ``ndarray``: 3x3 rotation matrix.
    """
    if frame == FrameLabel.ECEF:
        return eye(3)

    reduction = FK5Reduction.build(utc_date)
    if frame == FrameLabel.ECI:
        return reduction.ecef_2_eci.T
    if frame == FrameLabel.TEME:
        return reduction.rot_w.T @ reduction.teme_2_pef

    raise ValueError(f"Unsupported reference frame: {frame}")


_TO_ECEF = {
    FrameLabel.ECI: eci2ecef,
    FrameLabel.TEME: teme2ecef,
}

_FROM_ECEF = {
    FrameLabel.ECI: ecef2eci,
    FrameLabel.TEME: ecef2teme,
}


def convertFrame(state: ndarray, from_frame: FrameLabel, to_frame: FrameLabel, utc_date: datetime) -> ndarray:
    """Express a 6x1 state vector in another reference frame, pivoting through ECEF.

    Args:
        state (``ndarray``): 6x1 state vector, (km; km/sec)
        from_frame (:class:`.FrameLabel`): frame `state` is expressed in.
        to_frame (:class:`.FrameLabel`): frame to express the result in.
        utc_date (``datetime``): UTC epoch of `state`.

    Returns:
        ``ndarray``: 6x1 state vector in `to_frame`, (km; km/sec)
    """
    state = asarray(state, dtype=float)
    from_frame, to_frame = FrameLabel(from_frame), FrameLabel(to_frame)
    if from_frame == to_frame:
        return state.copy()

    ecef = state if from_frame == FrameLabel.ECEF else _TO_ECEF[from_frame](state, utc_date)
    if to_frame == FrameLabel.ECEF:
        return ecef
    return _FROM_ECEF[to_frame](ecef, utc_date)


def ecef2sezRotation(lat: float, lon: float) -> ndarray:
    """Rotation from ECEF into the topocentric south-east-zenith frame at a geodetic location.

    References:
        :cite:t:`vallado_2013_astro`, Eqn 3-28

    Args:
        lat (``float``): geodetic latitude, (radians)
        lon (``float``): longitude, (radians)
    """
    return rot2(const.PI / 2 - lat) @ rot3(lon)


def ecef2sez(x_ecef: ndarray, lat: float, lon: float) -> ndarray:
    """Rotate an observer-relative ECEF position (3x1) or state (6x1) into SEZ.

    Args:
        x_ecef (``ndarray``): ECEF vector **relative** to the observer, (km; km/sec)
        lat (``float``): observer geodetic latitude, (radians)
        lon (``float``): observer longitude, (radians)
    """
    rotation = ecef2sezRotation(lat, lon)
    return concatenate([rotation @ x_ecef[start : start + 3] for start in range(0, len(x_ecef), 3)])


def lla2ecef(x_lla: ndarray) -> ndarray:
    """6x1 ECEF state of a fixed site from geodetic latitude, longitude & ellipsoidal height.

    References:
        :cite:t:`vallado_2013_astro`, Eqn 3-7

    Args:
        x_lla (``ndarray``): latitude, longitude & altitude, (radians, radians, km)
    """
    lat, lon, alt = x_lla[:3]
    ecc_sq = Earth.eccentricity**2
    # Radius of curvature in the prime vertical
    c_earth = Earth.radius / sqrt(1.0 - ecc_sq * sin(lat) ** 2)

    r_equatorial = (c_earth + alt) * cos(lat)
    return array(
        [
            r_equatorial * cos(lon),
            r_equatorial * sin(lon),
            (c_earth * (1.0 - ecc_sq) + alt) * sin(lat),
            0.0,
            0.0,
            0.0,
        ],
    )


def ecef2lla(x_ecef: ndarray) -> ndarray:
    """Geodetic latitude, longitude & ellipsoidal height of an ECEF position, in closed form.

    References:
        :cite:t:`vallado_2013_astro`, Algorithm 13

    Args:
        x_ecef (``ndarray``): 3x1 | 6x1 ECEF vector, (km; km/sec)

    Returns:
        ``ndarray``: latitude, longitude & altitude, (radians, radians, km)
    """
    r_i, r_j, r_k = x_ecef[:3]
    a = Earth.radius
    # Polar radius, signed by hemisphere
    b = a * sqrt(1.0 - Earth.eccentricity**2) * (sign(r_k) if r_k != 0 else 1.0)
    # The pole-axis distance is only zero at the poles & the origin
    r_delta = max(sqrt(r_i * r_i + r_j * r_j), finfo(float64).eps)

    focal = a * a - b * b
    E = (b * r_k - focal) / (a * r_delta)
    F = (b * r_k + focal) / (a * r_delta)
    P = 4.0 * (E * F + 1.0) / 3.0
    Q = 2.0 * (E * E - F * F)
    D = P**3 + Q * Q
    if D >= 0:
        nu = (sqrt(D) - Q) ** (1.0 / 3.0) - (sqrt(D) + Q) ** (1.0 / 3.0)
    else:
        nu = 2.0 * sqrt(-P) * cos(arccos(Q / (P * sqrt(-P))) / 3.0)
    G = 0.5 * (sqrt(E * E + nu) + E)
    t = sqrt(G * G + (F - nu * G) / (2.0 * G - E)) - G

    lat = arctan(a * (1.0 - t * t) / (2.0 * b * t))
    alt = (r_delta - a * t) * cos(lat) + (r_k - b) * sin(lat)
    return array([lat, arctan2(r_j, r_i), alt])
