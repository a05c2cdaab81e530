"""Provides the Sun & Moon third bodies used by the perturbing force models.

Positions come from the low-precision analytical series in Montenbruck & Gill, which are
accurate to roughly 0.1% for the Sun and a few hundred kilometers for the Moon. This is well
beyond what third-body accelerations on an Earth orbiter require, and avoids shipping a
planetary ephemeris kernel.

References:
    :cite:t:`montenbruck_2012_orbits`, Section 3.3.2
"""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import asarray, cos, sin, stack

# Local Imports
from .. import constants as const

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


OBLIQUITY_J2000: float = 23.43929111 * const.DEG2RAD
"""``float``: obliquity of the ecliptic at J2000, (radians)."""

_ARCSEC: float = const.ARCSEC2RAD


def _julianCenturies(jd) -> ndarray:
    """Julian centuries since J2000 for scalar or array Julian dates."""
    return (asarray(jd, dtype=float) - const.J2000_JD) / const.JULIAN_CENTURY


def _eclipticToEquatorial(radius, longitude, latitude) -> ndarray:
    """Rotate spherical ecliptic coordinates into the J2000 equatorial frame.

    Returns:
        ``ndarray``: 3x1 | Nx3 equatorial position vector(s) (km).
    """
    x_ecl = radius * cos(longitude) * cos(latitude)
    y_ecl = radius * sin(longitude) * cos(latitude)
    z_ecl = radius * sin(latitude)
    c_eps, s_eps = cos(OBLIQUITY_J2000), sin(OBLIQUITY_J2000)
    return stack(
        (x_ecl, c_eps * y_ecl - s_eps * z_ecl, s_eps * y_ecl + c_eps * z_ecl),
        axis=-1,
    )


class ThirdBody(ABC):
    r"""Base class for third body objects.

    Attributes:
        mu (``float``): gravitational parameter, (km^3/sec^2).
        radius (``float``): mean equatorial radius (km).
    """

    mu: float
    radius: float

    @staticmethod
    @abstractmethod
    def getPosition(jd: float) -> ndarray:
        """Calculate the ECI/J2000 position of the body's center at an epoch relative to the Earth.

        Args:
            jd (``float`` | ``Iterable``): :math:`N` epoch(s) at which the position is to be calculated (Julian date).

        Returns:
            ``ndarray``: 3x1 | Nx3 ECI position vector(s) of the body, where :math:`N` is the
            number of ``jd`` values entered (km).
        """
        raise NotImplementedError


class Sun(ThirdBody):
    r"""Sun third body class.

    Attributes:
        mu (``float``): gravitational parameter (km^3/sec^2), from DE430.
        radius (``float``): mean equatorial radius (km), from Vallado.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.38 - 3.41
    """

    mu: float = 1.32712440041939400e11
    radius: float = 696000.0

    @staticmethod
    def getPosition(jd: float) -> ndarray:
        """Calculate the ECI/J2000 position of the Sun's center at an epoch relative to the Earth.

        Args:
            jd (``float`` | ``Iterable``): :math:`N` epoch(s) at which the position is to be calculated (Julian date).

        Returns:
            ``ndarray``: 3x1 | Nx3 ECI position vector(s) of the Sun (km).
        """
        ttt = _julianCenturies(jd)
        mean_anomaly = (357.5256 + 35999.049 * ttt) * const.DEG2RAD
        longitude = (
            282.94 * const.DEG2RAD
            + mean_anomaly
            + (6892.0 * sin(mean_anomaly) + 72.0 * sin(2.0 * mean_anomaly)) * _ARCSEC
        )
        radius = (149.619 - 2.499 * cos(mean_anomaly) - 0.021 * cos(2.0 * mean_anomaly)) * 1.0e6
        return _eclipticToEquatorial(radius, longitude, 0.0 * ttt)


class Moon(ThirdBody):
    r"""Moon third body class.

    Attributes:
        mu (``float``): gravitational parameter, (km^3/sec^2), from DE430.
        radius (``float``): mean equatorial radius (km), from Vallado.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.47
    """

    mu: float = 4902.800066
    radius: float = 1738.0

    @staticmethod
    def getPosition(jd: float) -> ndarray:
        """Calculate the ECI/J2000 position of the Moon's center at an epoch relative to the Earth.

        Args:
            jd (``float`` | ``Iterable``): :math:`N` epoch(s) at which the position is to be calculated (Julian date).

        Returns:
            ``ndarray``: 3x1 | Nx3 ECI position vector(s) of the Moon (km).
        """
        ttt = _julianCenturies(jd)
        # Fundamental arguments: mean longitude, Moon & Sun anomalies, latitude argument, elongation
        l_0 = (218.31617 + 481267.88088 * ttt - 1.3972 * ttt) * const.DEG2RAD
        l_m = (134.96292 + 477198.86753 * ttt) * const.DEG2RAD
        l_s = (357.52543 + 35999.04944 * ttt) * const.DEG2RAD
        f_arg = (93.27283 + 483202.01873 * ttt) * const.DEG2RAD
        d_arg = (297.85027 + 445267.11135 * ttt) * const.DEG2RAD

        longitude = l_0 + _ARCSEC * (
            22640.0 * sin(l_m)
            + 769.0 * sin(2.0 * l_m)
            - 4586.0 * sin(l_m - 2.0 * d_arg)
            + 2370.0 * sin(2.0 * d_arg)
            - 668.0 * sin(l_s)
            - 412.0 * sin(2.0 * f_arg)
            - 212.0 * sin(2.0 * l_m - 2.0 * d_arg)
            - 206.0 * sin(l_m + l_s - 2.0 * d_arg)
            + 192.0 * sin(l_m + 2.0 * d_arg)
            - 165.0 * sin(l_s - 2.0 * d_arg)
            + 148.0 * sin(l_m - l_s)
            - 125.0 * sin(d_arg)
            - 110.0 * sin(l_m + l_s)
            - 55.0 * sin(2.0 * f_arg - 2.0 * d_arg)
        )
        latitude = _ARCSEC * (
            18520.0
            * sin(f_arg + longitude - l_0 + _ARCSEC * (412.0 * sin(2.0 * f_arg) + 541.0 * sin(l_s)))
            - 526.0 * sin(f_arg - 2.0 * d_arg)
            + 44.0 * sin(l_m + f_arg - 2.0 * d_arg)
            - 31.0 * sin(-l_m + f_arg - 2.0 * d_arg)
            - 25.0 * sin(-2.0 * l_m + f_arg)
            - 23.0 * sin(l_s + f_arg - 2.0 * d_arg)
            + 21.0 * sin(-l_m + f_arg)
            + 11.0 * sin(-l_s + f_arg - 2.0 * d_arg)
        )
        radius = (
            385000.0
            - 20905.0 * cos(l_m)
            - 3699.0 * cos(2.0 * d_arg - l_m)
            - 2956.0 * cos(2.0 * d_arg)
            - 570.0 * cos(2.0 * l_m)
            + 246.0 * cos(2.0 * l_m - 2.0 * d_arg)
            - 205.0 * cos(l_s - 2.0 * d_arg)
            - 171.0 * cos(l_m + 2.0 * d_arg)
            - 152.0 * cos(l_m + l_s - 2.0 * d_arg)
        )
        return _eclipticToEquatorial(radius, longitude, latitude)
