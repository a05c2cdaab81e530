"""Earth orientation rotations relating the inertial & Earth-fixed frames.

Implements the IAU-76/FK5 reduction ECI (J2000) :math:`\\leftrightarrow` TOD :math:`\\leftrightarrow`
PEF :math:`\\leftrightarrow` ECEF (ITRF), plus the TEME :math:`\\rightarrow` PEF rotation SGP4 states
need. A :class:`.FK5Reduction` is built once per epoch and composed by :mod:`.methods`.

References:
    :cite:t:`vallado_2013_astro`, Sections 3.7 - 3.7.4
"""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, NamedTuple

# Third Party Imports
from numpy import array, asarray, cos, fmod, sin

# Local Imports
from .. import constants as const
from ..bodies import Earth
from ..maths import rot1, rot2, rot3
from ..time.conversions import dayOfYear, greenwichApparentTime, greenwichMeanTime, utc2TerrestrialTime
from ..time.stardate import datetimeToJulianDate
from .eops import getEarthOrientationParameters
from .nutation import get1980NutationSeries

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from .eops import EarthOrientationParameter


_PRECESSION_RATES: ndarray = (
    asarray(
        [
            [2306.2181, 0.30188, 0.017998],  # zeta
            [2004.3109, -0.42665, -0.041833],  # theta
            [2306.2181, 1.09468, 0.018203],  # z
        ],
    )
    * const.ARCSEC2RAD
)
"""``ndarray``: IAU-76 precession angle polynomials in T, T^2 & T^3, Vallado Eqn 3-88, (radians)."""

_MEAN_OBLIQUITY: ndarray = asarray([23.439291, -0.0130042, -1.64e-7, 5.04e-7])
"""``ndarray``: mean obliquity of the ecliptic polynomial, Vallado Eqn 3-81, (degrees)."""

_DELAUNAY_ARGUMENTS: ndarray = asarray(
    [
        [134.96298139, 1325 * 360 + 198.8673981, 0.0086972, 1.78e-5],  # Moon mean anomaly
        [357.52772333, 99 * 360 + 359.0503400, -0.0001603, -3.3e-6],  # Sun mean anomaly
        [93.27191028, 1342 * 360 + 82.0175381, -0.0036825, 3.1e-6],  # Moon argument of latitude
        [297.85036306, 1236 * 360 + 307.1114800, -0.0019142, 5.3e-6],  # Sun elongation
        [125.04452222, -(5 * 360 + 134.1362608), 0.0020708, 2.2e-6],  # Moon ascending node
    ],
)
"""``ndarray``: Delaunay argument polynomials, Vallado Eqn 3-82 (errata), (degrees)."""

_KINEMATIC_EQUINOX_TERMS_JD: float = 2450449.5
"""``float``: Julian date after which the equation of the equinoxes carries the node terms."""


class NutationAngles(NamedTuple):
    """IAU-1980 nutation angles at one epoch, (radians)."""

    delta_psi: float
    mean_eps: float
    true_eps: float
    eq_equinox: float


def _powersOf(ttt: float) -> ndarray:
    return asarray([1.0, ttt, ttt * ttt, ttt * ttt * ttt])


def nutationAngles(ttt: float, d_delta_psi: float = 0.0, d_delta_eps: float = 0.0) -> NutationAngles:
    """Evaluate the IAU-1980 nutation series.

    References:
        :cite:t:`vallado_2013_astro`, Eqn 3-79, 3-81 - 3-83

    Args:
        ttt (``float``): terrestrial time, Julian centuries since J2000.
        d_delta_psi (``float``, optional): EOP correction to the nutation in longitude, (radians).
        d_delta_eps (``float``, optional): EOP correction to the nutation in obliquity, (radians).

    Returns:
        :class:`.NutationAngles`: nutation angles & the equation of the equinoxes.
    """
    powers = _powersOf(ttt)
    mean_eps = fmod(_MEAN_OBLIQUITY @ powers, 360.0) * const.DEG2RAD
    delaunay = fmod(_DELAUNAY_ARGUMENTS @ powers, 360.0) * const.DEG2RAD

    coefficients, multipliers = get1980NutationSeries()
    arguments = multipliers @ delaunay
    delta_psi = fmod((coefficients[:, 0] + coefficients[:, 1] * ttt) @ sin(arguments), const.TWOPI)
    delta_eps = fmod((coefficients[:, 2] + coefficients[:, 3] * ttt) @ cos(arguments), const.TWOPI)
    # EOP corrections tie the reduction to GCRF
    delta_psi += d_delta_psi
    delta_eps += d_delta_eps

    eq_equinox = delta_psi * cos(mean_eps)
    if ttt * const.JULIAN_CENTURY + const.J2000_JD > _KINEMATIC_EQUINOX_TERMS_JD:
        node = delaunay[4]
        eq_equinox += (0.00264 * sin(node) + 0.000063 * sin(2.0 * node)) * const.ARCSEC2RAD

    return NutationAngles(delta_psi, mean_eps, mean_eps + delta_eps, eq_equinox)


def precessionNutation(ttt: float, d_delta_psi: float = 0.0, d_delta_eps: float = 0.0) -> tuple[ndarray, float]:
    """Combined precession & nutation rotation, [P][N].

    Args:
        ttt (``float``): terrestrial time, Julian centuries since J2000.
        d_delta_psi (``float``, optional): EOP correction to the nutation in longitude, (radians).
        d_delta_eps (``float``, optional): EOP correction to the nutation in obliquity, (radians).

    Returns:
        ``tuple``: 3x3 rotation from TOD to ECI, and the equation of the equinoxes, (radians).
    """
    zeta, theta, z_p = _PRECESSION_RATES @ _powersOf(ttt)[1:]
    angles = nutationAngles(ttt, d_delta_psi, d_delta_eps)

    tod_2_mod = rot1(-angles.mean_eps) @ rot3(angles.delta_psi) @ rot1(angles.true_eps)
    mod_2_eci = rot3(zeta) @ rot2(-theta) @ rot3(z_p)
    return mod_2_eci @ tod_2_mod, angles.eq_equinox


@lru_cache(maxsize=4096)
def _minutePrecessionNutation(
    minute: datetime,
    delta_atomic_time: float,
    d_delta_psi: float,
    d_delta_eps: float,
) -> tuple[ndarray, float]:
    """:func:`.precessionNutation` evaluated in the middle of the minute starting at `minute`.

    Note:
        Both drift by well under a milliarcsecond within a minute. The sidereal rotation is
        always evaluated at the exact epoch.
    """
    mid = minute + timedelta(seconds=30)
    _, ttt = utc2TerrestrialTime(mid.year, mid.month, mid.day, mid.hour, mid.minute, mid.second, delta_atomic_time)
    return precessionNutation(ttt, d_delta_psi, d_delta_eps)


def siderealRotation(utc_date: datetime, delta_ut1: float, eq_equinox: float) -> ndarray:
    """Rotation from PEF to TOD through the Greenwich apparent sidereal time, [R]."""
    seconds = utc_date.second + utc_date.microsecond * 1e-6 + delta_ut1
    elapsed_days = dayOfYear(utc_date.year, utc_date.month, utc_date.day, utc_date.hour, utc_date.minute, seconds) - 1
    return rot3(-greenwichApparentTime(utc_date.year, elapsed_days, eq_equinox))


def polarMotion(x_p: float, y_p: float) -> ndarray:
    """Rotation from ECEF to PEF for the given pole coordinates, [W], Vallado Eqn 3-77."""
    return rot1(y_p) @ rot2(x_p)


@dataclass(frozen=True)
class FK5Reduction:
    """Rotations relating ECI, TEME & ECEF at a single UTC epoch."""

    utc: datetime
    """``datetime``: naive UTC epoch the rotations hold at."""

    rot_pn: ndarray
    """``ndarray``: TOD to ECI rotation, [P][N]."""

    rot_r: ndarray
    """``ndarray``: PEF to TOD rotation, [R]."""

    rot_w: ndarray
    """``ndarray``: ECEF to PEF rotation, [W]."""

    lod: float
    """``float``: excess length of day, (sec)."""

    dut1: float
    """``float``: UT1 - UTC, (sec)."""

    @classmethod
    def build(cls, utc_date: datetime, eops: EarthOrientationParameter | None = None) -> FK5Reduction:
        """Evaluate the reduction at `utc_date`.

        Args:
            utc_date (``datetime``): naive UTC epoch.
            eops (:class:`.EarthOrientationParameter`, optional): values to use instead of the
                configured EOP loader.

        Raises:
            TypeError: `utc_date` is not a ``datetime``.
            :class:`.MissingEOP`: no Earth orientation data covers `utc_date`.
        """
        if not isinstance(utc_date, datetime):
            raise TypeError(f"Building reduction parameters expects datetime, not {type(utc_date)}")

        if eops is None:
            eops = getEarthOrientationParameters(utc_date.date())

        rot_pn, eq_equinox = _minutePrecessionNutation(
            utc_date.replace(second=0, microsecond=0),
            eops.delta_atomic_time,
            eops.d_delta_psi,
            eops.d_delta_eps,
        )
        return cls(
            utc=utc_date,
            rot_pn=rot_pn,
            rot_r=siderealRotation(utc_date, eops.delta_ut1, eq_equinox),
            rot_w=polarMotion(eops.x_p, eops.y_p),
            lod=eops.length_of_day,
            dut1=eops.delta_ut1,
        )

    @property
    def pef_2_eci(self) -> ndarray:
        """``ndarray``: PEF to ECI rotation, [P][N][R]."""
        return self.rot_pn @ self.rot_r

    @property
    def ecef_2_eci(self) -> ndarray:
        """``ndarray``: position rotation from ECEF to ECI, [P][N][R][W]."""
        return self.pef_2_eci @ self.rot_w

    @property
    def teme_2_pef(self) -> ndarray:
        """``ndarray``: TEME to PEF rotation through the Greenwich mean sidereal time in UT1."""
        ut1 = self.utc + timedelta(seconds=self.dut1)
        return rot3(greenwichMeanTime(datetimeToJulianDate(ut1)))

    @property
    def omega(self) -> ndarray:
        """``ndarray``: Earth angular velocity in PEF, corrected for length of day, (rad/sec)."""
        return array([0.0, 0.0, Earth.spin_rate * (1.0 - self.lod / const.DAYS2SEC)])
