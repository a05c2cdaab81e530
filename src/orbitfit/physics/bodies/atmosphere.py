"""Defines the atmospheric density model used by the drag perturbation.

The density follows the modified Harris-Priester model: an exponential interpolation between
tabulated minimum (antapex) and maximum (apex) densities, blended by the angle from the diurnal
bulge. Solar activity enters through a :class:`.SolarActivityProvider`, which scales the
tabulated densities by the ratio of the Jacchia nighttime exospheric temperature to its value at
mean solar activity.

References:
    #. :cite:t:`montenbruck_2012_orbits`, Section 3.5.2, Table 3.8
    #. :cite:t:`vallado_2013_astro`, Section 8.6.2
"""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import arcsin, arctan2, array, cos, exp, log, searchsorted, sin, sqrt
from scipy.linalg import norm

# Local Imports
from ...common.behavioral_config import BehavioralConfig
from .. import constants as const

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray


HARRIS_PRIESTER_TABLE: ndarray = array(
    [
        # height (km), minimum density (g/km^3), maximum density (g/km^3)
        [100.0, 497400.0, 497400.0],
        [120.0, 24900.0, 24900.0],
        [130.0, 8377.0, 8710.0],
        [140.0, 3899.0, 4059.0],
        [150.0, 2122.0, 2215.0],
        [160.0, 1263.0, 1344.0],
        [170.0, 800.8, 875.8],
        [180.0, 528.3, 601.0],
        [190.0, 361.7, 429.7],
        [200.0, 255.7, 316.2],
        [210.0, 183.9, 239.6],
        [220.0, 134.1, 185.3],
        [230.0, 99.49, 145.5],
        [240.0, 74.88, 115.7],
        [250.0, 57.09, 93.08],
        [260.0, 44.03, 75.55],
        [270.0, 34.30, 61.82],
        [280.0, 26.97, 50.95],
        [290.0, 21.39, 42.26],
        [300.0, 17.08, 35.26],
        [320.0, 10.99, 25.11],
        [340.0, 7.214, 18.19],
        [360.0, 4.824, 13.37],
        [380.0, 3.274, 9.955],
        [400.0, 2.249, 7.492],
        [420.0, 1.558, 5.684],
        [440.0, 1.091, 4.355],
        [460.0, 0.7701, 3.362],
        [480.0, 0.5474, 2.612],
        [500.0, 0.3916, 2.042],
        [520.0, 0.2819, 1.605],
        [540.0, 0.2042, 1.267],
        [560.0, 0.1488, 1.005],
        [580.0, 0.1092, 0.7997],
        [600.0, 0.08070, 0.6390],
        [620.0, 0.06012, 0.5123],
        [640.0, 0.04519, 0.4121],
        [660.0, 0.03430, 0.3325],
        [680.0, 0.02632, 0.2691],
        [700.0, 0.02043, 0.2185],
        [720.0, 0.01607, 0.1779],
        [740.0, 0.01281, 0.1452],
        [760.0, 0.01036, 0.1190],
        [780.0, 0.008496, 0.09776],
        [800.0, 0.007069, 0.08059],
        [840.0, 0.004680, 0.05741],
        [880.0, 0.003200, 0.04210],
        [920.0, 0.002210, 0.03130],
        [960.0, 0.001560, 0.02360],
        [1000.0, 0.001150, 0.01810],
    ],
)
"""``ndarray``: Harris-Priester coefficients for mean solar activity, Montenbruck Table 3.8."""

DENSITY_UNITS: float = 1.0e-12
"""``float``: converts g/km^3 to kg/m^3."""

BULGE_LAG: float = 30.0 * const.DEG2RAD
"""``float``: right ascension lag of the diurnal bulge behind the Sun, (radians)."""

MEAN_F107: float = 150.0
"""``float``: solar flux the tabulated densities correspond to, (sfu)."""


@dataclass(frozen=True)
class SolarActivity:
    """Space weather indices driving the atmospheric density."""

    f107: float
    """``float``: daily F10.7 solar radio flux, (sfu)."""

    f107_average: float
    """``float``: 81-day centered average of F10.7, (sfu)."""

    kp: float
    """``float``: planetary geomagnetic index, (unit-less, 0-9)."""


def exosphericTemperature(activity: SolarActivity) -> float:
    r"""Jacchia nighttime minimum exospheric temperature, including the geomagnetic term.

    References:
        :cite:t:`vallado_2013_astro`, Eqn 8-39, 8-41

    Args:
        activity (:class:`.SolarActivity`): space weather indices.

    Returns:
        ``float``: temperature, (K).
    """
    t_c = 379.0 + 3.24 * activity.f107_average + 1.3 * (activity.f107 - activity.f107_average)
    return t_c + 28.0 * activity.kp + 0.03 * exp(activity.kp)


REFERENCE_TEMPERATURE: float = exosphericTemperature(SolarActivity(MEAN_F107, MEAN_F107, 0.0))
"""``float``: exospheric temperature matching the tabulated densities, (K)."""


class SolarActivityProvider(ABC):
    """Source of space weather data, decoupled from any particular dataset format."""

    @abstractmethod
    def getSolarActivity(self, utc: datetime) -> SolarActivity:
        """Return the solar activity indices in effect at `utc`.

        Args:
            utc (``datetime``): epoch of interest.

        Returns:
            :class:`.SolarActivity`: space weather indices.
        """
        raise NotImplementedError


class ConstantSolarActivity(SolarActivityProvider):
    """Provides fixed indices, by default from the ``solar_activity`` configuration section."""

    def __init__(self, f107: float | None = None, f107_average: float | None = None, kp: float | None = None):
        """Build the provider, filling unspecified indices from :class:`.BehavioralConfig`."""
        config = BehavioralConfig.getConfig().solar_activity
        self._activity = SolarActivity(
            f107=config.F107 if f107 is None else f107,
            f107_average=config.F107Average if f107_average is None else f107_average,
            kp=config.Kp if kp is None else kp,
        )

    def getSolarActivity(self, utc: datetime) -> SolarActivity:
        """Return the same indices for every epoch."""
        return self._activity


class HarrisPriester:
    """Modified Harris-Priester density model with a solar activity scaling."""

    def __init__(self, solar_activity: SolarActivityProvider, cos_exponent: int = 4):
        """Build the density model.

        Args:
            solar_activity (:class:`.SolarActivityProvider`): space weather source.
            cos_exponent (``int``, optional): bulge shape parameter, 2 for low inclination orbits
                and 6 for polar orbits. Defaults to 4.
        """
        self.solar_activity = solar_activity
        self.cos_exponent = cos_exponent
        heights = HARRIS_PRIESTER_TABLE[:, 0]
        self._heights = heights
        self._rho_min = HARRIS_PRIESTER_TABLE[:, 1]
        self._rho_max = HARRIS_PRIESTER_TABLE[:, 2]
        # Scale heights of each tabulated interval
        self._h_min = (heights[:-1] - heights[1:]) / log(self._rho_min[1:] / self._rho_min[:-1])
        self._h_max = (heights[:-1] - heights[1:]) / log(self._rho_max[1:] / self._rho_max[:-1])

    def activityScale(self, utc: datetime) -> float:
        """Density multiplier implied by the solar activity at `utc`."""
        activity = self.solar_activity.getSolarActivity(utc)
        return exosphericTemperature(activity) / REFERENCE_TEMPERATURE

    def density(self, height: float, eci_position: ndarray, sun_position: ndarray, scale: float = 1.0) -> float:
        r"""Calculate the atmospheric density.

        Args:
            height (``float``): geodetic height of the satellite, (km).
            eci_position (``ndarray``): 3x1 ECI position of the satellite, (km).
            sun_position (``ndarray``): 3x1 ECI position of the Sun, (km).
            scale (``float``, optional): solar activity multiplier from :meth:`.activityScale`.

        Returns:
            ``float``: density, (kg/m^3). Zero above the top of the table.
        """
        if height >= self._heights[-1]:
            return 0.0

        # [NOTE]: Heights below the table extrapolate along the first interval.
        index = max(int(searchsorted(self._heights, height, side="right")) - 1, 0)
        d_h = self._heights[index] - height
        rho_min = self._rho_min[index] * exp(d_h / self._h_min[index])
        rho_max = self._rho_max[index] * exp(d_h / self._h_max[index])

        # Unit vector pointing toward the apex of the diurnal bulge
        sun_ra = arctan2(sun_position[1], sun_position[0])
        sun_dec = arcsin(sun_position[2] / norm(sun_position))
        bulge = array(
            [
                cos(sun_dec) * cos(sun_ra + BULGE_LAG),
                cos(sun_dec) * sin(sun_ra + BULGE_LAG),
                sin(sun_dec),
            ],
        )
        cos_psi = bulge.dot(eci_position) / norm(eci_position)
        # cos^n(psi/2) = (0.5 + 0.5 cos(psi))^(n/2)
        diurnal = sqrt(max(0.5 + 0.5 * cos_psi, 0.0)) ** self.cos_exponent

        rho = rho_min + (rho_max - rho_min) * diurnal
        if height > self._heights[1]:
            rho *= scale
        return rho * DENSITY_UNITS
