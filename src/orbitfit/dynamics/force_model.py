"""Defines the perturbing acceleration terms & assembles them from a :class:`.ForceModelConfig`.

Each term computes a 3x1 ECI acceleration (km/sec^2) for one satellite, given a
:class:`.ForceContext` holding the quantities shared by every satellite at the current
integration time, i.e. the Earth orientation and third body positions.
"""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, cross, matmul, vdot
from scipy.linalg import norm

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import InvalidForceConfigError
from ..common.logger import orbitfitLogDebug
from ..determination.config.force_model_config import checkForceRequirements
from ..physics import constants as const
from ..physics.bodies import Earth, Moon, Sun
from ..physics.bodies.atmosphere import ConstantSolarActivity, HarrisPriester
from ..physics.bodies.gravitational_potential import buildGeopotentialField, nonSphericalAcceleration
from ..physics.sensor_utils import calculateSunVizFraction
from ..physics.time.stardate import datetimeToJulianDate
from ..physics.transforms.methods import ecef2lla
from ..physics.transforms.reductions import FK5Reduction

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterable
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ..determination.config.force_model_config import ForceModelConfig
    from ..physics.bodies.atmosphere import SolarActivityProvider
    from ..physics.bodies.gravitational_potential import GeopotentialField
    from ..physics.bodies.third_body import ThirdBody


EARTH_ROTATION: ndarray = array([0.0, 0.0, Earth.spin_rate])
"""``ndarray``: Earth angular velocity vector used for the co-rotating atmosphere, (rad/sec)."""


@dataclass(frozen=True)
class ForceContext:
    """Quantities shared by all acceleration terms at a single epoch."""

    utc: datetime
    """``datetime``: current epoch."""

    ecef_2_eci: ndarray
    """``ndarray``: 3x3 rotation of position vectors from ECEF into ECI."""

    body_positions: dict[type[ThirdBody], ndarray]
    """``dict``: ECI positions of the third bodies some term requires, (km)."""

    @classmethod
    def build(cls, utc: datetime, bodies: Iterable[type[ThirdBody]] = ()) -> ForceContext:
        """Evaluate the Earth orientation & the positions of `bodies` at `utc`."""
        reduction = FK5Reduction.build(utc)
        julian_date = datetimeToJulianDate(utc)
        return cls(
            utc=utc,
            ecef_2_eci=reduction.ecef_2_eci,
            body_positions={body: body.getPosition(julian_date) for body in bodies},
        )


class AccelerationTerm(ABC):
    """A single perturbing acceleration."""

    bodies: tuple[type[ThirdBody], ...] = ()
    """``tuple``: third bodies whose positions this term needs in its :class:`.ForceContext`."""

    @abstractmethod
    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Calculate the perturbing acceleration.

        Args:
            context (:class:`.ForceContext`): shared quantities at the current epoch.
            r_eci (``ndarray``): 3x1 ECI position vector of the satellite, km
            v_eci (``ndarray``): 3x1 ECI velocity vector of the satellite, km/sec

        Returns:
            ``ndarray``: 3x1 ECI acceleration vector, km/sec^2
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        """Name the term in log messages."""
        return type(self).__name__


class GeopotentialAcceleration(AccelerationTerm):
    """Non-spherical gravity of the Earth, the point mass term being part of the dynamics."""

    def __init__(self, field: GeopotentialField):
        """Wrap a truncated :class:`.GeopotentialField`."""
        self.field = field

    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Evaluate the field in ECEF, then rotate the acceleration back into ECI."""
        r_ecef = matmul(context.ecef_2_eci.T, r_eci)
        a_ecef = nonSphericalAcceleration(r_ecef, Earth.mu, Earth.radius, self.field)
        return matmul(context.ecef_2_eci, a_ecef)

    def __repr__(self) -> str:
        """Include the truncation."""
        return f"GeopotentialAcceleration({self.field.degree}x{self.field.order})"


class ThirdBodyAcceleration(AccelerationTerm):
    """Point mass attraction of the Sun or the Moon."""

    def __init__(self, body: type[ThirdBody]):
        """Attract toward `body`."""
        self.body = body
        self.bodies = (body,)

    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Scale the un-scaled third body term by the body's gravitational parameter."""
        return self.body.mu * _getThirdBodyAcceleration(r_eci, context.body_positions[self.body])

    def __repr__(self) -> str:
        """Include the body."""
        return f"ThirdBodyAcceleration({self.body.__name__})"


class SolarRadiationPressure(AccelerationTerm):
    """Cannonball solar radiation pressure with a conical Earth shadow."""

    bodies = (Sun,)

    def __init__(self, sat_ratio: float):
        """Build the term from :func:`.calcSatRatio`, (m^2/kg)."""
        self.sat_ratio = sat_ratio

    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Calculate the acceleration on the spacecraft due to solar radiation pressure."""
        sun_eci_position = context.body_positions[Sun]
        # Vector from satellite to the Sun
        position = sun_eci_position - r_eci
        # SRP acceleration in m/s^2, Montenbruck Eq. 3.75, modified
        a_srp = (
            -const.SOLAR_PRESSURE
            * self.sat_ratio
            * (const.AU2KM / norm(position)) ** 2
            * position
            / norm(position)
        )
        # Scale by the visible fraction of the Sun, convert to km/s^2
        return a_srp * calculateSunVizFraction(r_eci, sun_eci_position) / 1000.0


class AtmosphericDrag(AccelerationTerm):
    """Drag of an atmosphere co-rotating with the Earth.

    References:
        :cite:t:`montenbruck_2012_orbits`, Section 3.5, Eqn 3.97
    """

    bodies = (Sun,)

    def __init__(self, ballistic_ratio: float, atmosphere: HarrisPriester):
        """Build the term.

        Args:
            ballistic_ratio (``float``): drag coefficient times area-to-mass ratio, (m^2/kg).
            atmosphere (:class:`.HarrisPriester`): density model.
        """
        self.ballistic_ratio = ballistic_ratio
        self.atmosphere = atmosphere

    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Calculate the drag acceleration, zero above the modelled atmosphere."""
        height = ecef2lla(matmul(context.ecef_2_eci.T, r_eci))[2]
        density = self.atmosphere.density(
            height,
            r_eci,
            context.body_positions[Sun],
            scale=self.atmosphere.activityScale(context.utc),
        )
        if density == 0.0:
            return array([0.0, 0.0, 0.0])

        v_rel = v_eci - cross(EARTH_ROTATION, r_eci)
        # kg/m^3 with km/s velocities gives 1e6 m^2/s^2, scaled back into km/s^2
        return -0.5 * self.ballistic_ratio * density * norm(v_rel) * v_rel * const.KM2M


class GeneralRelativity(AccelerationTerm):
    """Schwarzschild correction of the Earth's point mass gravity."""

    def acceleration(self, context: ForceContext, r_eci: ndarray, v_eci: ndarray) -> ndarray:
        """Delegate to :func:`._getGeneralRelativityAcceleration`."""
        return _getGeneralRelativityAcceleration(r_eci, v_eci)


def calcSatRatio(cross_section: float, mass: float, cr: float) -> float:
    r"""Calculate RSO specific value needed for SRP.

    .. math::

        C_R \frac{A}{m}

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.75 - 3.76, Table 3.5

    Args:
        cross_section (``float``): constant cross-section of the spacecraft (m^2)
        mass (``float``): constant mass of the spacecraft (kg)
        cr (``float``): radiation pressure coefficient, :math:`1 + \epsilon` (unit-less)

    Returns:
        ``float``: radiation pressure coefficient times area-to-mass ratio (m^2/kg)
    """
    return cr * (cross_section / mass)


def assembleForceModel(
    force_config: ForceModelConfig,
    mass: float,
    solar_activity: SolarActivityProvider | None = None,
) -> list[AccelerationTerm]:
    """Build the ordered perturbing acceleration terms of a force model.

    The geopotential always comes first, followed by the Moon, the Sun, radiation pressure, drag
    and relativity as enabled.

    Args:
        force_config (:class:`.ForceModelConfig`): perturbation switches & spacecraft properties.
        mass (``float``): spacecraft mass, (kg).
        solar_activity (:class:`.SolarActivityProvider`, optional): space weather for the drag
            density. Defaults to :class:`.ConstantSolarActivity` built from configuration.

    Raises:
        :class:`.InvalidForceConfigError`: a required physical parameter is missing or invalid.

    Returns:
        ``list``: :class:`.AccelerationTerm` objects.
    """
    checkForceRequirements(force_config)
    if mass is None or mass <= 0.0:
        raise InvalidForceConfigError("mass", f"must be positive, not {mass}")

    propagation = BehavioralConfig.getConfig().propagation
    terms: list[AccelerationTerm] = [
        GeopotentialAcceleration(
            buildGeopotentialField(
                propagation.GeopotentialModel,
                propagation.GravityDegree,
                propagation.GravityOrder,
            ),
        ),
    ]

    if force_config.use_moon:
        terms.append(ThirdBodyAcceleration(Moon))
    if force_config.use_sun:
        terms.append(ThirdBodyAcceleration(Sun))
    if force_config.use_solar_pressure:
        terms.append(SolarRadiationPressure(calcSatRatio(force_config.cross_section, mass, force_config.cr)))
    if force_config.use_atmospheric_drag:
        if solar_activity is None:
            solar_activity = ConstantSolarActivity()
        terms.append(
            AtmosphericDrag(
                force_config.cd * force_config.cross_section / mass,
                HarrisPriester(solar_activity),
            ),
        )
    if force_config.use_relativity:
        terms.append(GeneralRelativity())

    orbitfitLogDebug(f"Assembled force model: {terms}")
    return terms


def _getThirdBodyAcceleration(sat_position: ndarray, third_body_position: ndarray) -> ndarray:
    """Determine the acceleration of a satellite due to a third body.

    Follows Vallado section 8.6.3 equations (8-35) to compute the un-scaled acceleration (the LHS of 8-35),
    which avoids the cancellation of the direct & indirect terms of (8-34).

    References:
        :cite:t:`vallado_2013_astro`, Section 8.6.3, Eqn 8-34 & 8-35

    Args:
        sat_position (``ndarray``): 3x1 ECI position vector of the satellite, km
        third_body_position (``ndarray``): 3x1 ECI position vector of the third body object, km

    Returns:
        ``ndarray``: 3x1 un-scaled ECI acceleration term due to the third body object, 1/km^2
    """
    r_e_sat_norm = norm(sat_position)
    r_e_3_norm = norm(third_body_position)
    # Position of the third body, relative to the satellite
    r_sat_3 = third_body_position - sat_position
    r_sat_3_norm = norm(r_sat_3)

    denominator = (r_e_sat_norm**2 + 2 * vdot(sat_position, r_sat_3)) * (
        r_e_3_norm**2 + r_e_3_norm * r_sat_3_norm + r_sat_3_norm**2
    )
    q_3 = denominator / (r_e_3_norm**3 * r_sat_3_norm**3 * (r_e_3_norm + r_sat_3_norm))

    return r_sat_3 * q_3 - (sat_position / (r_e_3_norm**3))


def _getGeneralRelativityAcceleration(r_eci: ndarray, v_eci: ndarray) -> ndarray:
    """Calculate the acceleration on the spacecraft due to general relativity.

    References:
        :cite:t:`montenbruck_2012_orbits`, Section 3.7.3, Eqn 3.146, Pg 111

    Args:
        r_eci (``ndarray``): 3x1 ECI position vector of the satellite, km
        v_eci (``ndarray``): 3x1 ECI velocity vector of the satellite, km/s

    Returns:
        ``ndarray``: 3X1 ECI acceleration vector due to general relativity, km/s^2
    """
    r_norm, v_norm = norm(r_eci), norm(v_eci)
    e_r, e_v = r_eci / r_norm, v_eci / v_norm
    mu = Earth.mu
    # speed of light squared (km/s)^2
    c_sq = (const.SPEED_OF_LIGHT / 1000) ** 2
    tmp = v_norm**2 / c_sq
    return (mu / r_norm**2) * (
        ((4 * mu) / (c_sq * r_norm) - tmp) * e_r + (4 * tmp) * (vdot(e_r, e_v) * e_v)
    )
