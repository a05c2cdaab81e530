from __future__ import annotations

# Standard Library Imports
import logging
from datetime import datetime

# Third Party Imports
import pytest
from numpy import allclose, array, cross, eye, sqrt, vdot, zeros
from scipy.linalg import norm

# ORBITFIT Imports
from orbitfit.common.exceptions import InvalidForceConfigError
from orbitfit.determination.config.force_model_config import ForceModelConfig
from orbitfit.dynamics.force_model import (
    EARTH_ROTATION,
    AtmosphericDrag,
    ForceContext,
    GeneralRelativity,
    GeopotentialAcceleration,
    SolarRadiationPressure,
    ThirdBodyAcceleration,
    assembleForceModel,
    calcSatRatio,
)
from orbitfit.physics import constants as const
from orbitfit.physics.bodies import Earth, Moon, Sun
from orbitfit.physics.bodies.atmosphere import ConstantSolarActivity, HarrisPriester

EPOCH = datetime(2019, 12, 9, 16, 38, 29)

FULL_FORCE_MODEL = ForceModelConfig(
    use_moon=True,
    use_sun=True,
    use_solar_pressure=True,
    use_atmospheric_drag=True,
    use_relativity=True,
    cross_section=10.0,
    cr=1.3,
    cd=2.2,
)


@pytest.fixture(name="context")
def buildContext() -> ForceContext:
    """Shared quantities at a fixed epoch, with both third bodies."""
    return ForceContext.build(EPOCH, (Sun, Moon))


def testForceContext(context: ForceContext):
    """Test the Earth orientation & body positions of a context."""
    assert context.utc == EPOCH
    assert allclose(context.ecef_2_eci @ context.ecef_2_eci.T, eye(3), atol=1e-12)
    assert set(context.body_positions) == {Sun, Moon}
    assert norm(context.body_positions[Sun]) == pytest.approx(const.AU2KM, rel=0.03)


def testDefaultForceModel(caplog: pytest.LogCaptureFixture):
    """Test that the geopotential alone is assembled by default."""
    with caplog.at_level(logging.DEBUG, logger="orbitfit"):
        terms = assembleForceModel(ForceModelConfig(), 1000.0)

    assert len(terms) == 1
    assert isinstance(terms[0], GeopotentialAcceleration)
    assert any("Assembled force model" in message for message in caplog.messages)


def testFullForceModelOrder():
    """Test the order of the assembled terms & the spacecraft ratios they carry."""
    terms = assembleForceModel(FULL_FORCE_MODEL, 500.0)
    assert [type(term) for term in terms] == [
        GeopotentialAcceleration,
        ThirdBodyAcceleration,
        ThirdBodyAcceleration,
        SolarRadiationPressure,
        AtmosphericDrag,
        GeneralRelativity,
    ]
    assert terms[1].body is Moon
    assert terms[2].body is Sun
    assert terms[3].sat_ratio == pytest.approx(1.3 * 10.0 / 500.0)
    assert terms[4].ballistic_ratio == pytest.approx(2.2 * 10.0 / 500.0)
    assert repr(terms[1]) == "ThirdBodyAcceleration(Moon)"


@pytest.mark.parametrize(
    ("kwargs", "parameter"),
    [
        ({"use_solar_pressure": True, "cr": 1.3}, "cross_section"),
        ({"use_solar_pressure": True, "cross_section": 10.0}, "cr"),
        ({"use_atmospheric_drag": True, "cross_section": 10.0}, "cd"),
        ({"use_atmospheric_drag": True, "cross_section": 10.0, "cd": -2.2}, "cd"),
        ({"use_solar_pressure": True, "cross_section": 0.0, "cr": 1.3}, "cross_section"),
    ],
)
def testMissingForceParameters(kwargs: dict, parameter: str):
    """Test that enabled perturbations require their physical parameters."""
    with pytest.raises(InvalidForceConfigError) as error:
        ForceModelConfig(**kwargs)
    assert error.value.parameter == parameter


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cross_section": 0.0},
        {"cross_section": 0.0, "cr": 0.0, "cd": 0.0},
        {"cd": -2.2, "use_solar_pressure": True, "cross_section": 10.0, "cr": 1.3},
    ],
)
def testDisabledForceParametersIgnored(kwargs: dict):
    """Test that parameters of disabled perturbations are not validated."""
    force_config = ForceModelConfig(**kwargs)
    assert force_config.cross_section == kwargs["cross_section"]
    assert not force_config.use_atmospheric_drag


@pytest.mark.parametrize("mass", [0.0, -10.0])
def testInvalidMass(mass: float):
    """Test that the spacecraft mass must be positive."""
    with pytest.raises(InvalidForceConfigError, match="mass"):
        assembleForceModel(ForceModelConfig(), mass)


def testThirdBodyAcceleration(context: ForceContext):
    """Test the cancellation-free third body term against the direct & indirect terms."""
    r_eci = array([7000.0, 1000.0, -500.0])
    moon = context.body_positions[Moon]
    direct = (moon - r_eci) / norm(moon - r_eci) ** 3 - moon / norm(moon) ** 3

    acceleration = ThirdBodyAcceleration(Moon).acceleration(context, r_eci, zeros(3))
    assert allclose(acceleration, Moon.mu * direct, rtol=1e-6, atol=0.0)
    assert norm(acceleration) < 1e-8


def testSolarRadiationPressure(context: ForceContext):
    """Test radiation pressure pushes away from the Sun & vanishes in the Earth's shadow."""
    srp = SolarRadiationPressure(calcSatRatio(10.0, 500.0, 1.3))
    sun = context.body_positions[Sun]
    sun_direction = sun / norm(sun)

    sunlit = 7000.0 * sun_direction
    acceleration = srp.acceleration(context, sunlit, zeros(3))
    assert vdot(acceleration, sun - sunlit) < 0.0
    # ~4.56e-6 N/m^2 at 1 AU
    assert norm(acceleration) == pytest.approx(const.SOLAR_PRESSURE * 1.3 * 10.0 / 500.0 / 1000.0, rel=0.05)

    shadowed = -7000.0 * sun_direction
    assert allclose(srp.acceleration(context, shadowed, zeros(3)), zeros(3))


def testAtmosphericDrag(context: ForceContext):
    """Test drag opposes the velocity relative to the co-rotating atmosphere."""
    drag = AtmosphericDrag(2.2 * 10.0 / 500.0, HarrisPriester(ConstantSolarActivity()))

    r_eci = array([Earth.radius + 400.0, 0.0, 0.0])
    v_eci = array([0.0, sqrt(Earth.mu / norm(r_eci)), 0.0])
    v_rel = v_eci - cross(EARTH_ROTATION, r_eci)
    acceleration = drag.acceleration(context, r_eci, v_eci)
    assert norm(acceleration) > 0.0
    assert allclose(cross(acceleration, v_rel), zeros(3), atol=1e-6 * norm(acceleration) * norm(v_rel))
    assert vdot(acceleration, v_rel) < 0.0

    high = array([Earth.radius + 2000.0, 0.0, 0.0])
    assert allclose(drag.acceleration(context, high, v_eci), zeros(3))


def testGeneralRelativity(context: ForceContext):
    """Test the Schwarzschild term of a circular orbit is radial & outward."""
    r_eci = array([7000.0, 0.0, 0.0])
    v_eci = array([0.0, sqrt(Earth.mu / 7000.0), 0.0])
    acceleration = GeneralRelativity().acceleration(context, r_eci, v_eci)

    c_sq = (const.SPEED_OF_LIGHT / 1000.0) ** 2
    expected = Earth.mu / 7000.0**2 * (3.0 * Earth.mu / (7000.0 * c_sq))
    assert acceleration[0] == pytest.approx(expected)
    assert allclose(acceleration[1:], zeros(2), atol=1e-6 * expected)


def testGeopotentialRotatesFrames(context: ForceContext):
    """Test the non-spherical terms are a small fraction of the point mass gravity."""
    geopotential = assembleForceModel(ForceModelConfig(), 1000.0)[0]
    r_eci = array([5000.0, 0.0, 5000.0])
    acceleration = geopotential.acceleration(context, r_eci, zeros(3))

    point_mass = Earth.mu / norm(r_eci) ** 2
    assert 1e-4 * point_mass < norm(acceleration) < 1e-2 * point_mass
