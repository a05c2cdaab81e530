from __future__ import annotations

# Standard Library Imports
from datetime import datetime

# Third Party Imports
import pytest
from numpy import asarray, cos, sin

# ORBITFIT Imports
from orbitfit.physics import constants as const
from orbitfit.physics.bodies import Earth
from orbitfit.physics.bodies.atmosphere import (
    BULGE_LAG,
    REFERENCE_TEMPERATURE,
    ConstantSolarActivity,
    HarrisPriester,
    SolarActivity,
    exosphericTemperature,
)

EPOCH = datetime(2019, 12, 9, 16, 38, 29)

SUN_POSITION = asarray([1.496e8, 0.0, 0.0])

BULGE_DIRECTION = asarray([cos(BULGE_LAG), sin(BULGE_LAG), 0.0])


@pytest.fixture(name="atmosphere")
def getAtmosphere() -> HarrisPriester:
    """Density model at mean solar activity."""
    return HarrisPriester(ConstantSolarActivity(150.0, 150.0, 0.0))


def testDiurnalBulge(atmosphere: HarrisPriester):
    """Test that density is bounded by the tabulated antapex & apex values."""
    height = 400.0
    apex = atmosphere.density(height, (Earth.radius + height) * BULGE_DIRECTION, SUN_POSITION)
    antapex = atmosphere.density(height, -(Earth.radius + height) * BULGE_DIRECTION, SUN_POSITION)
    assert apex == pytest.approx(7.492e-12)
    assert antapex == pytest.approx(2.249e-12)

    # Perpendicular to the bulge, cos^4(45 deg) of the way from the minimum to the maximum
    pole = atmosphere.density(height, asarray([0.0, 0.0, Earth.radius + height]), SUN_POSITION)
    assert pole == pytest.approx((2.249 + 0.25 * (7.492 - 2.249)) * 1e-12)


def testDensityDecreasesWithHeight(atmosphere: HarrisPriester):
    """Test the exponential fall-off between tabulated heights."""
    position = asarray([0.0, 0.0, Earth.radius + 450.0])
    densities = [atmosphere.density(height, position, SUN_POSITION) for height in (150.0, 305.0, 450.0, 777.0)]
    assert all(rho > 0.0 for rho in densities)
    assert densities == sorted(densities, reverse=True)


@pytest.mark.parametrize("height", [1000.0, 1500.0, 35786.0])
def testNoDensityAboveTable(atmosphere: HarrisPriester, height: float):
    """Test that the atmosphere ends at the top of the table."""
    position = (Earth.radius + height) * BULGE_DIRECTION
    assert atmosphere.density(height, position, SUN_POSITION) == 0.0


def testActivityScale(atmosphere: HarrisPriester):
    """Test the density multiplier for quiet & active Suns."""
    assert atmosphere.activityScale(EPOCH) == pytest.approx(1.0)

    active = HarrisPriester(ConstantSolarActivity(250.0, 250.0, 0.0))
    assert active.activityScale(EPOCH) > 1.0

    quiet = HarrisPriester(ConstantSolarActivity(70.0, 70.0, 0.0))
    assert quiet.activityScale(EPOCH) < 1.0


def testScaleOnlyAboveLowerThermosphere(atmosphere: HarrisPriester):
    """Test that solar activity only scales densities above 120 km."""
    position = (Earth.radius + 110.0) * BULGE_DIRECTION
    assert atmosphere.density(110.0, position, SUN_POSITION, scale=2.0) == atmosphere.density(110.0, position, SUN_POSITION)

    position = (Earth.radius + 400.0) * BULGE_DIRECTION
    assert atmosphere.density(400.0, position, SUN_POSITION, scale=2.0) == pytest.approx(
        2.0 * atmosphere.density(400.0, position, SUN_POSITION),
    )


def testExosphericTemperature():
    """Test the Jacchia temperature at mean solar activity."""
    activity = SolarActivity(150.0, 150.0, 0.0)
    assert exosphericTemperature(activity) == pytest.approx(379.0 + 3.24 * 150.0 + 0.03)
    assert exosphericTemperature(activity) == REFERENCE_TEMPERATURE
    assert exosphericTemperature(SolarActivity(150.0, 150.0, 5.0)) > REFERENCE_TEMPERATURE


def testConfiguredSolarActivity():
    """Test that unspecified indices come from the configuration."""
    activity = ConstantSolarActivity(f107=200.0).getSolarActivity(EPOCH)
    assert activity == SolarActivity(200.0, 150.0, 2.0)


def testBulgeLag():
    """Test the bulge trails the Sun by 30 degrees."""
    assert BULGE_LAG == pytest.approx(30.0 * const.DEG2RAD)
