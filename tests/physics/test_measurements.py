from __future__ import annotations

# Third Party Imports
import pytest
from numpy import allclose, array, isclose, sqrt, stack, zeros

# ORBITFIT Imports
from orbitfit.physics.bodies import Earth
from orbitfit.physics.constants import PI
from orbitfit.physics.measurements import getAzimuth, getElevation, getRange, getSlantRangeSEZ
from orbitfit.physics.transforms.methods import ecef2sezRotation

STATION_ECEF = array([Earth.radius, 0.0, 0.0])
"""Station on the equator at the prime meridian."""

STATION_ECEF_2_SEZ = ecef2sezRotation(0.0, 0.0)


@pytest.mark.parametrize(
    ("slant_range_sez", "azimuth", "elevation"),
    [
        ([-1.0, 0.0, 0.0], 0.0, 0.0),
        ([0.0, 1.0, 0.0], PI / 2, 0.0),
        ([1.0, 0.0, 0.0], PI, 0.0),
        ([0.0, -1.0, 0.0], 3 * PI / 2, 0.0),
        ([-1.0, 0.0, 1.0], 0.0, PI / 4),
        ([0.0, 1.0, -1.0], PI / 2, -PI / 4),
    ],
)
def testAzimuthElevation(slant_range_sez: list[float], azimuth: float, elevation: float):
    """Test azimuth is measured clockwise from north & elevation up from the horizon."""
    assert isclose(getAzimuth(array(slant_range_sez)), azimuth)
    assert isclose(getElevation(array(slant_range_sez)), elevation)


def testZenith():
    """Test the elevation of a target directly overhead."""
    assert isclose(getElevation(array([0.0, 0.0, 1.0])), PI / 2)
    assert 0.0 <= getAzimuth(array([0.0, 0.0, 1.0])) < 2 * PI


def testAzimuthRange():
    """Test that azimuth is always reported in [0, 2 pi)."""
    assert isclose(getAzimuth(array([-1.0, -1e-12, 0.0])), 2 * PI - 1e-12)
    assert getAzimuth(array([-1.0, -0.0, 0.0])) == 0.0


def testRange():
    """Test range is the norm of the position part."""
    assert isclose(getRange(array([3.0, 4.0, 12.0])), 13.0)
    assert isclose(getRange(array([3.0, 4.0, 12.0, 100.0, 200.0, 300.0])), 13.0)


def testVectorized():
    """Test a stack of slant range vectors yields one value per row."""
    slant_ranges = stack([array([-1.0, 0.0, 0.0]), array([0.0, 1.0, 1.0]), array([2.0, 0.0, 0.0])])
    assert allclose(getAzimuth(slant_ranges), [0.0, PI / 2, PI])
    assert allclose(getElevation(slant_ranges), [0.0, PI / 4, 0.0])
    assert allclose(getRange(slant_ranges), [1.0, sqrt(2.0), 2.0])


def testSlantRangeSEZ():
    """Test station relative geometry for targets north, east & overhead of the station."""
    north = STATION_ECEF + array([0.0, 0.0, 1000.0])
    east = STATION_ECEF + array([0.0, 1000.0, 0.0])
    overhead = STATION_ECEF + array([500.0, 0.0, 0.0])

    assert allclose(getSlantRangeSEZ(north, STATION_ECEF, STATION_ECEF_2_SEZ), [-1000.0, 0.0, 0.0])
    assert allclose(getSlantRangeSEZ(east, STATION_ECEF, STATION_ECEF_2_SEZ), [0.0, 1000.0, 0.0])

    sez = getSlantRangeSEZ(overhead, STATION_ECEF, STATION_ECEF_2_SEZ)
    assert allclose(sez, [0.0, 0.0, 500.0])
    assert isclose(getRange(sez), 500.0)
    assert isclose(getElevation(sez), PI / 2)

    stacked = getSlantRangeSEZ(stack([north, east, overhead]), STATION_ECEF, STATION_ECEF_2_SEZ)
    assert stacked.shape == (3, 3)
    assert allclose(getAzimuth(stacked[:2]), [0.0, PI / 2])


def testColocatedTarget():
    """Test that a target at the station has zero slant range."""
    assert allclose(getSlantRangeSEZ(STATION_ECEF, STATION_ECEF, STATION_ECEF_2_SEZ), zeros(3))
