from __future__ import annotations

# Third Party Imports
import pytest
from numpy import deg2rad

# ORBITFIT Imports
import orbitfit.physics.constants as const
from orbitfit.physics.orbits import InvalidElementError, fixAngleQuadrant, isEccentric, isInclined

# Local Imports
from . import ECCENTRIC, ECCENTRICITIES, INCLINATIONS, INCLINED

INCLINED_TEST: tuple[tuple[float, bool]] = tuple(zip(INCLINATIONS, INCLINED))
ECCENTRIC_TEST: tuple[tuple[float, bool]] = tuple(zip(ECCENTRICITIES, ECCENTRIC))


@pytest.mark.parametrize(("angle", "is_inclined"), INCLINED_TEST)
def testIsInclined(angle: float, is_inclined: bool):
    """Test isInclined function for bad/good values."""
    if is_inclined is not None:
        assert isInclined(angle) == is_inclined
    else:
        with pytest.raises(InvalidElementError, match="inclination"):
            isInclined(angle)


@pytest.mark.parametrize(("ecc", "is_eccentric"), ECCENTRIC_TEST)
def testIsEccentric(ecc: float, is_eccentric: bool):
    """Test isEccentric function for bad/good values."""
    if is_eccentric is not None:
        assert isEccentric(ecc) == is_eccentric
    else:
        with pytest.raises(InvalidElementError, match="eccentricity"):
            isEccentric(ecc)


def testElementErrorIsValueError():
    """Test invalid elements can be handled like any other invalid value."""
    with pytest.raises(ValueError, match="inc=190.0 deg"):
        isInclined(deg2rad(190.0))


@pytest.mark.parametrize(
    ("angle", "check", "expected"),
    [
        (deg2rad(30.0), 1.0, deg2rad(30.0)),
        (deg2rad(30.0), 0.0, deg2rad(30.0)),
        (deg2rad(30.0), -1.0, deg2rad(330.0)),
        (0.0, -1.0, const.TWOPI),
    ],
)
def testFixAngleQuadrant(angle: float, check: float, expected: float):
    """Test that the quadrant is only flipped for negative checks."""
    assert fixAngleQuadrant(angle, check) == pytest.approx(expected)
