from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, deg2rad, finfo

# ORBITFIT Imports
from orbitfit.physics.bodies import Earth
from orbitfit.physics.orbits import ECCENTRICITY_LIMIT, INCLINATION_LIMIT

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray

# Valid and invalid Inc/Ecc for testing edge cases

INCLINATIONS: tuple[float] = (
    0.0,
    finfo(float).eps,
    INCLINATION_LIMIT,
    INCLINATION_LIMIT + finfo(float).eps,
    deg2rad(1.0),
    deg2rad(30.0),
    deg2rad(90.0),
    deg2rad(130.0),
    deg2rad(179.99),
    deg2rad(180) - (INCLINATION_LIMIT + finfo(float).eps),
    deg2rad(180) - INCLINATION_LIMIT,
    deg2rad(180) - finfo(float).eps,
    deg2rad(180),
    deg2rad(181),
    deg2rad(-5),
)
INCLINED: tuple[bool] = (
    False,
    False,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    False,
    False,
    None,
    None,
)


ECCENTRICITIES: tuple[float] = (
    0.0,
    finfo(float).eps,
    ECCENTRICITY_LIMIT,
    ECCENTRICITY_LIMIT + finfo(float).eps,
    0.01,
    0.1,
    0.5,
    0.9,
    0.99,
    1.0 - (ECCENTRICITY_LIMIT + finfo(float).eps),
    1.0 - ECCENTRICITY_LIMIT,
    1.0 - finfo(float).eps,
    1.0,
    1.1,
    -0.1,
)
ECCENTRIC: tuple[bool] = (
    False,
    False,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    True,
    None,
    None,
    None,
    None,
)


# All valid inputs, for parametrically testing functions

LEO: float = 7078
GEO: float = 35785 + Earth.radius

# COEs, including the circular &/or equatorial singular cases
SMA: ndarray = array(
    [LEO, GEO, LEO, LEO, LEO, LEO, LEO, LEO, GEO, LEO, LEO, LEO, LEO, GEO],
    dtype=float,
)
ECC: ndarray = array(
    [0, 0, 0, 0.0001, 0.0001, 0.001, 0.01, 0.1, 0, 0.0001, 0.001, 0.01, 0.1, 0.0001],
    dtype=float,
)
INC: ndarray = deg2rad([0, 0, 10, 0.1, 0, 1, 10, 100, 10, 0, 1, 0.1, 1, 100])
RAAN: ndarray = deg2rad([0, 0, 12, 55, 0, 324, 127, 61, 12, 0, 55, 324, 127, 10])
ARGP: ndarray = deg2rad([0, 0, 0, 300, 200, 100, 15, 1, 0, 10, 1, 300, 100, 1])
ANOM: ndarray = deg2rad([280, 280, 2, 20, 20, 200, 70, 140, 140, 2, 20, 200, 70, 2])

# Example from "Updated Analytical Partials for Covariance Transformations and Optimizations", Vallado
VALLADO_AAS_RV: ndarray = array(
    [-605.7922166, -5870.2295111, 3493.0531990, -1.568254290, -3.702348910, -6.479483950],
)
VALLADO_AAS_COE: tuple[float] = (
    6860.7631,
    0.0010640,
    deg2rad(97.65184),
    deg2rad(79.54701),
    deg2rad(83.86041),
    deg2rad(65.21303),
)
