"""Solar illumination of an Earth orbiter, shadowed by a spherical Earth."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import arccos, arcsin, sqrt
from scipy.linalg import norm

# Local Imports
from .bodies import Earth, Sun
from .constants import PI
from .maths import safeArccos

if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


def calculateSunVizFraction(tgt_eci_position: ndarray, sun_eci_position: ndarray) -> float:
    r"""Fraction of the solar disk seen from a satellite, treating Earth & Sun as disks.

    References:
        :cite:t:`montenbruck_2012_orbits`, Section 3.4.2, Eqn 3.85 - 3.94

    Args:
        tgt_eci_position (``ndarray``): 3x1 ECI position of the satellite, (km)
        sun_eci_position (``ndarray``): 3x1 ECI position of the Sun, (km)

    Returns:
        ``float``: 1.0 in sunlight, 0.0 in umbra, in between within the penumbra.
    """
    to_sun = sun_eci_position - tgt_eci_position
    sun_distance, sat_distance = norm(to_sun), norm(tgt_eci_position)
    # Satellites on the day side cannot be shadowed
    if sun_distance <= norm(sun_eci_position):
        return 1.0

    sun_radius = arcsin(Sun.radius / sun_distance)
    earth_radius = arcsin(Earth.radius / sat_distance)
    separation = safeArccos(-(tgt_eci_position @ to_sun) / (sat_distance * sun_distance))

    if separation >= sun_radius + earth_radius:
        return 1.0
    if separation < abs(earth_radius - sun_radius):
        return 0.0

    # Area of the overlapping disks
    x = (separation**2 + sun_radius**2 - earth_radius**2) / (2.0 * separation)
    y = sqrt(sun_radius**2 - x**2)
    overlap = sun_radius**2 * arccos(x / sun_radius) + earth_radius**2 * arccos((separation - x) / earth_radius) - separation * y
    return 1.0 - overlap / (PI * sun_radius**2)
