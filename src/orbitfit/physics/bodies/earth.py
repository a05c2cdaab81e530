"""Earth model used by the force model, the frame reductions & the geodetic conversions."""

from __future__ import annotations


class Earth:
    """EGM-96 compatible Earth constants, (Vallado Table D-1).

    The ellipsoid matches WGS-84. SGP4 carries its own WGS-72 constants, see :mod:`.tle`.
    """

    mu: float = 398600.4415
    """``float``: gravitational parameter, (km^3/sec^2)."""

    radius: float = 6378.1363
    """``float``: equatorial radius, (km)."""

    spin_rate: float = 7.292115146706979e-5
    """``float``: nominal rotation rate about the ECEF *K*-axis, (rad/sec)."""

    eccentricity: float = 0.081819221456
    """``float``: eccentricity of the reference ellipsoid."""

    atmosphere: float = 100.0
    """``float``: altitude below which a body is treated as inside the atmosphere, (km)."""
