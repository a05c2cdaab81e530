"""Unit conversions, time-scale offsets & physical constants shared across :mod:`orbitfit`.

Body-specific values live with the body in :mod:`.bodies`.

References:
    #. :cite:t:`vallado_2013_astro`
    #. :cite:t:`montenbruck_2012_orbits`, Eqn 3.67
"""

from __future__ import annotations

# Third Party Imports
from numpy import pi

PI: float = pi
TWOPI: float = 2.0 * pi

DEG2RAD: float = pi / 180.0
"""``float``: degrees to radians."""

RAD2DEG: float = 180.0 / pi
"""``float``: radians to degrees."""

ARCSEC2RAD: float = DEG2RAD / 3600.0
"""``float``: arc seconds to radians, the unit nutation & precession tables use."""

MIN2SEC: float = 60.0
DAYS2SEC: float = 86400.0
SEC2DAYS: float = 1.0 / DAYS2SEC

KM2M: float = 1000.0
M2KM: float = 1.0 / KM2M

AU2KM: float = 1.49599e8
"""``float``: astronomical unit, (km)."""

J2000_JD: float = 2451545.0
"""``float``: Julian date of the J2000 epoch, in terrestrial time."""

JULIAN_CENTURY: float = 36525.0
"""``float``: days per Julian century."""

TT_TAI: float = 32.184
"""``float``: terrestrial time minus international atomic time, (sec)."""

SPEED_OF_LIGHT: float = 2.99792458e8
"""``float``: (m/sec)."""

SOLAR_PRESSURE: float = 1367.0 / SPEED_OF_LIGHT
"""``float``: solar radiation pressure at 1 AU from a 1367 W/m^2 solar flux, (N/m^2)."""
