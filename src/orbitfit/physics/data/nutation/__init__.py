"""IAU 1980 nutation series coefficients."""
