"""Spherical harmonic geopotential beyond the central point mass.

Coefficients are read from the bundled, fully normalized models in
:mod:`orbitfit.physics.data.geopotential` and evaluated with the recursive V/W formulation.

References:
    #. :cite:t:`montenbruck_2012_orbits`, Section 3.2
    #. :cite:t:`vallado_2013_astro`, Section 8.7
"""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from math import factorial, sqrt
from pathlib import Path
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, loadtxt, zeros

# Local Imports
from ...common.logger import orbitfitLogWarning

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray


GEOPOTENTIAL_MODULE: str = "orbitfit.physics.data.geopotential"
"""``str``: package holding the gravity model files."""


@dataclass(frozen=True)
class GeopotentialField:
    """Un-normalized spherical harmonic coefficients truncated to a degree & order."""

    c_nm: ndarray
    """``ndarray``: cosine coefficients, indexed ``[degree, order]``."""

    s_nm: ndarray
    """``ndarray``: sine coefficients, indexed ``[degree, order]``."""

    degree: int
    """``int``: maximum degree used when evaluating the field."""

    order: int
    """``int``: maximum order used when evaluating the field."""


def _normalization(degree: int, order: int) -> float:
    r""":math:`\Pi_{n,m}=\sqrt{k(2n+1)(n-m)!/(n+m)!}`, :math:`k=1` for zonal & 2 otherwise (Vallado Eqn 8-22)."""
    k = 1 if order == 0 else 2
    return sqrt(k * (2 * degree + 1) * factorial(degree - order) / factorial(degree + order))


@lru_cache(maxsize=5)
def loadGeopotentialCoefficients(model_file: str) -> tuple[ndarray, ndarray]:
    """Read a gravity model into square, un-normalized :math:`C_{n,m}` & :math:`S_{n,m}` arrays.

    Model files hold one ``degree order C S`` row per term, normalized per Vallado Eqn 8-22. Extra
    trailing columns, such as the coefficient sigmas of the NGA distribution files, are ignored.
    The arrays are sized by the largest degree in the file.

    Args:
        model_file (``str``): path to a model file, or the file name of a bundled model, see
            :class:`.GeopotentialModel`.
    """
    if Path(model_file).is_file():
        rows = loadtxt(model_file, usecols=(0, 1, 2, 3), ndmin=2)
    else:
        res = resources.files(GEOPOTENTIAL_MODULE).joinpath(model_file)
        with resources.as_file(res) as model_path:
            rows = loadtxt(model_path, usecols=(0, 1, 2, 3), ndmin=2)

    size = int(rows[:, 0].max()) + 1
    c_nm, s_nm = zeros((size, size)), zeros((size, size))
    for degree, order, c_bar, s_bar in rows:
        n, m = int(degree), int(order)
        c_nm[n, m] = c_bar * _normalization(n, m)
        s_nm[n, m] = s_bar * _normalization(n, m)

    return c_nm, s_nm


def buildGeopotentialField(model_file: str, degree: int, order: int) -> GeopotentialField:
    """Load `model_file` truncated to `degree` & `order`.

    A request beyond what the file provides is clamped to the file's maximum with a warning.

    Raises:
        ``ValueError``: `order` exceeds `degree`.
    """
    if order > degree:
        raise ValueError(f"Geopotential order {order} cannot exceed degree {degree}")

    c_nm, s_nm = loadGeopotentialCoefficients(model_file)
    available = c_nm.shape[0] - 1
    if degree > available:
        orbitfitLogWarning(f"Geopotential {model_file!r} provides degree {available}; truncating {degree}x{order}")
        degree, order = available, min(order, available)

    return GeopotentialField(c_nm=c_nm, s_nm=s_nm, degree=degree, order=order)


def getNonSphericalHarmonics(ecef_pos: ndarray, cb_radius: float, degree: int, order: int) -> tuple[ndarray, ndarray]:
    r"""Recursive harmonic terms :math:`V_{n,m}` & :math:`W_{n,m}` at an Earth-fixed position.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.29 - 3.31

    Args:
        ecef_pos (``ndarray``): 3x1 Earth-fixed position, (km).
        cb_radius (``float``): reference radius of the central body, (km).
        degree (``int``): maximum degree :math:`n`.
        order (``int``): maximum order :math:`m`, no larger than `degree`.

    Returns:
        ``tuple``: (n+1 x m+1) arrays of :math:`V` & :math:`W` terms.
    """
    r_sq = ecef_pos @ ecef_pos
    x_bar, y_bar, z_bar = ecef_pos * cb_radius / r_sq
    rho_sq = cb_radius * cb_radius / r_sq

    v, w = zeros((degree + 1, order + 1)), zeros((degree + 1, order + 1))
    v[0, 0] = cb_radius / sqrt(r_sq)
    for m in range(order + 1):
        if m > 0:
            # Sectoral terms seed each column
            v[m, m] = (2 * m - 1) * (x_bar * v[m - 1, m - 1] - y_bar * w[m - 1, m - 1])
            w[m, m] = (2 * m - 1) * (x_bar * w[m - 1, m - 1] + y_bar * v[m - 1, m - 1])
        if m < degree:
            v[m + 1, m] = (2 * m + 1) * z_bar * v[m, m]
            w[m + 1, m] = (2 * m + 1) * z_bar * w[m, m]
        for n in range(m + 2, degree + 1):
            v[n, m] = ((2 * n - 1) * z_bar * v[n - 1, m] - (n + m - 1) * rho_sq * v[n - 2, m]) / (n - m)
            w[n, m] = ((2 * n - 1) * z_bar * w[n - 1, m] - (n + m - 1) * rho_sq * w[n - 2, m]) / (n - m)

    return v, w


def nonSphericalAcceleration(ecef_pos: ndarray, cb_mu: float, cb_radius: float, field: GeopotentialField) -> ndarray:
    r"""Geopotential acceleration from degree 2 up, excluding the point-mass term.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.33

    Args:
        ecef_pos (``ndarray``): 3x1 Earth-fixed position, (km).
        cb_mu (``float``): gravitational parameter of the central body, (km^3/sec^2).
        cb_radius (``float``): reference radius of the central body, (km).
        field (:class:`.GeopotentialField`): truncated, un-normalized coefficients.

    Returns:
        ``ndarray``: 3x1 Earth-fixed acceleration, (km/sec^2).
    """
    # Partials of degree n need the degree n + 1 harmonics
    v, w = getNonSphericalHarmonics(ecef_pos, cb_radius, field.degree + 1, field.order + 1)

    a_x = a_y = a_z = 0.0
    for n in range(2, field.degree + 1):
        v_up, w_up = v[n + 1], w[n + 1]
        c_n0 = field.c_nm[n, 0]
        a_x -= c_n0 * v_up[1]
        a_y -= c_n0 * w_up[1]
        a_z -= (n + 1) * c_n0 * v_up[0]
        for m in range(1, min(n, field.order) + 1):
            c, s = field.c_nm[n, m], field.s_nm[n, m]
            ratio = (n - m + 1) * (n - m + 2)
            a_x += 0.5 * (ratio * (c * v_up[m - 1] + s * w_up[m - 1]) - c * v_up[m + 1] - s * w_up[m + 1])
            a_y += 0.5 * (ratio * (s * v_up[m - 1] - c * w_up[m - 1]) + s * v_up[m + 1] - c * w_up[m + 1])
            a_z -= (n - m + 1) * (c * v_up[m] + s * w_up[m])

    return array([a_x, a_y, a_z]) * cb_mu / (cb_radius * cb_radius)
