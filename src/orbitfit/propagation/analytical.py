"""Defines the :class:`.SGP4Propagator`, which estimates the mean elements of a two-line element set."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import abs as np_abs
from numpy import append, asarray, atleast_2d, concatenate, eye, zeros
from scipy.linalg import norm
from sgp4.api import SGP4_ERRORS, SatrecArray

# Local Imports
from ..common.labels import FrameLabel
from ..physics import constants as const
from ..physics.maths import vecWrapAngleNeg
from ..physics.orbits.tle import WGS72_MU, julianDayPair, osculatingEquinoctial, propagateTLE
from ..physics.time.conversions import utcNaive
from .propagator_base import StatePropagator

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ..dynamics.force_model import AccelerationTerm
    from ..physics.orbits.tle import TwoLineElement


BSTAR_SCALE: float = 2.0**-20
"""``float``: scale of the B* drag term when it is estimated, (1/earth radii)."""


class SGP4Propagator(StatePropagator):
    r"""Propagates a two-line element set with SGP4.

    The free parameters are the mean equinoctial elements :math:`[n, h, k, p, q, \lambda_M]` of
    the element set, optionally followed by the B* drag term.
    """

    frame = FrameLabel.TEME
    parameter_names = ("n", "h", "k", "p", "q", "mean_longitude")

    def __init__(self, tle: TwoLineElement, mass: float | None = None, fit_drag_term: bool = False):
        """Initialize the propagator.

        Args:
            tle (:class:`.TwoLineElement`): mean elements & identity fields.
            mass (``float``, optional): spacecraft mass, (kg). SGP4 does not use it.
            fit_drag_term (``bool``, optional): whether B* is a free parameter.
        """
        super().__init__(tle.epoch, mass)
        self._tle = tle
        self._fit_drag_term = fit_drag_term
        if fit_drag_term:
            self.parameter_names = (*SGP4Propagator.parameter_names, "bstar")

    @property
    def tle(self) -> TwoLineElement:
        """:class:`.TwoLineElement`: element set defining this trajectory."""
        return self._tle

    @property
    def fit_drag_term(self) -> bool:
        """``bool``: whether B* is a free parameter."""
        return self._fit_drag_term

    @property
    def parameters(self) -> ndarray:
        """``ndarray``: mean equinoctial elements, n in radians/minute, then B* if fitted."""
        elements = self._tle.equinoctial
        if self._fit_drag_term:
            return append(elements, self._tle.bstar)
        return elements

    def scales(self, position_scale: float) -> ndarray:
        r"""Element scales matching `position_scale` meters of position error.

        Each element's scale sums the first order change caused by perturbing every Cartesian
        component of the state at epoch by its own scale, :math:`s_i = \sum_j |\partial e_i / \partial x_j| \delta x_j`.
        """
        state = propagateTLE(self._tle, self.epoch)
        r_norm, v_norm = norm(state[:3]), norm(state[3:])
        d_pos = position_scale * const.M2KM
        d_vel = WGS72_MU * d_pos / (v_norm * r_norm**2)
        steps = asarray([d_pos] * 3 + [d_vel] * 3)

        scales = zeros(6)
        for step, direction in zip(steps, eye(6)):
            plus = osculatingEquinoctial(state + step * direction)
            minus = osculatingEquinoctial(state - step * direction)
            delta = plus - minus
            delta[5] = vecWrapAngleNeg(delta[5])
            # Central difference times the step is half the span
            scales += 0.5 * np_abs(delta)

        if self._fit_drag_term:
            return append(scales, BSTAR_SCALE)
        return scales

    def elementSet(self, parameters: ndarray) -> TwoLineElement:
        """Two-line element set defined by `parameters`, sharing this one's identity fields."""
        bstar = float(parameters[6]) if self._fit_drag_term else None
        return self._tle.withEquinoctial(parameters[:6], bstar=bstar)

    def propagateParameters(self, param_sets: ndarray, epochs: Sequence[datetime]) -> ndarray:
        """Run SGP4 for every row of `param_sets` at every epoch in one vectorized call.

        Raises:
            ``ValueError``: SGP4 reports an error for any of the trajectories.

        Returns:
            ``ndarray``: (K, T, 6) TEME states, (km; km/sec).
        """
        param_sets = atleast_2d(asarray(param_sets, dtype=float))
        satellites = SatrecArray([self.elementSet(parameters).satrec() for parameters in param_sets])
        julian_days = asarray([julianDayPair(utcNaive(epoch)) for epoch in epochs]).reshape(-1, 2)
        errors, positions, velocities = satellites.sgp4(julian_days[:, 0].copy(), julian_days[:, 1].copy())
        if errors.any():
            code = int(errors[errors != 0][0])
            raise ValueError(f"SGP4 propagation failed: {SGP4_ERRORS[code]}")
        return concatenate((positions, velocities), axis=-1)

    def withParameters(self, parameters: ndarray) -> SGP4Propagator:
        """Copy of this propagator with the element set defined by `parameters`."""
        return SGP4Propagator(self.elementSet(asarray(parameters, dtype=float)), self.mass, self._fit_drag_term)

    def attach(self, force_model: Sequence[AccelerationTerm]) -> SGP4Propagator:
        """SGP4 has its own fixed perturbation model.

        Raises:
            ``TypeError``: always.
        """
        raise TypeError("SGP4 propagation does not accept perturbing accelerations")

    def parameterize(self, mass: float) -> SGP4Propagator:
        """Copy of this propagator for a spacecraft of `mass` kilograms."""
        return SGP4Propagator(self._tle, mass, self._fit_drag_term)
