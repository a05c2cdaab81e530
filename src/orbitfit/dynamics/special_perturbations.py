"""Cowell integration of Earth orbiters under the assembled force model."""

from __future__ import annotations

# Standard Library Imports
from datetime import timedelta
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import empty_like, inf
from scipy.linalg import norm

# Local Imports
from ..common.labels import IntegratorLabel
from ..physics.bodies import Earth
from ..physics.time.conversions import utcNaive
from .celestial import Celestial, checkEarthCollision
from .force_model import ForceContext

if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from .force_model import AccelerationTerm


class SpecialPerturbations(Celestial):
    """High fidelity dynamics for the numerical propagator.

    Integrates the ECI state vector with Cowell's formulation: the Earth's point mass gravity
    plus the sum of the assembled :class:`.AccelerationTerm` objects.
    """

    def __init__(
        self,
        epoch: datetime,
        force_model: Sequence[AccelerationTerm],
        method: str = IntegratorLabel.DOP853,
        max_step: float = inf,
        rtol: float | None = None,
        atol: ndarray | None = None,
    ):
        """Construct a SpecialPerturbations object.

        Args:
            epoch (``datetime``): UTC epoch that integration times are measured from.
            force_model (``list``): perturbing acceleration terms, see :func:`.assembleForceModel`.
            method (``str``, optional): Which ODE integration method to use.
            max_step (``float``, optional): largest allowed integration step, (sec).
            rtol (``float``, optional): relative integration tolerance.
            atol (``ndarray``, optional): 6x1 absolute tolerance of each state component.
        """
        super().__init__(method=method, max_step=max_step, rtol=rtol, atol=atol)
        self.epoch = utcNaive(epoch)
        self.force_model = tuple(force_model)
        # Each body is evaluated once per call, however many terms need it
        self._bodies = tuple(dict.fromkeys(body for term in self.force_model for body in term.bodies))

    def _differentialEquation(self, time: float, state: ndarray, check_collision: bool = True) -> ndarray:
        """Cowell's formulation: point mass gravity plus every perturbing term.

        References:
            :cite:t:`vallado_2013_astro`, Eqn 8-3

        Args:
            time (``float``): seconds since :attr:`.epoch`
            state (``ndarray``): (6 * K, ) flattened (6, K) stack of ECI states, (km; km/sec)
            check_collision (``bool``): whether to error on collision with the Earth

        Returns:
            ``ndarray``: (6 * K, ) flattened state derivatives, (km/sec; km/sec^2)
        """
        stack = state.reshape(6, -1)
        derivative = empty_like(stack, dtype=float)
        derivative[:3] = stack[3:]

        # Earth orientation & third body positions are shared by every state in the stack
        context = ForceContext.build(self.epoch + timedelta(seconds=float(time)), self._bodies)
        for column in range(stack.shape[1]):
            r_eci, v_eci = stack[:3, column], stack[3:, column]
            r_norm = norm(r_eci)
            if check_collision:
                checkEarthCollision(r_norm)

            acceleration = -Earth.mu / r_norm**3 * r_eci
            for term in self.force_model:
                acceleration = acceleration + term.acceleration(context, r_eci, v_eci)
            derivative[3:, column] = acceleration

        return derivative.ravel()
