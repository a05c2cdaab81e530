"""Defines the :class:`.NumericalPropagator`, which estimates a Cartesian ECI state."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, asarray, atleast_2d, empty, nonzero, unique
from scipy.linalg import norm

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.labels import FrameLabel
from ..dynamics.special_perturbations import SpecialPerturbations
from ..physics import constants as const
from ..physics.bodies import Earth
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


def cartesianScales(state: ndarray, position_scale: float) -> ndarray:
    r"""Position & velocity scales of a Cartesian state that share one position-equivalent size.

    The velocity scale follows from the vis-viva equation, :math:`\delta v = \mu \delta r / (v r^2)`.

    Args:
        state (``ndarray``): 6x1 state vector, (km; km/sec).
        position_scale (``float``): position scale, (km).

    Returns:
        ``ndarray``: 6x1 scale vector, (km; km/sec).
    """
    r_norm, v_norm = norm(state[:3]), norm(state[3:])
    velocity_scale = Earth.mu * position_scale / (v_norm * r_norm**2)
    return array([position_scale] * 3 + [velocity_scale] * 3)


class NumericalPropagator(StatePropagator):
    """Integrates an ECI state under a set of perturbing accelerations.

    The free parameters are the six Cartesian components of the state at :attr:`.epoch`. Force
    model parameters are never estimated.
    """

    frame = FrameLabel.ECI
    parameter_names = ("x", "y", "z", "vx", "vy", "vz")

    def __init__(
        self,
        epoch: datetime,
        state: ndarray,
        mass: float | None = None,
        force_model: Sequence[AccelerationTerm] = (),
        position_tolerance: float | None = None,
        method: str | None = None,
        max_step: float | None = None,
    ):
        """Initialize the propagator.

        Args:
            epoch (``datetime``): UTC epoch of `state`.
            state (``ndarray``): 6x1 ECI state vector, (km; km/sec).
            mass (``float``, optional): spacecraft mass, (kg).
            force_model (``list``, optional): perturbing accelerations, see :func:`.assembleForceModel`.
            position_tolerance (``float``, optional): local position error allowed per integration
                step, (m). Defaults to the ``propagation`` section of :class:`.BehavioralConfig`.
            method (``str``, optional): integration method. Defaults to the config.
            max_step (``float``, optional): largest integration step, (sec). Defaults to the config.
        """
        super().__init__(epoch, mass)
        config = BehavioralConfig.getConfig().propagation
        self._state = asarray(state, dtype=float).copy()
        if self._state.shape != (6,):
            raise ValueError(f"Numerical propagation requires a 6x1 state, not {self._state.shape}")
        self._force_model = tuple(force_model)
        self._position_tolerance = config.PositionTolerance if position_tolerance is None else position_tolerance
        self._method = config.IntegrationMethod if method is None else method
        self._max_step = config.MaxStep if max_step is None else max_step

    @property
    def parameters(self) -> ndarray:
        """``ndarray``: copy of the 6x1 ECI state at :attr:`.epoch`, (km; km/sec)."""
        return self._state.copy()

    @property
    def force_model(self) -> tuple[AccelerationTerm, ...]:
        """``tuple``: perturbing accelerations driving the integration."""
        return self._force_model

    def scales(self, position_scale: float) -> ndarray:
        """Cartesian scales matching `position_scale` meters, see :func:`.cartesianScales`."""
        return cartesianScales(self._state, position_scale * const.M2KM)

    def _dynamics(self) -> SpecialPerturbations:
        """Build the integrator, with tolerances derived from the allowed position error."""
        atol = cartesianScales(self._state, self._position_tolerance * const.M2KM)
        return SpecialPerturbations(
            self.epoch,
            self._force_model,
            method=self._method,
            max_step=self._max_step,
            rtol=atol[0] / norm(self._state[:3]),
            atol=atol,
        )

    def propagateParameters(self, param_sets: ndarray, epochs: Sequence[datetime]) -> ndarray:
        """Integrate every row of `param_sets` together, forwards & backwards from :attr:`.epoch`.

        Args:
            param_sets (``ndarray``): (K, 6) ECI states at :attr:`.epoch`.
            epochs (``list``): T UTC epochs, in any order.

        Returns:
            ``ndarray``: (K, T, 6) ECI states, (km; km/sec).
        """
        param_sets = atleast_2d(asarray(param_sets, dtype=float))
        offsets = self.offsets(epochs)
        states = empty((param_sets.shape[0], len(offsets), 6))

        # [NOTE]: States are stacked as (6, K) so every trajectory shares one step sequence
        initial = param_sets.T
        dynamics = self._dynamics()
        for mask, forward in ((offsets > 0.0, True), (offsets < 0.0, False)):
            (indices,) = nonzero(mask)
            if not indices.size:
                continue
            times, inverse = unique(offsets[indices], return_inverse=True)
            if not forward:
                times = times[::-1]
                inverse = len(times) - 1 - inverse
            solution = dynamics.propagateBulk([0.0, *times], initial)
            states[:, indices, :] = solution[:, :, inverse].transpose(1, 2, 0)

        (at_epoch,) = nonzero(offsets == 0.0)
        states[:, at_epoch, :] = param_sets[:, None, :]
        return states

    def withParameters(self, parameters: ndarray) -> NumericalPropagator:
        """Copy of this propagator starting from the ECI state `parameters`."""
        return self._copy(state=parameters)

    def attach(self, force_model: Sequence[AccelerationTerm]) -> NumericalPropagator:
        """Copy of this propagator driven by `force_model`."""
        return self._copy(force_model=force_model)

    def parameterize(self, mass: float) -> NumericalPropagator:
        """Copy of this propagator for a spacecraft of `mass` kilograms.

        Note:
            Mass dependent terms are built by :func:`.assembleForceModel`, so a new mass only
            affects them once the force model is re-assembled & attached.
        """
        return self._copy(mass=mass)

    def moveTo(self, epoch: datetime) -> NumericalPropagator:
        """Copy of this propagator re-anchored at `epoch` on the same trajectory."""
        return self._copy(epoch=epoch, state=self.propagate(epoch))

    def _copy(self, **changes) -> NumericalPropagator:
        kwargs = {
            "epoch": self.epoch,
            "state": self._state,
            "mass": self.mass,
            "force_model": self._force_model,
            "position_tolerance": self._position_tolerance,
            "method": self._method,
            "max_step": self._max_step,
        }
        kwargs.update(changes)
        return NumericalPropagator(**kwargs)
