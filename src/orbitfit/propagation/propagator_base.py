"""Defines the abstract base class :class:`.StatePropagator`."""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING, ClassVar

# Third Party Imports
from numpy import asarray, atleast_2d

# Local Imports
from ..common.labels import FrameLabel
from ..determination.config.state_config import OrbitState
from ..physics.time.conversions import utcNaive

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray
    from typing_extensions import Self

    # Local Imports
    from ..dynamics.force_model import AccelerationTerm


class StatePropagator(ABC):
    """Uniform interface over the analytical & numerical propagation models.

    A propagator is an immutable description of a trajectory: an epoch, a vector of free
    :attr:`.parameters` that fully determines the trajectory, and the spacecraft mass. The
    estimator only ever talks to this interface, so it never needs to know which model it drives.
    """

    frame: ClassVar[FrameLabel]
    """:class:`.FrameLabel`: frame that propagated states are natively expressed in."""

    parameter_names: ClassVar[tuple[str, ...]]
    """``tuple``: labels of each estimated parameter, in order."""

    def __init__(self, epoch: datetime, mass: float | None = None):
        """Initialize the shared attributes.

        Args:
            epoch (``datetime``): UTC reference epoch of the free parameters.
            mass (``float``, optional): spacecraft mass, (kg).
        """
        self._epoch = utcNaive(epoch)
        self._mass = mass

    @property
    def epoch(self) -> datetime:
        """``datetime``: UTC reference epoch of :attr:`.parameters`."""
        return self._epoch

    @property
    def mass(self) -> float | None:
        """``float``: spacecraft mass used for propagation, (kg)."""
        return self._mass

    @property
    @abstractmethod
    def parameters(self) -> ndarray:
        """``ndarray``: copy of the free parameter vector at :attr:`.epoch`."""
        raise NotImplementedError

    @abstractmethod
    def scales(self, position_scale: float) -> ndarray:
        """Per-parameter scale factors matching a position uncertainty.

        Args:
            position_scale (``float``): position-equivalent scale, (m).

        Returns:
            ``ndarray``: positive scale of each parameter, in parameter units.
        """
        raise NotImplementedError

    @abstractmethod
    def propagateParameters(self, param_sets: ndarray, epochs: Sequence[datetime]) -> ndarray:
        """Propagate several candidate parameter vectors to a set of epochs at once.

        Args:
            param_sets (``ndarray``): (K, n) parameter vectors, one per row.
            epochs (``list``): T UTC epochs, in any order.

        Returns:
            ``ndarray``: (K, T, 6) states in :attr:`.frame`, (km; km/sec).
        """
        raise NotImplementedError

    @abstractmethod
    def withParameters(self, parameters: ndarray) -> Self:
        """Copy of this propagator whose trajectory is defined by `parameters`."""
        raise NotImplementedError

    @abstractmethod
    def attach(self, force_model: Sequence[AccelerationTerm]) -> Self:
        """Copy of this propagator driven by `force_model`.

        Raises:
            ``TypeError``: the underlying model does not accept perturbing accelerations.
        """
        raise NotImplementedError

    @abstractmethod
    def parameterize(self, mass: float) -> Self:
        """Copy of this propagator for a spacecraft of `mass` kilograms."""
        raise NotImplementedError

    def propagate(self, epoch: datetime) -> ndarray:
        """Propagate the current parameters to a single epoch.

        Args:
            epoch (``datetime``): UTC epoch to propagate to.

        Returns:
            ``ndarray``: 6x1 state in :attr:`.frame`, (km; km/sec).
        """
        return self.propagateParameters(atleast_2d(self.parameters), [epoch])[0, 0]

    def ephemeris(self, epochs: Sequence[datetime]) -> ndarray:
        """Propagate the current parameters through several epochs.

        Returns:
            ``ndarray``: (T, 6) states in :attr:`.frame`, (km; km/sec).
        """
        return self.propagateParameters(atleast_2d(self.parameters), epochs)[0]

    def orbitState(self, epoch: datetime | None = None) -> OrbitState:
        """Trajectory state as an :class:`.OrbitState`, at :attr:`.epoch` by default."""
        epoch = self.epoch if epoch is None else utcNaive(epoch)
        return OrbitState.fromArray(self.propagate(epoch), epoch, frame=self.frame, mass=self.mass)

    def offsets(self, epochs: Sequence[datetime]) -> ndarray:
        """Seconds elapsed from :attr:`.epoch` to each of `epochs`."""
        return asarray([(utcNaive(epoch) - self.epoch) / timedelta(seconds=1) for epoch in epochs], dtype=float)
