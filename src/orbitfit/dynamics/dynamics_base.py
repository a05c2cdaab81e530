"""Defines the abstract base class :class:`.Dynamics`."""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from enum import Flag, auto
from typing import TYPE_CHECKING

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence

    # Third Party Imports
    from numpy import ndarray


class DynamicsErrorFlag(Flag):
    """Flags to indicate which errors should halt propagation."""

    NONE = 0
    """Never halt early."""

    COLLISION = auto()
    """Halt on any sort of collision."""


class Dynamics(ABC):
    """Abstract dynamics base class.

    Times are seconds relative to the epoch a concrete model is built for, so a single model can
    integrate forwards & backwards from that epoch.
    """

    RELATIVE_TOL = 10**-10
    ABSOLUTE_TOL = 10**-12

    @abstractmethod
    def propagate(
        self,
        initial_time: float,
        final_time: float,
        initial_state: ndarray,
        error_flags: DynamicsErrorFlag = DynamicsErrorFlag.COLLISION,
    ) -> ndarray:
        """Abstract method for propagating a state between two times."""
        raise NotImplementedError

    @abstractmethod
    def propagateBulk(
        self,
        times: Sequence[float],
        initial_state: ndarray,
        error_flags: DynamicsErrorFlag = DynamicsErrorFlag.COLLISION,
    ) -> ndarray:
        """Abstract method for propagating a state through a monotonic series of times."""
        raise NotImplementedError
