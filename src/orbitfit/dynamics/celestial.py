"""Defines the abstract base class :class:`.Celestial`."""

from __future__ import annotations

# Standard Library Imports
from abc import ABCMeta, abstractmethod
from functools import partial
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import asarray, diff, full, inf, repeat
from scipy.integrate import solve_ivp

# Local Imports
from ..common.exceptions import EarthCollisionError
from ..common.labels import IntegratorLabel
from ..common.logger import orbitfitLogError, orbitfitLogWarning
from ..physics.bodies import Earth
from .dynamics_base import Dynamics, DynamicsErrorFlag

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence

    # Third Party Imports
    from numpy import ndarray


def checkEarthCollision(r_norm: float):
    """Stop integration of a trajectory that reached the Earth's surface.

    Trajectories skimming the atmosphere only log a warning, since drag then dominates the
    force model.

    Raises:
        :exc:`.EarthCollisionError`: `r_norm`, the distance from the geocenter (km), is at or
            below :attr:`.Earth.radius`.
    """
    if r_norm <= Earth.radius:
        raise EarthCollisionError(f"Propagated trajectory crashed into the Earth, |r|={r_norm:.3f} km")

    if r_norm < Earth.radius + Earth.atmosphere:
        orbitfitLogWarning(f"Propagated trajectory is within {Earth.atmosphere:.0f} km of the Earth's surface")


class Celestial(Dynamics, metaclass=ABCMeta):
    r"""Numerically integrated dynamics of Earth orbiting objects.

    States are integrated as a ``(6, K)`` stack flattened row-wise, so :math:`K` trajectories
    share one step size sequence. Finite difference partials taken across the stack therefore
    see correlated integration error rather than independent noise.
    """

    def __init__(
        self,
        method: str = IntegratorLabel.DOP853,
        max_step: float = inf,
        rtol: float | None = None,
        atol: ndarray | None = None,
    ):
        r"""Instantiate a :class:`.Celestial` object.

        Args:
            method (``str``, optional): Which ODE integration method to use.
            max_step (``float``, optional): largest allowed integration step, (sec).
            rtol (``float``, optional): relative tolerance. Defaults to :attr:`.RELATIVE_TOL`.
            atol (``ndarray``, optional): 6x1 absolute tolerance of each state component.
                Defaults to :attr:`.ABSOLUTE_TOL` for every component.
        """
        self._method = IntegratorLabel(method).value
        self._max_step = max_step
        self._rtol = self.RELATIVE_TOL if rtol is None else rtol
        self._atol = full(6, self.ABSOLUTE_TOL) if atol is None else asarray(atol, dtype=float)

    def propagate(
        self,
        initial_time: float,
        final_time: float,
        initial_state: ndarray,
        error_flags: DynamicsErrorFlag = DynamicsErrorFlag.COLLISION,
    ) -> ndarray:
        r"""Numerically integrate the state vector from `initial_time` to `final_time`.

        Args:
            initial_time (``float``): time value when the integration will begin, sec.
            final_time (``float``): time value when the integration will stop, sec. May precede
                `initial_time`, in which case the state is integrated backwards.
            initial_state (``ndarray``): 6x1 | (6, K) initial ECI state vector(s), km; km/sec.
            error_flags (:class:`.DynamicsErrorFlag`): flags marking which errors will halt propagation

        Returns:
            ``ndarray``: 6x1 | (6, K) state vector(s) at `final_time`, km; km/sec.
        """
        if final_time == initial_time:
            return asarray(initial_state, dtype=float).copy()
        return self.propagateBulk([initial_time, final_time], initial_state, error_flags)[..., -1]

    def propagateBulk(
        self,
        times: Sequence[float],
        initial_state: ndarray,
        error_flags: DynamicsErrorFlag = DynamicsErrorFlag.COLLISION,
    ) -> ndarray:
        r"""Numerically integrate the state vector through a series of times.

        Args:
            times (``list``): times to propagate over, the first entry being the time of
                `initial_state`. The rest are handed to ``solve_ivp`` as ``t_eval`` and must be
                strictly monotonic, in either direction.
            initial_state (``ndarray``): 6x1 | (6, K) initial ECI state vector(s), km; km/sec.
            error_flags (:class:`.DynamicsErrorFlag`): flags marking which errors will halt propagation

        Note:
            :math:`K` refers to the number of parallel integrations being performed

        Returns:
            ``ndarray``: (6, T) | (6, K, T) states at ``times[1:]``, km; km/sec.
        """
        if len(times) < 2:
            raise ValueError("Must provide at least two times to integrate between")
        steps = diff(asarray(times, dtype=float))
        if not ((steps > 0).all() or (steps < 0).all()):
            raise ValueError("Integration times must be strictly monotonic")

        initial_state = asarray(initial_state, dtype=float)
        state_shape = initial_state.shape
        n_states = 1 if initial_state.ndim == 1 else state_shape[1]

        solution = solve_ivp(
            partial(
                self._differentialEquation,
                check_collision=bool(DynamicsErrorFlag.COLLISION & error_flags),
            ),
            (times[0], times[-1]),
            initial_state.ravel(),
            method=self._method,
            t_eval=times[1:],
            rtol=self._rtol,
            atol=repeat(self._atol, n_states),
            max_step=self._max_step,
        )

        # Integration failed for some reason
        if not solution.success:
            orbitfitLogError(solution.message)
            raise ValueError(solution.message)

        return solution.y.reshape((*state_shape, len(times) - 1))

    @abstractmethod
    def _differentialEquation(self, time: float, state: ndarray, check_collision: bool = True) -> ndarray:
        """Calculate the first time derivative of the state for numerical integration.

        Note: this function must take and receive 1-dimensional state vectors! Also, `K` below
            refers to the number of parallel integrations being performed

        Args:
            time (``float``): the current time of integration, (seconds)
            state (``numpy.ndarray``): (6 * K, ) current state vector in integration, (km, km/sec)
            check_collision (``bool``): whether to error on collision with the primary body

        Returns:
            ``numpy.ndarray``: (6 * K, ) derivative of the state vector, (km/sec; km/sec^2)
        """
        raise NotImplementedError
