"""Defines the :class:`.BatchLeastSquaresEstimator`, a Gauss-Newton batch orbit determination."""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import abs as np_abs
from numpy import concatenate, diag, empty, full, isfinite, mean, nan, sqrt, vstack
from scipy.linalg import LinAlgError, inv, qr, solve_triangular

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import CancelledError, NumericalSolveError
from ..common.labels import DeterminationStatus
from ..common.logger import orbitfitLogDebug

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Callable, Sequence

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ..propagation.propagator_base import StatePropagator
    from .measurements import Observable


FINITE_DIFFERENCE_FACTOR: float = 10.0
"""``float``: finite difference step of each parameter, as a multiple of its scale."""


@dataclass(frozen=True)
class IterationRecord:
    """Diagnostics of a single estimator iteration, emitted before the correction is applied."""

    iteration: int
    """``int``: one-based iteration number."""

    evaluations: int
    """``int``: number of model evaluations so far, including this one."""

    rms: float
    """``float``: RMS of the normalized residuals at the start of the iteration."""

    active_measurements: int
    """``int``: number of measurements contributing to the solution."""


@dataclass(frozen=True)
class EstimationSummary:
    """Final estimate & the diagnostics of the estimator run that produced it."""

    status: DeterminationStatus
    propagator: StatePropagator
    iterations: int
    evaluations: int
    rms: float
    history: tuple[IterationRecord, ...]
    observed: tuple[ndarray, ...]
    """``tuple``: observed values of every observable, in request order."""

    estimated: tuple[ndarray, ...]
    """``tuple``: values predicted by the final estimate, in request order."""

    covariance: ndarray
    """``ndarray``: :math:`n\\times n` parameter covariance of the last linearization."""


class BatchLeastSquaresEstimator:
    r"""Estimates the free parameters of a propagator from a batch of observables.

    Every iteration propagates the current parameters, plus a central difference perturbation of
    each of them, to all measurement epochs in one call. The residuals & partial derivatives are
    normalized by each value's sigma & weight, the parameters are normalized by their scales, and
    the Gauss-Newton correction is solved with a column pivoted QR decomposition. There is no
    damping.

    .. rubric:: Notation

    - :math:`p` is the :math:`n\times 1` parameter vector & :math:`s` its scales
    - :math:`r` is the :math:`N\times 1` normalized residual vector, :math:`(y - h(p)) w / \sigma`
    - :math:`J` is the :math:`N\times n` normalized Jacobian of the predictions, :math:`\partial h / \partial (p / s)`
    - :math:`\delta x` solves :math:`J \delta x = r`, so that :math:`\delta p = s \delta x`

    Convergence is declared once :math:`\max_i |\delta x_i|` falls below the threshold.
    """

    def __init__(
        self,
        propagator: StatePropagator,
        observables: Sequence[Observable],
        convergence_threshold: float,
        position_scale: float,
        max_iterations: int | None = None,
        max_evaluations: int | None = None,
        rank_threshold: float | None = None,
    ):
        """Initialize the estimator.

        Args:
            propagator (:class:`.StatePropagator`): initial guess & propagation model.
            observables (``list``): observables to fit, processed in the given order.
            convergence_threshold (``float``): largest normalized correction of a converged solution.
            position_scale (``float``): position-equivalent parameter scale, (m).
            max_iterations (``int``, optional): iteration cap. Defaults to the config.
            max_evaluations (``int``, optional): model evaluation cap. Defaults to the config.
            rank_threshold (``float``, optional): smallest usable diagonal of the QR factor.
                Defaults to the config.
        """
        config = BehavioralConfig.getConfig().estimation
        if not observables:
            raise ValueError("At least one observable is required")

        self.propagator = propagator
        self.observables = tuple(observables)
        self.convergence_threshold = convergence_threshold
        self.scales = propagator.scales(position_scale)
        self.max_iterations = config.MaxIterations if max_iterations is None else max_iterations
        self.max_evaluations = config.MaxEvaluations if max_evaluations is None else max_evaluations
        self.rank_threshold = config.RankThreshold if rank_threshold is None else rank_threshold

        # Distinct epochs are propagated once, however many observables share them
        epochs = list(dict.fromkeys(observable.epoch for observable in self.observables))
        index = {epoch: ii for ii, epoch in enumerate(epochs)}
        self._epochs = epochs
        self._epoch_index = [index[observable.epoch] for observable in self.observables]

    @property
    def num_measurements(self) -> int:
        """``int``: total number of scalar values being fit, N."""
        return sum(observable.size for observable in self.observables)

    def estimate(
        self,
        cancel_check: Callable[[], bool] | None = None,
        observer: Callable[[IterationRecord], None] | None = None,
    ) -> EstimationSummary:
        """Iterate Gauss-Newton corrections until convergence or one of the caps is reached.

        Args:
            cancel_check (``callable``, optional): polled before every iteration, a ``True`` return
                stops the estimator.
            observer (``callable``, optional): receives each :class:`.IterationRecord` synchronously.

        Raises:
            :class:`.CancelledError`: `cancel_check` requested cancellation.
            :class:`.NumericalSolveError`: the linearized system is rank deficient or non-finite.

        Returns:
            :class:`.EstimationSummary`: final estimate. Reaching a cap is not an error, the last
            estimate is returned with :attr:`.DeterminationStatus.MAX_ITERATIONS_REACHED`.
        """
        parameters = self.propagator.parameters
        history: list[IterationRecord] = []
        iterations = evaluations = 0
        status = DeterminationStatus.MAX_ITERATIONS_REACHED
        covariance = None

        while True:
            if cancel_check is not None and cancel_check():
                raise CancelledError(f"Estimation cancelled after {iterations} iterations")

            if evaluations >= self.max_evaluations:
                break

            residuals, jacobian, _ = self._linearize(parameters)
            evaluations += 1
            iterations += 1

            record = IterationRecord(
                iteration=iterations,
                evaluations=evaluations,
                rms=self._rms(residuals),
                active_measurements=len(self.observables),
            )
            history.append(record)
            orbitfitLogDebug(
                f"Iteration {record.iteration}: evaluations={record.evaluations}, rms={record.rms:.6g}, "
                f"measurements={record.active_measurements}",
            )
            if observer is not None:
                observer(record)

            correction, covariance = self._solve(residuals, jacobian)
            parameters = parameters + correction * self.scales

            if np_abs(correction).max() <= self.convergence_threshold:
                status = DeterminationStatus.CONVERGED
                break

            if iterations >= self.max_iterations:
                break

        propagator = self.propagator.withParameters(parameters)
        residuals, _, estimated = self._linearize(parameters, with_jacobian=False)
        if covariance is None:
            covariance = full((len(parameters), len(parameters)), nan)

        return EstimationSummary(
            status=status,
            propagator=propagator,
            iterations=iterations,
            evaluations=evaluations,
            rms=self._rms(residuals),
            history=tuple(history),
            observed=tuple(observable.observed for observable in self.observables),
            estimated=tuple(estimated),
            covariance=diag(self.scales) @ covariance @ diag(self.scales),
        )

    def _linearize(self, parameters: ndarray, with_jacobian: bool = True) -> tuple[ndarray, ndarray | None, list[ndarray]]:
        """Normalized residuals, normalized Jacobian & predicted values at `parameters`.

        Returns:
            ``tuple``: :math:`N\\times 1` residuals, :math:`N\\times n` Jacobian (``None`` when not
            requested), and the predicted values of each observable.
        """
        n_params = len(parameters)
        steps = FINITE_DIFFERENCE_FACTOR * self.scales
        if with_jacobian:
            # Rows: nominal, then every parameter stepped up, then every parameter stepped down
            param_sets = vstack((parameters, parameters + diag(steps), parameters - diag(steps)))
        else:
            param_sets = parameters[None, :]

        states = self.propagator.propagateParameters(param_sets, self._epochs)

        residuals, rows, estimated = [], [], []
        for observable, epoch_index in zip(self.observables, self._epoch_index):
            values = observable.estimate(states[:, epoch_index, :])
            normalization = observable.weight / observable.sigma
            estimated.append(values[0])
            residuals.append((observable.observed - values[0]) * normalization)
            if with_jacobian:
                partials = (values[1 : n_params + 1] - values[n_params + 1 :]) / (2.0 * steps[:, None])
                rows.append(partials.T * normalization[:, None] * self.scales[None, :])

        jacobian = vstack(rows) if with_jacobian else None
        return concatenate(residuals), jacobian, estimated

    def _solve(self, residuals: ndarray, jacobian: ndarray) -> tuple[ndarray, ndarray]:
        """Solve the normalized Gauss-Newton correction with a column pivoted QR decomposition.

        Raises:
            :class:`.NumericalSolveError`: the system is non-finite, under-determined, or rank deficient.

        Returns:
            ``tuple``: normalized correction :math:`\\delta x` & the normalized covariance
            :math:`(J^T J)^{-1}`.
        """
        if not (isfinite(residuals).all() and isfinite(jacobian).all()):
            raise NumericalSolveError("Linearized system contains non-finite values")

        n_values, n_params = jacobian.shape
        if n_values < n_params:
            raise NumericalSolveError(f"{n_values} measured values cannot determine {n_params} parameters")

        q_matrix, r_matrix, pivots = qr(jacobian, mode="economic", pivoting=True)
        if min(np_abs(diag(r_matrix))) <= self.rank_threshold:
            raise NumericalSolveError("Linearized system is rank deficient")

        try:
            permuted = solve_triangular(r_matrix, q_matrix.T @ residuals)
            r_inverse = inv(r_matrix)
        except LinAlgError as err:
            raise NumericalSolveError(f"Linearized system could not be solved: {err}") from err

        correction = empty(n_params)
        correction[pivots] = permuted
        normalized_covariance = empty((n_params, n_params))
        normalized_covariance[pivots[:, None], pivots[None, :]] = r_inverse @ r_inverse.T
        return correction, normalized_covariance

    @staticmethod
    def _rms(residuals: ndarray) -> float:
        """Root mean square of the normalized residuals."""
        return float(sqrt(mean(residuals**2)))
