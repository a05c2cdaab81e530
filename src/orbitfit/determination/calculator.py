"""Defines :func:`.compute`, which runs an orbit determination request off the calling thread.

Each request gets its own single worker thread, propagator & estimator, so independent requests
can safely run concurrently.
"""

from __future__ import annotations

# Standard Library Imports
import gc
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import timedelta
from traceback import format_exc
from typing import TYPE_CHECKING, Protocol

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import CancelledError, OrbitDeterminationError
from ..common.labels import DeterminationMode, DeterminationStatus, FrameLabel
from ..common.logger import ROOT_LOGGER_NAME, Logger, orbitfitLogError, orbitfitLogInfo
from ..dynamics.force_model import assembleForceModel
from ..physics.orbits.tle import propagateTLE, stateToTLE
from ..physics.transforms.methods import convertFrame
from ..propagation.analytical import SGP4Propagator
from ..propagation.numerical import NumericalPropagator
from .batch_least_squares import BatchLeastSquaresEstimator
from .results import buildResult

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Callable

    # Local Imports
    from ..propagation.propagator_base import StatePropagator
    from .batch_least_squares import IterationRecord
    from .config.request_config import OrbitDeterminationRequest
    from .results import OrbitDeterminationResult, Residual


class ProgressMonitor(Protocol):
    """Interface of the caller's progress display."""

    def progress(self, current: int, total: int, message: str) -> None:
        """Report progress, a negative `current` means the total amount of work is unknown."""

    def isCancelled(self) -> bool:
        """Whether the caller asked for the task to stop."""


class NullProgressMonitor:
    """Monitor that displays nothing & never cancels."""

    def progress(self, current: int, total: int, message: str) -> None:
        """Discard the progress report."""

    def isCancelled(self) -> bool:
        """Never cancel."""
        return False


@dataclass(frozen=True)
class OrbitDeterminationOutcome:
    """Terminal outcome of :func:`.compute`, :attr:`.result` is ``None`` only when cancelled."""

    status: DeterminationStatus
    result: OrbitDeterminationResult | None = None
    residuals: tuple[Residual, ...] = field(init=False)

    def __post_init__(self):
        """Expose the result residuals, empty when there is no result."""
        object.__setattr__(self, "residuals", () if self.result is None else self.result.residuals)


def buildPropagator(request: OrbitDeterminationRequest) -> StatePropagator:
    """Build the initial guess of a request.

    An explicit initial state is used as is. Otherwise the reference orbit is propagated to
    ``InitialStateOffset`` seconds before the earliest measurement. Analytical estimation fits
    the mean elements of that state, keeping the reference element set's identity fields.

    Raises:
        :class:`.InvalidForceConfigError`: numerical mode with an incomplete force model.

    Returns:
        :class:`.StatePropagator`: propagator holding the initial guess.
    """
    offset = BehavioralConfig.getConfig().estimation.InitialStateOffset
    initial_epoch = request.start - timedelta(seconds=offset)

    if request.mode == DeterminationMode.ANALYTICAL:
        if request.initial_state is not None:
            teme = request.initial_state.toFrame(FrameLabel.TEME)
            seed = stateToTLE(teme.state, teme.epoch, request.tle)
        else:
            seed = stateToTLE(propagateTLE(request.tle, initial_epoch), initial_epoch, request.tle)
        return SGP4Propagator(seed, mass=request.mass, fit_drag_term=request.fit_drag_term)

    force_model = assembleForceModel(request.force_model, request.mass)
    if request.initial_state is not None:
        initial = request.initial_state.toFrame(FrameLabel.ECI)
        return NumericalPropagator(initial.epoch, initial.state, mass=request.mass, force_model=force_model)

    if request.tle is not None:
        teme = propagateTLE(request.tle, initial_epoch)
        state = convertFrame(teme, FrameLabel.TEME, FrameLabel.ECI, initial_epoch)
        return NumericalPropagator(initial_epoch, state, mass=request.mass, force_model=force_model)

    reference = request.reference_state.toFrame(FrameLabel.ECI)
    propagator = NumericalPropagator(reference.epoch, reference.state, mass=request.mass, force_model=force_model)
    return propagator.moveTo(initial_epoch)


def _progressMessage(record: IterationRecord, max_iterations: int, max_evaluations: int) -> str:
    return (
        f"Iterations: {record.iteration}/{max_iterations} - "
        f"Evaluations: {record.evaluations}/{max_evaluations} - "
        f"RMS:{record.rms} - Nb: {record.active_measurements}"
    )


def _determineOrbit(
    request: OrbitDeterminationRequest,
    monitor: ProgressMonitor,
    iteration_observer: Callable[[IterationRecord], None] | None,
) -> OrbitDeterminationResult:
    """Worker body: configure the estimator, run it & build the result."""
    propagator = buildPropagator(request)
    observables = [measurement.toObservable(propagator.frame) for measurement in request.measurements]
    estimator = BatchLeastSquaresEstimator(
        propagator,
        observables,
        convergence_threshold=request.threshold,
        position_scale=request.position_scale,
        max_iterations=request.max_iterations,
        max_evaluations=request.max_evaluations,
    )
    orbitfitLogInfo(
        f"Estimating {request.mode.value} orbit {request.name!r} from {len(observables)} measurements "
        f"({estimator.num_measurements} values), epoch {propagator.epoch.isoformat()}",
    )
    monitor.progress(-1, 0, "Estimating new orbit...")

    def observe(record: IterationRecord) -> None:
        monitor.progress(
            record.iteration,
            estimator.max_iterations,
            _progressMessage(record, estimator.max_iterations, estimator.max_evaluations),
        )
        if iteration_observer is not None:
            iteration_observer(record)

    summary = estimator.estimate(cancel_check=monitor.isCancelled, observer=observe)
    return buildResult(request.mode, request.measurements, observables, summary, reference_tle=request.tle)


def compute(
    request: OrbitDeterminationRequest,
    monitor: ProgressMonitor | None = None,
    iteration_observer: Callable[[IterationRecord], None] | None = None,
) -> OrbitDeterminationOutcome:
    """Run an orbit determination on a dedicated worker thread & wait for its outcome.

    Cancellation is polled before the task starts & between estimator iterations, never during
    one. Reaching the iteration or evaluation cap is a usable outcome, not an error.

    Args:
        request (:class:`.OrbitDeterminationRequest`): what to estimate & from which measurements.
        monitor (:class:`.ProgressMonitor`, optional): progress display & cancellation flag.
            Defaults to a :class:`.NullProgressMonitor`.
        iteration_observer (``callable``, optional): receives every :class:`.IterationRecord`.

    Raises:
        :class:`.OrbitDeterminationError`: the task failed, the original error is its ``__cause__``.

    Returns:
        :class:`.OrbitDeterminationOutcome`: converged, capped, or cancelled outcome.
    """
    # Attaches the configured handler once, later calls reuse it
    Logger(ROOT_LOGGER_NAME)
    if monitor is None:
        monitor = NullProgressMonitor()

    if monitor.isCancelled():
        orbitfitLogInfo(f"Orbit determination {request.name!r} cancelled before starting")
        return OrbitDeterminationOutcome(DeterminationStatus.CANCELLED)

    try:
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="orbitfit") as executor:
            future = executor.submit(_determineOrbit, request, monitor, iteration_observer)
            result = future.result()

    except CancelledError as err:
        orbitfitLogInfo(f"Orbit determination {request.name!r} cancelled: {err}")
        return OrbitDeterminationOutcome(DeterminationStatus.CANCELLED)

    except Exception as err:
        orbitfitLogError(f"Orbit determination {request.name!r} failed:\n{format_exc()}")
        raise OrbitDeterminationError(f"Orbit determination failed: {err}") from err

    finally:
        gc.collect()

    orbitfitLogInfo(
        f"Orbit determination {request.name!r} finished as {result.status.value} after "
        f"{result.iterations} iterations, RMS {result.rms:.6g}",
    )
    monitor.progress(1, 1, "Done")
    return OrbitDeterminationOutcome(result.status, result)

