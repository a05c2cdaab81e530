"""Module describing the result objects produced by an orbit determination."""

from __future__ import annotations

# Standard Library Imports
from dataclasses import dataclass
from operator import attrgetter
from typing import TYPE_CHECKING

# Local Imports
from ..common.labels import DeterminationMode, FrameLabel
from ..physics.orbits.tle import stateToTLE

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Sequence
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ..common.labels import DeterminationStatus
    from ..physics.orbits.tle import TwoLineElement
    from ..propagation.propagator_base import StatePropagator
    from .batch_least_squares import EstimationSummary, IterationRecord
    from .config.state_config import OrbitState
    from .measurements import MeasurementBase, Observable


@dataclass(frozen=True)
class Residual:
    """Observed & estimated value of one measurement, for diagnostic plotting.

    Only the first scalar of multi-valued measurements is reported: the azimuth of an angle pair,
    the x component of a position.
    """

    epoch: datetime
    """``datetime``: epoch of the measurement."""

    observed: float
    """``float``: observed value, in reporting units (km or degrees)."""

    estimated: float
    """``float``: value predicted by the final estimate, in reporting units."""

    difference: float
    """``float``: :attr:`.observed` minus :attr:`.estimated`."""


@dataclass(frozen=True)
class OrbitDeterminationResult:
    """Final estimate of an orbit determination.

    The engine keeps no reference to the result once it is returned.
    """

    status: DeterminationStatus
    """:class:`.DeterminationStatus`: converged, or a cap was reached first."""

    mode: DeterminationMode
    """:class:`.DeterminationMode`: which propagation model was fitted."""

    propagator: StatePropagator
    """:class:`.StatePropagator`: propagator configured with the estimated parameters."""

    state: OrbitState
    """:class:`.OrbitState`: estimated state at the propagator epoch, in the propagator frame."""

    tle: TwoLineElement | None
    """:class:`.TwoLineElement`: fitted element set, when the request had a reference one."""

    residuals: tuple[Residual, ...]
    """``tuple``: one residual per measurement, sorted by epoch."""

    history: tuple[IterationRecord, ...]
    """``tuple``: diagnostics of every estimator iteration."""

    iterations: int
    evaluations: int
    rms: float
    covariance: ndarray
    """``ndarray``: :math:`n\\times n` covariance of the estimated parameters."""

    @property
    def tle_lines(self) -> tuple[str, str] | None:
        """``tuple``: the two formatted lines of :attr:`.tle`."""
        return None if self.tle is None else self.tle.lines


def buildResiduals(
    measurements: Sequence[MeasurementBase],
    observed: Sequence[ndarray],
    estimated: Sequence[ndarray],
) -> list[Residual]:
    """Pair every measurement with the first scalar of its observed & estimated values.

    Args:
        measurements (``list``): measurements, in request order.
        observed (``list``): observed values of each measurement, in reporting units.
        estimated (``list``): estimated values of each measurement, in reporting units.

    Returns:
        ``list``: residuals sorted by epoch, ties keep request order.
    """
    residuals = []
    for measurement, observed_values, estimated_values in zip(measurements, observed, estimated, strict=True):
        observed_value, estimated_value = float(observed_values[0]), float(estimated_values[0])
        residuals.append(
            Residual(
                epoch=measurement.epoch,
                observed=observed_value,
                estimated=estimated_value,
                difference=observed_value - estimated_value,
            ),
        )
    # Python's sort is stable
    return sorted(residuals, key=attrgetter("epoch"))


def buildResult(
    mode: DeterminationMode,
    measurements: Sequence[MeasurementBase],
    observables: Sequence[Observable],
    summary: EstimationSummary,
    reference_tle: TwoLineElement | None = None,
) -> OrbitDeterminationResult:
    """Materialize the output of an estimator run.

    Analytical estimates carry their fitted element set directly. Numerical estimates seeded by
    an element set get one fitted to the estimated state, keeping the reference identity fields.

    Args:
        mode (:class:`.DeterminationMode`): which propagation model was fitted.
        measurements (``list``): measurements, in request order.
        observables (``list``): observables built from `measurements`, in the same order.
        summary (:class:`.EstimationSummary`): output of the estimator.
        reference_tle (:class:`.TwoLineElement`, optional): element set the request was seeded with.

    Returns:
        :class:`.OrbitDeterminationResult`: immutable result.
    """
    propagator = summary.propagator
    state = propagator.orbitState()

    if mode == DeterminationMode.ANALYTICAL:
        tle = propagator.tle
    elif reference_tle is not None:
        teme = state.toFrame(FrameLabel.TEME)
        tle = stateToTLE(teme.state, teme.epoch, reference_tle)
    else:
        tle = None

    residuals = buildResiduals(
        measurements,
        [values * observable.display_scale for values, observable in zip(summary.observed, observables)],
        [values * observable.display_scale for values, observable in zip(summary.estimated, observables)],
    )

    return OrbitDeterminationResult(
        status=summary.status,
        mode=mode,
        propagator=propagator,
        state=state,
        tle=tle,
        residuals=tuple(residuals),
        history=summary.history,
        iterations=summary.iterations,
        evaluations=summary.evaluations,
        rms=summary.rms,
        covariance=summary.covariance,
    )
