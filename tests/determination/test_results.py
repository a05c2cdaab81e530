from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

# Third Party Imports
import pytest
from numpy import array
from scipy.linalg import norm

# ORBITFIT Imports
from orbitfit.common.labels import DeterminationMode, DeterminationStatus, FrameLabel
from orbitfit.determination.batch_least_squares import BatchLeastSquaresEstimator
from orbitfit.determination.calculator import OrbitDeterminationOutcome
from orbitfit.determination.measurements import Position, Range
from orbitfit.determination.results import Residual, buildResiduals, buildResult
from orbitfit.physics.orbits.tle import propagateTLE
from orbitfit.physics.transforms.methods import convertFrame
from orbitfit.propagation.analytical import SGP4Propagator
from orbitfit.propagation.numerical import NumericalPropagator

# Type Checking Imports
if TYPE_CHECKING:
    # ORBITFIT Imports
    from orbitfit.determination.config.station_config import Station
    from orbitfit.physics.orbits.tle import TwoLineElement

EPOCH = datetime(2019, 12, 9, 16, 38, 30)


def testResidualOrdering(station: Station):
    """Test residuals are sorted by epoch, ties keeping request order."""
    later = Range(epoch=EPOCH + timedelta(seconds=10), station=station, range=1000.0)
    first = Range(epoch=EPOCH, station=station, range=1100.0)
    second = Position(epoch=EPOCH, position=[7000.0, 1.0, 2.0])

    residuals = buildResiduals(
        [later, first, second],
        [array([1000.0]), array([1100.0]), array([7000.0, 1.0, 2.0])],
        [array([999.5]), array([1100.25]), array([7000.1, 1.0, 2.0])],
    )
    assert [residual.epoch for residual in residuals] == [EPOCH, EPOCH, EPOCH + timedelta(seconds=10)]
    assert residuals[0] == Residual(EPOCH, 1100.0, 1100.25, -0.25)
    assert residuals[1].observed == 7000.0
    assert residuals[1].difference == pytest.approx(-0.1)
    assert residuals[2].difference == 0.5


def testResidualLengthMismatch(station: Station):
    """Test every measurement needs its observed & estimated values."""
    with pytest.raises(ValueError, match="zip"):
        buildResiduals([Range(epoch=EPOCH, station=station, range=1.0)], [array([1.0])], [])


def testAnalyticalResult(iss_tle: TwoLineElement, iss_measurements: list):
    """Test the analytical result carries the fitted element set & degrees for angles."""
    observables = [measurement.toObservable(FrameLabel.TEME) for measurement in iss_measurements]
    summary = BatchLeastSquaresEstimator(
        SGP4Propagator(iss_tle),
        observables,
        convergence_threshold=1e-3,
        position_scale=0.1,
    ).estimate()
    result = buildResult(DeterminationMode.ANALYTICAL, iss_measurements, observables, summary, reference_tle=iss_tle)

    assert result.status == DeterminationStatus.CONVERGED
    assert result.tle is summary.propagator.tle
    assert result.tle_lines == result.tle.lines
    assert result.state.frame == FrameLabel.TEME
    assert norm(result.state.state[:3] - propagateTLE(iss_tle, iss_tle.epoch)[:3]) < 1e-2

    angle_residual = result.residuals[1]
    assert angle_residual.observed == pytest.approx(iss_measurements[1].azimuth)
    assert 0.0 <= angle_residual.observed < 360.0

    outcome = OrbitDeterminationOutcome(result.status, result)
    assert outcome.residuals is result.residuals


def testNumericalResultRefitsElementSet(iss_tle: TwoLineElement):
    """Test a numerical estimate seeded by an element set gets one fitted to its state."""
    epoch = iss_tle.epoch
    state = convertFrame(propagateTLE(iss_tle, epoch), FrameLabel.TEME, FrameLabel.ECI, epoch)
    propagator = NumericalPropagator(epoch, state, mass=420000.0)
    measurements = [
        Position(epoch=epoch + timedelta(seconds=60 * ii), position=position[:3].tolist())
        for ii, position in enumerate(propagator.ephemeris([epoch + timedelta(seconds=60 * ii) for ii in range(3)]))
    ]
    observables = [measurement.toObservable(FrameLabel.ECI) for measurement in measurements]
    summary = BatchLeastSquaresEstimator(propagator, observables, convergence_threshold=1e-2, position_scale=1.0).estimate()

    result = buildResult(DeterminationMode.NUMERICAL, measurements, observables, summary, reference_tle=iss_tle)
    assert result.mode == DeterminationMode.NUMERICAL
    assert result.state.frame == FrameLabel.ECI
    assert result.state.mass == 420000.0
    assert result.tle.catalog_number == iss_tle.catalog_number
    assert result.tle.epoch == epoch
    assert norm(propagateTLE(result.tle, epoch)[:3] - propagateTLE(iss_tle, epoch)[:3]) < 1e-2
    assert [residual.observed for residual in result.residuals] == pytest.approx(
        [measurement.position[0] for measurement in measurements],
    )

    no_reference = buildResult(DeterminationMode.NUMERICAL, measurements, observables, summary)
    assert no_reference.tle is None
