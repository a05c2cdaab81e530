"""Configure importable things that aren't pytest fixtures."""

from __future__ import annotations

# Standard Library Imports
from datetime import datetime, timedelta

# Third Party Imports
from numpy import rad2deg

# ORBITFIT Imports
from orbitfit.common.labels import FrameLabel
from orbitfit.determination.config.station_config import Station
from orbitfit.determination.measurements import AzimuthElevation, Range
from orbitfit.physics.measurements import getAzimuth, getElevation, getRange, getSlantRangeSEZ
from orbitfit.physics.orbits.tle import TwoLineElement, propagateTLE
from orbitfit.physics.transforms.methods import positionRotationToECEF

# Common element set, ISS (ZARYA)
ISS_LINE_1: str = "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991"
ISS_LINE_2: str = "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482"
ISS_NAME: str = "ISS (ZARYA)"
ISS_EPOCH: datetime = datetime(2019, 12, 9, 16, 38, 29, 363424)

# Common station
STATION_CODE: str = "BLDR"
STATION_LLA: tuple[float, float, float] = (40.0, -105.0, 1.6)

# Measurement schedule, relative to the element set epoch
MEASUREMENT_COUNT: int = 10
MEASUREMENT_SPACING: timedelta = timedelta(seconds=400)
FIRST_MEASUREMENT_OFFSET: timedelta = timedelta(seconds=1)


def measurementEpochs(start: datetime, count: int = MEASUREMENT_COUNT) -> list[datetime]:
    """Evenly spaced measurement epochs, the first one :data:`.FIRST_MEASUREMENT_OFFSET` after `start`."""
    return [start + FIRST_MEASUREMENT_OFFSET + ii * MEASUREMENT_SPACING for ii in range(count)]


def simulateStationMeasurements(
    tle: TwoLineElement,
    station: Station,
    epochs: list[datetime],
) -> list[Range | AzimuthElevation]:
    """Exact range & angle measurements of `tle` seen from `station`, in request order.

    Args:
        tle (:class:`.TwoLineElement`): true trajectory.
        station (:class:`.Station`): observing station.
        epochs (``list``): measurement epochs.

    Returns:
        ``list``: a :class:`.Range` then an :class:`.AzimuthElevation` at every epoch.
    """
    measurements = []
    for epoch in epochs:
        position_teme = propagateTLE(tle, epoch)[:3]
        position_ecef = positionRotationToECEF(FrameLabel.TEME, epoch) @ position_teme
        sez = getSlantRangeSEZ(position_ecef, station.ecef, station.ecef_2_sez)
        measurements.append(Range(epoch=epoch, station=station, range=float(getRange(sez))))
        measurements.append(
            AzimuthElevation(
                epoch=epoch,
                station=station,
                azimuth=float(rad2deg(getAzimuth(sez))),
                elevation=float(rad2deg(getElevation(sez))),
            ),
        )
    return measurements
