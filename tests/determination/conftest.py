from __future__ import annotations

# Standard Library Imports
from dataclasses import replace
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# ORBITFIT Imports
from orbitfit.physics.constants import DEG2RAD

# Local Imports
from .. import ISS_EPOCH, measurementEpochs, simulateStationMeasurements

# Type Checking Imports
if TYPE_CHECKING:
    # ORBITFIT Imports
    from orbitfit.determination.config.station_config import Station
    from orbitfit.determination.measurements import AzimuthElevation, Range
    from orbitfit.physics.orbits.tle import TwoLineElement


@pytest.fixture(name="iss_measurements")
def getISSMeasurements(iss_tle: TwoLineElement, station: Station) -> list[Range | AzimuthElevation]:
    """Exact range & angle measurements of the ISS over an hour."""
    return simulateStationMeasurements(iss_tle, station, measurementEpochs(ISS_EPOCH))


@pytest.fixture(name="perturbed_tle")
def getPerturbedTLE(iss_tle: TwoLineElement) -> TwoLineElement:
    """ISS element set with its orbit plane rotated by a hundredth of a degree."""
    return replace(
        iss_tle,
        inclination=iss_tle.inclination + 0.01 * DEG2RAD,
        right_ascension=iss_tle.right_ascension + 0.01 * DEG2RAD,
    )
