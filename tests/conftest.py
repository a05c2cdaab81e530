from __future__ import annotations

# Standard Library Imports
import logging
import sys
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# ORBITFIT Imports
from orbitfit.common.behavioral_config import BehavioralConfig
from orbitfit.determination.config.station_config import Station
from orbitfit.physics.orbits.tle import TwoLineElement

# Local Imports
from . import ISS_LINE_1, ISS_LINE_2, ISS_NAME, STATION_CODE, STATION_LLA

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from pathlib import Path


@pytest.fixture(autouse=True)
def _resetBehavioralConfig() -> None:
    """Make every test start from, and leave behind, the bundled default configuration."""
    BehavioralConfig.resetConfig()
    yield
    BehavioralConfig.resetConfig()


@pytest.fixture(scope="session", name="test_logger")
def getTestLoggerObject() -> logging.Logger:
    """Create a custom :class:`logging.Logger` object."""
    logger = logging.getLogger("Unit Test Logger")
    logger.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return logger


@pytest.fixture(name="iss_tle")
def getISSElementSet() -> TwoLineElement:
    """Return the common ISS :class:`.TwoLineElement`."""
    return TwoLineElement.fromLines(ISS_LINE_1, ISS_LINE_2, name=ISS_NAME)


@pytest.fixture(name="station")
def getStation() -> Station:
    """Return the common ground :class:`.Station`."""
    latitude, longitude, altitude = STATION_LLA
    return Station(code=STATION_CODE, latitude=latitude, longitude=longitude, altitude=altitude, name="Boulder")


@pytest.fixture(name="fine_integration_config")
def setFineIntegrationConfig(tmp_path: Path) -> BehavioralConfig:
    """Shared configuration with a tight integration tolerance, for numerical estimation tests."""
    config_path = tmp_path / "fine.config"
    config_path.write_text("[propagation]\nPositionTolerance = 0.001\n", encoding="utf-8")
    BehavioralConfig.resetConfig()
    return BehavioralConfig.getConfig(str(config_path))


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add command line options."""
    parser.addoption("--runslow", action="store_true", default=False, help="run slow tests")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest options without an .ini file."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Collect pytest modifiers."""
    if config.getoption("--runslow"):
        # --runslow given in cli: do not skip slow tests
        return
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
