from __future__ import annotations

# Standard Library Imports
from collections import OrderedDict
from logging import DEBUG, INFO
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# ORBITFIT Imports
from orbitfit.common.behavioral_config import BehavioralConfig, SubConfig

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from logging import Logger
    from pathlib import Path

CONFIG_FILE_VALID: tuple[str, ...] = (
    "[logging]\n",
    "OutputLocation = ./logs/\n",
    "Level = debug\n",
    "MaxFileSize = 2048\n",
    "MaxFileCount = 10\n",
    "[estimation]\n",
    "MaxIterations = 7\n",
    "AnalyticalConvergenceThreshold = 1e-5\n",
    "[propagation]\n",
    "IntegrationMethod = rk45\n",
)

CORRECT_DEFAULTS = OrderedDict(
    {
        "logging": {
            "OutputLocation": "stdout",
            "Level": INFO,
            "MaxFileSize": 1048576,
            "MaxFileCount": 50,
            "AllowMultipleHandlers": False,
        },
        "estimation": {
            "MaxIterations": 25,
            "MaxEvaluations": 35,
            "NumericalConvergenceThreshold": 0.01,
            "AnalyticalConvergenceThreshold": 0.001,
            "NumericalPositionScale": 1.0,
            "AnalyticalPositionScale": 1.0,
            "RankThreshold": 1e-11,
            "InitialStateOffset": 1.0,
            "DefaultMass": 1000.0,
        },
        "propagation": {
            "IntegrationMethod": "DOP853",
            "MaxStep": 300.0,
            "PositionTolerance": 1.0,
            "GravityDegree": 64,
            "GravityOrder": 64,
            "GeopotentialModel": "egm96.txt",
        },
        "solar_activity": {
            "F107": 150.0,
            "F107Average": 150.0,
            "Kp": 2.0,
        },
        "eop": {
            "LoaderName": "LeapSecondEOPLoader",
        },
    },
)


@pytest.fixture(name="file_config")
def mockCustomSettingsFile(tmp_path: Path) -> BehavioralConfig:
    """Write a partial custom config file & load the shared configuration from it.

    Args:
        tmp_path (``Path``): location of the current test's temporary directory

    Returns:
        :class:.`BehavioralConfig`: non-default configuration object
    """
    config_path = tmp_path / "test.config"
    with open(config_path, "w", encoding="utf-8") as config_file:
        config_file.writelines(CONFIG_FILE_VALID)

    return BehavioralConfig.getConfig(str(config_path))


def testImported():
    """Test that the bundled configuration matches the default values."""
    config = BehavioralConfig.getConfig()
    for section, section_conf in CORRECT_DEFAULTS.items():
        for option, value in section_conf.items():
            conf_section = getattr(config, section)
            conf_option = getattr(conf_section, option)
            assert value == conf_option


def testSinglePattern():
    """Test that :class:.`BehavioralConfig` is a proper Singleton class."""
    config = BehavioralConfig.getConfig()
    # ORBITFIT Imports
    from orbitfit.common.behavioral_config import BehavioralConfig as SecondConfig

    assert config is SecondConfig.getConfig()


def testOverwrite():
    """Test overwriting the shared :class:`.BehavioralConfig` directly with custom settings."""
    custom_config = BehavioralConfig.getConfig()
    custom_config.estimation.MaxIterations = 3
    custom_config.logging.Level = DEBUG

    # Re-fetch and check the values
    second_config = BehavioralConfig.getConfig()
    assert second_config.estimation.MaxIterations == 3
    assert second_config.logging.Level == DEBUG

    # Assert singleton condition
    assert custom_config is second_config


def testResetConfig():
    """Test that resetting drops in-memory changes."""
    config = BehavioralConfig.getConfig()
    config.estimation.MaxIterations = 3
    BehavioralConfig.resetConfig()

    fresh = BehavioralConfig.getConfig()
    assert fresh is not config
    assert fresh.estimation.MaxIterations == CORRECT_DEFAULTS["estimation"]["MaxIterations"]


def testNonDefaultFile(test_logger: Logger, file_config: BehavioralConfig):
    """Test loading the shared :class:`.BehavioralConfig` from a partial custom config file.

    Args:
        test_logger (:class:`logging.Logger`): unit test logger object
        file_config (:class:.`BehavioralConfig`): non-default config object
    """
    test_logger.debug(f"Custom estimation section: {vars(file_config.estimation)}")

    # Check the values
    assert file_config.logging.OutputLocation == "./logs/"
    assert file_config.logging.Level == DEBUG
    assert file_config.logging.MaxFileSize == 2048
    assert file_config.logging.MaxFileCount == 10
    assert file_config.estimation.MaxIterations == 7
    assert file_config.estimation.AnalyticalConvergenceThreshold == 1e-5
    assert file_config.propagation.IntegrationMethod == "RK45"

    # Options missing from the file keep their defaults
    assert file_config.estimation.MaxEvaluations == CORRECT_DEFAULTS["estimation"]["MaxEvaluations"]
    assert file_config.solar_activity.F107 == CORRECT_DEFAULTS["solar_activity"]["F107"]

    # Check it changes for all callers
    assert BehavioralConfig.getConfig() is file_config


def testMissingFile(tmp_path: Path):
    """Test that a missing config file falls back to every default."""
    config = BehavioralConfig(str(tmp_path / "missing.config"))
    for section, section_conf in CORRECT_DEFAULTS.items():
        for option, value in section_conf.items():
            assert getattr(getattr(config, section), option) == value


def testSubConfigSetOnce():
    """Test that a :class:`.SubConfig` value cannot be set twice through :meth:`.SubConfig.setonce`."""
    sub = SubConfig("section")
    sub.setonce("Value", 10)
    assert sub.Value == 10

    with pytest.raises(AttributeError, match="already has a value set"):
        sub.setonce("Value", 11)

    with pytest.raises(TypeError):
        SubConfig(5)
