"""Shared, file-backed settings controlling logging, estimation & propagation.

Settings are read once from an INI file into :class:`.BehavioralConfig`, a process-wide singleton
whose sections are exposed as attributes: ``BehavioralConfig.getConfig().estimation.MaxIterations``.
"""

from __future__ import annotations

# Standard Library Imports
from configparser import ConfigParser
from configparser import Error as ConfigError
from importlib import resources
from logging import CRITICAL, DEBUG, ERROR, INFO, NOTSET, WARNING
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from typing import Any, Final


class ConfigOption(NamedTuple):
    """Default value of a setting & the :class:`.CustomConfigParser` method that reads it."""

    default: Any
    getter: str = "get"


class SubConfig:
    """Attribute access to the options of a single configuration section."""

    def __init__(self, section: str):
        if not isinstance(section, str):
            raise TypeError("Config section must be a string")
        self.section = section

    def setonce(self, name: str, value: Any):
        """Set option `name`, refusing to overwrite one already read.

        Raises:
            ``AttributeError``: `name` already has a value.
        """
        if name in vars(self):
            raise AttributeError(
                f"SubConfig {self.section!r} already has a value set for {name!r}:{getattr(self, name)!r}",
            )
        setattr(self, name, value)


class CustomConfigParser(ConfigParser):
    """:class:`ConfigParser` with getters for the option types specific to :mod:`orbitfit`."""

    LOGGING_LEVELS: Final[dict[str, int]] = {
        "CRITICAL": CRITICAL,
        "ERROR": ERROR,
        "WARNING": WARNING,
        "INFO": INFO,
        "DEBUG": DEBUG,
        "NOTSET": NOTSET,
    }

    def getlogginglevel(self, section: str, option: str) -> int:
        """Logging level named by the option, case-insensitive; unknown names give ``NOTSET``."""
        return self.LOGGING_LEVELS.get(self.get(section, option).upper(), NOTSET)

    def getupper(self, section: str, option: str) -> str:
        """Upper-cased option, for enumerated names like integrator methods."""
        return self.get(section, option).strip().upper()


class BehavioralConfig:
    """Singleton holding every configuration section."""

    DEFAULT_CONFIG_FILE: Final[str] = "default_behavior.config"

    SCHEMA: Final[dict[str, dict[str, ConfigOption]]] = {
        "logging": {
            "OutputLocation": ConfigOption("stdout"),
            "Level": ConfigOption(INFO, "getlogginglevel"),
            "MaxFileSize": ConfigOption(1048576, "getint"),
            "MaxFileCount": ConfigOption(50, "getint"),
            "AllowMultipleHandlers": ConfigOption(False, "getboolean"),
        },
        "estimation": {
            "MaxIterations": ConfigOption(25, "getint"),
            "MaxEvaluations": ConfigOption(35, "getint"),
            "NumericalConvergenceThreshold": ConfigOption(0.01, "getfloat"),
            "AnalyticalConvergenceThreshold": ConfigOption(0.001, "getfloat"),
            "NumericalPositionScale": ConfigOption(1.0, "getfloat"),
            "AnalyticalPositionScale": ConfigOption(1.0, "getfloat"),
            "RankThreshold": ConfigOption(1e-11, "getfloat"),
            "InitialStateOffset": ConfigOption(1.0, "getfloat"),
            "DefaultMass": ConfigOption(1000.0, "getfloat"),
        },
        "propagation": {
            "IntegrationMethod": ConfigOption("DOP853", "getupper"),
            "MaxStep": ConfigOption(300.0, "getfloat"),
            "PositionTolerance": ConfigOption(1.0, "getfloat"),
            "GravityDegree": ConfigOption(64, "getint"),
            "GravityOrder": ConfigOption(64, "getint"),
            "GeopotentialModel": ConfigOption("egm96.txt"),
        },
        "solar_activity": {
            "F107": ConfigOption(150.0, "getfloat"),
            "F107Average": ConfigOption(150.0, "getfloat"),
            "Kp": ConfigOption(2.0, "getfloat"),
        },
        "eop": {
            "LoaderName": ConfigOption("LeapSecondEOPLoader"),
            "LoaderLocation": ConfigOption(""),
        },
    }
    """``dict``: every section & option, with its default and parser getter."""

    __shared_inst: BehavioralConfig | None = None

    def __init__(self, config_file_path: str | None = None):
        """Read the settings, falling back to :attr:`.SCHEMA` defaults for anything missing.

        Args:
            config_file_path (``str``, optional): INI file to read instead of the bundled
                defaults. A path that does not exist leaves every option at its default.
        """
        self._parser = CustomConfigParser()

        if config_file_path is None:
            res = resources.files("orbitfit.common").joinpath(self.DEFAULT_CONFIG_FILE)
            with resources.as_file(res) as res_filepath:
                self._read(res_filepath)
        elif Path(config_file_path).exists():
            self._read(Path(config_file_path))

        for section, options in self.SCHEMA.items():
            sub = SubConfig(section)
            for name, option in options.items():
                try:
                    value = getattr(self._parser, option.getter)(section, name)
                except ConfigError:
                    value = option.default
                sub.setonce(name, value)
            setattr(self, section, sub)

        BehavioralConfig.__shared_inst = self

    def _read(self, path: Path):
        with open(path, encoding="utf-8") as config_file:
            self._parser.read_file(config_file)

    @classmethod
    def getConfig(cls, config_file_path: str | None = None) -> BehavioralConfig:
        """Return the shared config, reading it from `config_file_path` on first use."""
        if cls.__shared_inst is None:
            cls.__shared_inst = BehavioralConfig(config_file_path=config_file_path or None)
        return cls.__shared_inst

    @classmethod
    def resetConfig(cls) -> None:
        """Drop the shared instance so the next :meth:`.getConfig` re-reads its source."""
        cls.__shared_inst = None
