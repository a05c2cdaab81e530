"""Package logging: a configurable :class:`.Logger` plus one-line helpers for library code.

Library modules log through the ``orbitfit`` logger with the ``orbitfitLog*`` helpers, so they
never configure handlers themselves. Applications attach output with :class:`.Logger`.
"""

from __future__ import annotations

# Standard Library Imports
import logging
import sys
from functools import partial
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Local Imports
from . import pathSafeTime
from .behavioral_config import BehavioralConfig

ROOT_LOGGER_NAME: str = "orbitfit"
"""``str``: name of the package-level logger that every helper writes to."""

LOG_FORMAT: str = "%(asctime)s - %(threadName)s - %(module)s - %(levelname)s - %(message)s"
"""``str``: record layout; includes the thread name so worker-thread estimation is traceable."""


class Logger:
    """A :class:`logging.Logger` with a handler chosen by the ``logging`` configuration section.

    Output goes either to ``stdout`` or to a rotating, timestamped file inside a directory.
    Unknown attributes are forwarded to the wrapped logger, so ``Logger(...).info()`` works.
    """

    def __init__(self, name, level=None, path=None, allow_multiple_handlers=None):
        """Attach a handler to the logger `name`, unless it already has one.

        Args:
            name (``str``): name of the logger.
            level (``int``, optional): minimum level published. Defaults to the configured level.
            path (``str``, optional): ``"stdout"`` or a directory receiving log files.
            allow_multiple_handlers (``bool``, optional): whether to add a handler to a logger
                that already has one.
        """
        config = BehavioralConfig.getConfig().logging
        level = level or config.Level
        path = path or config.OutputLocation
        allow_multiple_handlers = allow_multiple_handlers or config.AllowMultipleHandlers

        self.logger = logging.getLogger(name)
        self.filename = None
        if self.logger.handlers and not allow_multiple_handlers:
            return

        if path == "stdout":
            self.filename = "stdout"
            handler = logging.StreamHandler(sys.stdout)
        else:
            directory = Path(path)
            directory.mkdir(parents=True, exist_ok=True)
            self.filename = str(directory / f"{name}_{pathSafeTime()}.log")
            handler = RotatingFileHandler(self.filename, maxBytes=config.MaxFileSize, backupCount=config.MaxFileCount)

        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.setLevel(level)
        self.logger.addHandler(handler)

    def __getattr__(self, name):
        return getattr(self.logger, name)


def _orbitfitLog(message: str, level: int):
    """Record `message` on the package-level logger at `level`."""
    logging.getLogger(ROOT_LOGGER_NAME).log(level, message)


orbitfitLogCritical = partial(_orbitfitLog, level=logging.CRITICAL)
orbitfitLogError = partial(_orbitfitLog, level=logging.ERROR)
orbitfitLogWarning = partial(_orbitfitLog, level=logging.WARNING)
orbitfitLogInfo = partial(_orbitfitLog, level=logging.INFO)
orbitfitLogDebug = partial(_orbitfitLog, level=logging.DEBUG)
