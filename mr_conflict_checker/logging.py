"""Logging from config and CLI flags.

Levels (inclusive):
- ERROR: run-aborting failures
- WARNING: per-repository failures and ERROR
- INFO: progress, excluded repositories, WARNING and ERROR
- DEBUG: every API request and all levels above

Configure via config.yaml (logging.level, logging.format), env (LOGGING_LEVEL,
LOGGING_FORMAT) or the --verbose / --debug flags.
"""

import logging

from mr_conflict_checker.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class CheckerLogging:
    """Configures root logger from LoggingConfig, optionally overridden by CLI flags."""

    def __init__(self, config: LoggingConfig, verbose: bool = False, debug: bool = False) -> None:
        level = _resolve_level(config.level)
        if debug:
            level = logging.DEBUG
        elif verbose:
            level = min(level, logging.INFO)
        self._level = level
        self._format = config.format or DEFAULT_FORMAT

    @property
    def level(self) -> int:
        return self._level

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        # urllib3 logs every connection at DEBUG
        logging.getLogger("urllib3").setLevel(max(self._level, logging.INFO))

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
