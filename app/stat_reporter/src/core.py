from __future__ import annotations

import logging
import os
from dataclasses import dataclass


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NOISY_LOGGERS = ("urllib3",)


def resolve_log_level(level_name: str | None = None) -> int:
    """Map a level name (or LOG_LEVEL) to a logging level, defaulting to INFO."""
    name = (level_name or os.environ.get("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str | None = None) -> None:
    """Send progress messages to the console once per process.

    An explicit level wins over LOG_LEVEL. Per-request HTTP chatter from the
    name lookups is held at WARNING unless DEBUG is asked for.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = resolve_log_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


class StatReporterError(Exception):
    """Base exception for stat reporting failures."""


class IdentityResolutionError(StatReporterError):
    """Raised when a player identifier cannot be resolved to a display name."""


@dataclass(frozen=True)
class PlayerNotFoundError(IdentityResolutionError):
    """Raised when the identity service answers with a non-success status."""

    identifier: str
    status_code: int

    def __str__(self) -> str:
        return f"No profile for {self.identifier} (status {self.status_code})"


class IdentityLookupError(IdentityResolutionError):
    """Raised when the identity request cannot complete or returns garbage."""


class InvalidStatValueError(StatReporterError, ValueError):
    """Raised when a statistic value is not a base-10 integer."""


class StatsFileError(StatReporterError, ValueError):
    """Raised when a stats file cannot be read or has the wrong shape."""


class NoPlayerStatsError(StatReporterError):
    """Raised when no player records are left to aggregate."""
