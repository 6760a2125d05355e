from __future__ import annotations
"""Logging for slotflow: Rich console handler plus the logger sinks.

The processor and modules talk to an :class:`ApplicationLogger` (a
``(source, level, message)`` sink). :class:`NullLogger` is the default;
:class:`StdlibLogger` forwards into the ``slotflow`` stdlib logger, which
is wired to a :class:`rich.logging.RichHandler`.
"""
from enum import IntEnum
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING, Logger, basicConfig, getLogger
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

from rich.console import Console
from rich.logging import RichHandler

console = Console()

__all__ = [
    "LogLevel",
    "ApplicationLogger",
    "NullLogger",
    "StdlibLogger",
    "MemoryLogger",
    "get",
    "level_names",
    "log",
    "console",
]

_LEVEL_MAP = {
    "debug": DEBUG,
    "info": INFO,
    "information": INFO,
    "warning": WARNING,
    "error": ERROR,
    "critical": CRITICAL,
}

# Configure root once with Rich handler for plain log messages
basicConfig(
    level=INFO,
    format="%(message)s",
    datefmt="%H:%M:%S",
    handlers=[RichHandler(console=console, rich_tracebacks=True, markup=False)],
)

log: Logger = getLogger("slotflow")


def get(level: str = "info") -> Logger:  # noqa: D401
    """Return the package logger set to *level* (str)."""
    lvl = _LEVEL_MAP.get(level.lower(), INFO)
    lg = getLogger("slotflow")
    lg.setLevel(lvl)
    return lg


def level_names() -> List[str]:
    return sorted(_LEVEL_MAP)


# --------------------------------------------------------------------------- #
# Logger sinks
# --------------------------------------------------------------------------- #

class LogLevel(IntEnum):
    DEBUG = DEBUG
    INFORMATION = INFO
    WARNING = WARNING
    ERROR = ERROR
    CRITICAL = CRITICAL


@runtime_checkable
class ApplicationLogger(Protocol):  # noqa: D101
    def log(self, source: Any, level: LogLevel, message: str) -> None: ...


class NullLogger:
    """Discards everything."""

    def log(self, source: Any, level: LogLevel, message: str) -> None:  # noqa: D401
        return None


class StdlibLogger:
    """Forward sink calls to a stdlib :class:`logging.Logger` (``slotflow`` by default)."""

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger if logger is not None else log

    def log(self, source: Any, level: LogLevel, message: str) -> None:
        self.logger.log(int(level), "[%s] %s", type(source).__name__, message)


class MemoryLogger:
    """Keep every entry in :attr:`entries`; handy for tests and post-mortems."""

    def __init__(self) -> None:
        self.entries: List[Tuple[Any, LogLevel, str]] = []

    def log(self, source: Any, level: LogLevel, message: str) -> None:
        self.entries.append((source, level, message))

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        return [m for _, lvl, m in self.entries if level is None or lvl == level]
