"""Leveled notifications at the end of a run."""

import enum
from typing import Protocol

from ignition import log


class Level(enum.Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @classmethod
    def parse(cls, value: "str | Level") -> "Level":
        if isinstance(value, Level):
            return value
        name = str(value).strip().lower()
        if name == "warning":
            name = "warn"
        return cls(name)


class Notifier(Protocol):
    def notify(self, message: str, level: Level, title: str = "", timeout_ms: int = 0) -> None: ...


class TerminalNotifier:
    """Print notifications through log; the timeout has no meaning on a terminal."""

    def notify(self, message: str, level: Level, title: str = "", timeout_ms: int = 0) -> None:
        if level is Level.ERROR:
            log.failure(message, title=title or None)
        elif level is Level.WARN:
            log.warning(message, title=title or None)
        else:
            log.success(message, title=title or None)
