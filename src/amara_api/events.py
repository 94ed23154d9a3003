"""Pluggable event logger for client-level events.

Any object exposing the nine syslog-style methods satisfies ``EventLogger``;
the client defaults to ``NullEventLogger`` so nothing is emitted unless the
caller injects a logger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from loguru import logger

EVENT_LEVELS = (
    "emergency",
    "alert",
    "critical",
    "error",
    "warning",
    "notice",
    "info",
    "debug",
)

_LOGURU_LEVELS = {
    "emergency": "CRITICAL",
    "alert": "CRITICAL",
    "critical": "CRITICAL",
    "error": "ERROR",
    "warning": "WARNING",
    "notice": "INFO",
    "info": "INFO",
    "debug": "DEBUG",
}


@runtime_checkable
class EventLogger(Protocol):
    def emergency(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def alert(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def error(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def notice(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def info(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def log(self, level: str, message: str, context: dict[str, Any] | None = None) -> None: ...


class BaseEventLogger(ABC):
    """Route the named level methods through ``log``.

    Subclasses implement ``log`` only.
    """

    @abstractmethod
    def log(self, level: str, message: str, context: dict[str, Any] | None = None) -> None: ...

    def emergency(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("emergency", message, context)

    def alert(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("alert", message, context)

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("critical", message, context)

    def error(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("error", message, context)

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("warning", message, context)

    def notice(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("notice", message, context)

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("info", message, context)

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log("debug", message, context)


class NullEventLogger(BaseEventLogger):
    def log(self, level: str, message: str, context: dict[str, Any] | None = None) -> None:
        return None


class LoguruEventLogger(BaseEventLogger):
    """Forward events to loguru, binding the context as extra fields.

    Output appears once the consumer calls ``logger.enable("amara_api")``.
    """

    def log(self, level: str, message: str, context: dict[str, Any] | None = None) -> None:
        loguru_level = _LOGURU_LEVELS.get(level.lower(), "INFO")
        logger.bind(**(context or {})).log(loguru_level, message)


def is_event_logger(candidate: object) -> bool:
    return isinstance(candidate, EventLogger)
