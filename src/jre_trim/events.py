"""Progress, structured events and cooperative cancellation.

Core operations never write to a global log sink for UI purposes. They take
an ``on_progress`` callable (percent in [0, 100]) and an ``on_event``
callable receiving :class:`AnalysisEvent` records; both may be invoked from
worker threads.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .exceptions import OperationCancelledError

ProgressCallback = Optional[Callable[[float], None]]


class EventLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    EventLevel.DEBUG: logging.DEBUG,
    EventLevel.INFO: logging.INFO,
    EventLevel.WARNING: logging.WARNING,
    EventLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class AnalysisEvent:
    """One structured log line emitted during analysis or build."""

    level: EventLevel
    message: str
    phase: str = ""


EventCallback = Optional[Callable[[AnalysisEvent], None]]


class EventEmitter:
    """Fan a message out to a module logger and an optional event callback.

    Progress is clamped to [0, 100] and never reported backwards, so callers
    may report from several worker threads without coordinating.
    """

    def __init__(
        self,
        logger: logging.Logger,
        on_event: EventCallback = None,
        on_progress: ProgressCallback = None,
    ):
        self._logger = logger
        self._on_event = on_event
        self._on_progress = on_progress
        self._phase = ""
        self._last_percent = 0.0
        self._lock = threading.Lock()

    @property
    def phase(self) -> str:
        return self._phase

    def enter_phase(self, phase: str) -> None:
        self._phase = phase
        self.debug(f"Entering phase: {phase}")

    def progress(self, percent: float) -> None:
        percent = max(0.0, min(100.0, float(percent)))
        with self._lock:
            if percent < self._last_percent:
                return
            self._last_percent = percent
            # Delivered under the lock so values reach the callback in order
            if self._on_progress is not None:
                self._on_progress(percent)

    def emit(self, level: EventLevel, message: str, log: bool = True) -> None:
        """Send ``message`` to the callback, and to the logger unless ``log`` is False.

        Pass ``log=False`` for messages a lower layer has already logged.
        """
        if log:
            self._logger.log(level.logging_level, message)
        if self._on_event is not None:
            self._on_event(AnalysisEvent(level=level, message=message, phase=self._phase))

    def debug(self, message: str) -> None:
        self.emit(EventLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.emit(EventLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.emit(EventLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.emit(EventLevel.ERROR, message)


class CancellationToken:
    """Thread-safe cancellation flag checked between units of work."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, phase: str) -> None:
        if self._event.is_set():
            raise OperationCancelledError(phase)


def check_cancelled(token: Optional[CancellationToken], phase: str) -> None:
    """Raise OperationCancelledError if ``token`` has been cancelled."""
    if token is not None:
        token.raise_if_cancelled(phase)
