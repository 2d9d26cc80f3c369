"""Processing run context shared by every bundling stage.

A :class:`ProcessingRun` carries the run status, the failure message and the
human readable processing log. Frontends subscribe to it instead of the
engine holding any presentation state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from review_bundler.models.errors import RunInProgressError


class RunStatus(StrEnum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RunEvent:
    """Notification sent to run listeners.

    Exactly one of ``status`` or ``message`` is set: ``status`` for a status
    transition, ``message`` for a new log line.
    """

    status: RunStatus | None = None
    message: str | None = None


RunListener = Callable[[RunEvent], None]


@dataclass(slots=True)
class ProcessingRun:
    status: RunStatus = RunStatus.IDLE
    error: str | None = None
    log_lines: list[str] = field(default_factory=list)
    _listeners: list[RunListener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: RunListener) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def log(self, message: str) -> str:
        """Append a timestamped line to the processing log and return it."""
        line = f"[{datetime.now().strftime('%H:%M:%S')}] {message}"
        self.log_lines.append(line)
        self._emit(RunEvent(message=line))
        return line

    def start(self) -> None:
        if self.status is RunStatus.PROCESSING:
            raise RunInProgressError("A processing run is already in progress")
        self.log_lines.clear()
        self.error = None
        self._transition(RunStatus.PROCESSING)

    def succeed(self) -> None:
        self._transition(RunStatus.SUCCESS)

    def fail(self, message: str) -> None:
        self.error = message
        self.log(f"Error: {message}")
        self._transition(RunStatus.ERROR)

    @property
    def is_active(self) -> bool:
        return self.status is RunStatus.PROCESSING

    def _transition(self, status: RunStatus) -> None:
        self.status = status
        self._emit(RunEvent(status=status))

    def _emit(self, event: RunEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
