# src/ds_app/core/progress.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class Severity(str, Enum):
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


@runtime_checkable
class ProgressSink(Protocol):
    def tick(self, processed: int, total: int) -> None: ...
    def log(self, message: str, severity: Severity = Severity.info) -> None: ...


@dataclass(frozen=True)
class ProgressState:
    processed: int = 0
    total: int = 0

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total else 0.0


class ProgressTracker:
    """
    Owns the (processed, total) counter for one run and forwards every change
    to the sink. Counts never go backwards and never pass the total.
    """

    def __init__(self, sink: ProgressSink) -> None:
        self.sink = sink
        self.state = ProgressState()

    def reset(self, total: int = 0) -> ProgressState:
        self.state = ProgressState(0, max(0, total))
        self.sink.tick(self.state.processed, self.state.total)
        return self.state

    def advance(self, units: int = 1) -> ProgressState:
        if units <= 0:
            return self.state
        processed = min(self.state.processed + units, self.state.total)
        self.state = ProgressState(processed, self.state.total)
        self.sink.tick(self.state.processed, self.state.total)
        return self.state


_LEVELS = {
    Severity.info: logging.INFO,
    Severity.success: logging.INFO,
    Severity.warning: logging.WARNING,
    Severity.error: logging.ERROR,
}


class LoggingSink:
    """Headless sink: log lines go to stdlib logging, ticks at DEBUG."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("ds_app.progress")

    def tick(self, processed: int, total: int) -> None:
        state = ProgressState(processed, total)
        self.logger.debug(
            "progress %d/%d (%.0f%%)", state.processed, state.total, 100 * state.fraction
        )

    def log(self, message: str, severity: Severity = Severity.info) -> None:
        self.logger.log(_LEVELS[Severity(severity)], message)
