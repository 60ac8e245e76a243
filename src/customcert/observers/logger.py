# src/customcert/observers/logger.py
from __future__ import annotations

import logging

from .events import BaseEvent, RunFailed, RunSummary, SideEffectFailed

# Fields already carried by every log line or irrelevant to the operator.
_HIDDEN = ("ts", "run_id", "context", "env")


class LoggerObserver:
    """Mirrors events into the run log; failures surface above DEBUG."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _level(self, event: BaseEvent) -> int:
        if isinstance(event, RunFailed):
            return logging.ERROR
        if isinstance(event, SideEffectFailed):
            return logging.WARNING
        if isinstance(event, RunSummary) and event.status != "OK":
            return logging.ERROR
        return logging.DEBUG

    def notify(self, event: BaseEvent) -> None:
        fields = ", ".join(f"{k}={v}" for k, v in event.dict().items() if k not in _HIDDEN)
        self.logger.log(self._level(event), f"[{event.__class__.__name__}] {fields}")
