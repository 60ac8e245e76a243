# src/customcert/observers/dispatcher.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .events import BaseEvent

log = logging.getLogger("customcert")


class EventBus:
    """Fans each event out to every observer, in registration order."""

    def __init__(self, observers: Optional[Iterable] = None):
        self._observers: List = list(observers or [])

    def subscribe(self, observer) -> None:
        self._observers.append(observer)

    def emit(self, event: BaseEvent) -> None:
        for ob in self._observers:
            try:
                ob.notify(event)
            except Exception as exc:
                # a broken observer must never abort a certificate run
                log.debug(f"observer {ob.__class__.__name__} failed on {event.__class__.__name__}: {exc}")
