"""Minimal typed event bus.

Handlers subscribe per event class. `publish` runs them on a background
thread so triggers are fire-and-forget; pass `wait=True` to run them inline.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable

LOG = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    def __init__(self):
        self._handlers: dict[type, list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: type, handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def handlers_for(self, event: Any) -> list[Handler]:
        with self._lock:
            return list(self._handlers.get(type(event), ()))

    def _run(self, event: Any, handlers: list[Handler]) -> None:
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                LOG.exception("Handler %r failed for %s", handler, type(event).__name__)

    def publish(self, event: Any, *, wait: bool = False) -> threading.Thread | None:
        """Deliver event to its handlers. Returns the worker thread unless wait=True."""
        handlers = self.handlers_for(event)
        if not handlers:
            LOG.debug("No handlers for %s", type(event).__name__)
            return None

        if wait:
            self._run(event, handlers)
            return None

        worker = threading.Thread(
            target=self._run,
            args=(event, handlers),
            name=f"event-{type(event).__name__}",
            daemon=True,
        )
        worker.start()
        return worker
