"""Synchronous publish/subscribe relay for ledger changes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .utils import utcnow_iso

_LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[dict[str, Any]], None]

__all__ = ["EventHandler", "EventNotifier"]


class EventNotifier:
    """Dispatch named events to subscribed handlers.

    Handlers run synchronously in subscription order and receive the event
    payload. An exception in one handler is logged and does not
    prevent the remaining handlers from running.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe ``handler`` to ``event`` and return an unsubscribe callable."""

        self._listeners.setdefault(event, []).append(handler)

        def _unsubscribe() -> None:
            self.off(event, handler)

        return _unsubscribe

    def off(self, event: str, handler: EventHandler) -> bool:
        """Remove ``handler`` from ``event``; return ``False`` if it was not subscribed."""

        listeners = self._listeners.get(event)
        if not listeners or handler not in listeners:
            return False
        listeners.remove(handler)
        if not listeners:
            del self._listeners[event]
        return True

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, payload: Mapping[str, Any] | None = None) -> int:
        """Deliver ``payload`` to all handlers of ``event``.

        A ``timestamp`` is added when the payload lacks one. Returns the
        number of handlers that completed without raising.
        """

        data = dict(payload or {})
        data.setdefault("timestamp", utcnow_iso())
        delivered = 0
        # copy so handlers may unsubscribe while being dispatched
        for handler in list(self._listeners.get(event, ())):
            try:
                handler(data)
            except Exception:  # noqa: BLE001 - isolate subscribers
                _LOGGER.error("Handler %r for %s raised", handler, event, exc_info=True)
                continue
            delivered += 1
        return delivered
