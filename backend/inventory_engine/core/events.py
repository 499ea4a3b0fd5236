"""
Inventory Event Bus
Routes engine notifications to registered subscribers.

The engine emits an event after every committed mutation. It never
interprets its own events; subscribers (UI refreshers, job-cost
integrations, audit sinks) are external collaborators.

Dispatch behavior:
1. Look up subscribers for the event name plus wildcard subscribers
2. Execute handlers sequentially in subscription order
3. Catch, log and report a failing handler, then continue
4. Never undo the mutation that produced the event
"""
from .logging import get_logger
from threading import Lock
from typing import Any, Callable, Dict, List

logger = get_logger("events")

WILDCARD = "*"

EventHandler = Callable[[str, Dict[str, Any]], None]


class EventBus:
    """In-process publish/subscribe bus"""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._lock = Lock()

    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler for an event name (or "*" for every event).

        Returns a callable that removes the subscription.
        """
        with self._lock:
            self._handlers.setdefault(event, []).append(handler)

        def _unsubscribe():
            self.unsubscribe(event, handler)

        return _unsubscribe

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

    def emit(self, event: str, payload: Dict[str, Any]) -> dict:
        """
        Dispatch an event to its subscribers.

        Returns a dispatch summary:
        {'event': str, 'notified': int, 'failed': int, 'failures': list[dict]}
        """
        with self._lock:
            handlers = list(self._handlers.get(event, [])) + list(self._handlers.get(WILDCARD, []))

        result = {"event": event, "notified": 0, "failed": 0, "failures": []}

        for handler in handlers:
            handler_name = getattr(handler, "__qualname__", str(handler))
            try:
                handler(event, payload)
                result["notified"] += 1
            except Exception as exc:
                result["failed"] += 1
                result["failures"].append({
                    "handler": handler_name,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                })
                logger.error(
                    f"Subscriber failed: {handler_name} for {event}: {exc}",
                    exc_info=True,
                )

        logger.debug(
            f"Dispatch complete: {event} - {result['notified']} notified, {result['failed']} failed"
        )
        return result


class RecordingEventBus(EventBus):
    """Event bus that also keeps every emitted event, in order"""

    def __init__(self):
        super().__init__()
        self.events: List[tuple] = []

    def emit(self, event: str, payload: Dict[str, Any]) -> dict:
        self.events.append((event, payload))
        return super().emit(event, payload)

    def names(self) -> List[str]:
        return [name for name, _ in self.events]
