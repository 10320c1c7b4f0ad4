from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from expense_rollup.logging_setup import get_logger

__all__ = ['event_bus', 'BATCH_LOADED', 'SELECTION_CHANGED', 'Event', 'EventBus', 'Handler', 'summarize_selection']

logger = get_logger(__name__)

BATCH_LOADED = "BATCH_LOADED"
SELECTION_CHANGED = "SELECTION_CHANGED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    """Synchronous publish/subscribe; handlers run in subscription order."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers(self, name: str) -> tuple[Handler, ...]:
        return tuple(self._subscribers.get(name, ()))

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self.handlers(name)
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("Publishing %s to %d handlers", name, len(handlers))
        return [handler(event, payload) for handler in handlers]


def summarize_selection(event: Event, payload: dict) -> dict:
    """Pure handler: a flat description of the selection carried by an event."""
    state = payload.get("state")
    if state is None:
        return {"event": event.name}
    return {
        "event": event.name,
        "field": payload.get("field"),
        "time_range": state.time_range,
        "years": state.years,
        "groups": len(state.groups),
        "categories": len(state.categories),
    }


event_bus = EventBus()
