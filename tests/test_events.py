from datetime import datetime

from expense_rollup.events import (
    BATCH_LOADED, SELECTION_CHANGED, Event, EventBus, summarize_selection,
)
from expense_rollup.selection import SelectionState


def test_event_creation():
    event = Event(
        name=SELECTION_CHANGED,
        ts=datetime.now().isoformat(),
        payload={"field": "years"},
    )
    assert event.name == SELECTION_CHANGED
    assert event.payload["field"] == "years"


def test_subscribe_and_publish():
    bus = EventBus()
    seen = []

    def handler(event: Event, payload: dict) -> dict:
        seen.append(payload)
        return {"processed": True}

    bus.subscribe(SELECTION_CHANGED, handler)
    results = bus.publish(SELECTION_CHANGED, {"field": "groups"})

    assert results == [{"processed": True}]
    assert seen == [{"field": "groups"}]


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    bus.subscribe(BATCH_LOADED, lambda e, p: {"handler": 1})
    bus.subscribe(BATCH_LOADED, lambda e, p: {"handler": 2})
    assert bus.publish(BATCH_LOADED, {}) == [{"handler": 1}, {"handler": 2}]
    assert len(bus.handlers(BATCH_LOADED)) == 2


def test_publish_without_subscribers():
    bus = EventBus()
    assert bus.publish(SELECTION_CHANGED, {"field": "years"}) == []
    assert bus.handlers(SELECTION_CHANGED) == ()


def test_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event: Event, payload: dict) -> dict:
        calls.append(payload)
        return {}

    bus.subscribe(SELECTION_CHANGED, handler)
    bus.publish(SELECTION_CHANGED, {})
    bus.unsubscribe(SELECTION_CHANGED, handler)
    bus.unsubscribe(SELECTION_CHANGED, handler)
    bus.unsubscribe(BATCH_LOADED, handler)
    bus.publish(SELECTION_CHANGED, {})
    assert len(calls) == 1


def test_handler_subscribed_during_publish_waits_for_next_event():
    bus = EventBus()
    late = []

    def first(event: Event, payload: dict) -> dict:
        bus.subscribe(SELECTION_CHANGED, lambda e, p: late.append(p) or {})
        return {}

    bus.subscribe(SELECTION_CHANGED, first)
    bus.publish(SELECTION_CHANGED, {"n": 1})
    assert late == []
    bus.publish(SELECTION_CHANGED, {"n": 2})
    assert late == [{"n": 2}]


def test_summarize_selection_is_pure():
    state = SelectionState(categories=("Dining",), years=("2024", "2025"), groups=("Fun",), time_range="ytd")
    event = Event(SELECTION_CHANGED, datetime.now().isoformat(), {})
    payload = {"field": "groups", "state": state}

    first = summarize_selection(event, payload)
    second = summarize_selection(event, payload)

    assert first == second
    assert first == {
        "event": SELECTION_CHANGED,
        "field": "groups",
        "time_range": "ytd",
        "years": ("2024", "2025"),
        "groups": 1,
        "categories": 1,
    }
    assert summarize_selection(event, {}) == {"event": SELECTION_CHANGED}
