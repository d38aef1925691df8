import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from retail.frp import (
    EventBus,
    create_event,
    create_shop_event_bus,
    initial_state,
    apply_events,
)


def test_eventbus_immutability():
    bus1 = EventBus()
    bus2 = bus1.subscribe("TEST", lambda e, s: s)

    assert bus1.subscribers == ()
    assert len(bus2.subscribers) == 1


def test_unknown_event_keeps_state():
    bus = create_shop_event_bus()
    state = initial_state()
    assert bus.publish(create_event("NOPE", {}), state) == state


def test_checkout_failed_event():
    bus = create_shop_event_bus()
    event = create_event(
        "CHECKOUT_FAILED", {"error": "EmptyCartError", "message": "Cart is empty"}
    )

    new_state = bus.publish(event, initial_state())

    assert new_state["failures"][0]["error"] == "EmptyCartError"
    assert new_state["revenue"] == 0
    assert new_state["last_event"] == "CHECKOUT_FAILED"


def test_event_sequence():
    bus = create_shop_event_bus()
    state = initial_state()
    events = (
        create_event("ITEM_ADDED", {"item_id": "cheese", "qty": 2}),
        create_event("ITEM_ADDED", {"item_id": "biscuits", "qty": 1}),
        create_event("CHECKOUT_COMPLETED", {"total": 410, "remaining": 1590}),
    )

    final_state = apply_events(bus, events, state)

    assert final_state["lines_added"] == 2
    assert final_state["revenue"] == 410
    assert final_state["completed"][0]["remaining"] == 1590
    assert state == initial_state()
