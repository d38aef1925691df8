import uuid
from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Callable, Tuple

from .domain import Event


@dataclass(frozen=True)
class EventBus:
    """
    Иммутабельная шина событий сессии покупателя.
    Подписчики - чистые функции: (Event, State) -> State
    """

    subscribers: Tuple[Tuple[str, Callable], ...] = ()

    def subscribe(
        self, event_name: str, handler: Callable[[Event, dict], dict]
    ) -> "EventBus":
        return EventBus(subscribers=self.subscribers + ((event_name, handler),))

    def publish(self, event: Event, state: dict) -> dict:
        matching_handlers = tuple(
            handler for name, handler in self.subscribers if name == event.name
        )
        return reduce(lambda s, handler: handler(event, s), matching_handlers, state)


def create_event(name: str, payload: dict) -> Event:
    return Event(
        id=str(uuid.uuid4()),
        ts=datetime.now().isoformat(),
        name=name,
        payload=payload,
    )


# ============ Обработчики ============


def handle_item_added(event: Event, state: dict) -> dict:
    """ITEM_ADDED: считаем добавленные строки"""
    return {
        **state,
        "lines_added": state.get("lines_added", 0) + 1,
        "last_event": event.name,
    }


def handle_checkout_completed(event: Event, state: dict) -> dict:
    total = event.payload.get("total", 0)
    completed = state.get("completed", [])
    new_sale = {
        "total": total,
        "remaining": event.payload.get("remaining"),
        "ts": event.ts,
    }
    return {
        **state,
        "completed": completed + [new_sale],
        "revenue": state.get("revenue", 0) + total,
        "last_event": event.name,
    }


def handle_checkout_failed(event: Event, state: dict) -> dict:
    failures = state.get("failures", [])
    failure = {
        "error": event.payload.get("error"),
        "message": event.payload.get("message"),
        "ts": event.ts,
    }
    return {**state, "failures": failures + [failure], "last_event": event.name}


def create_shop_event_bus() -> EventBus:
    bus = EventBus()
    bus = bus.subscribe("ITEM_ADDED", handle_item_added)
    bus = bus.subscribe("CHECKOUT_COMPLETED", handle_checkout_completed)
    bus = bus.subscribe("CHECKOUT_FAILED", handle_checkout_failed)
    return bus


def initial_state() -> dict:
    return {
        "lines_added": 0,
        "completed": [],
        "failures": [],
        "revenue": 0,
        "last_event": None,
    }


def apply_events(bus: EventBus, events: Tuple[Event, ...], state: dict) -> dict:
    """(events, initial_state) -> final_state"""
    return reduce(lambda s, e: bus.publish(e, s), events, state)
