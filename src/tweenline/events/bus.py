"""
Synchronous publish/subscribe bus.

Handlers run on the caller's stack in subscription order. The handler list
for an event is copied before dispatch, so a handler may subscribe or
unsubscribe (itself included) while the event is being delivered.
"""
from __future__ import annotations

import enum
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class Veto(enum.Enum):
    PROCEED = "proceed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Subscription:
    id: str
    event: str
    handler: Handler
    once: bool = False


@dataclass
class CancellableEvent:
    """Payload wrapper handed to subscribers of a cancellable event."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscription]] = {}
        self._counter = itertools.count(1)

    def on(self, event: str, handler: Handler, once: bool = False) -> Subscription:
        sub = Subscription(id=f"sub_{next(self._counter)}", event=event, handler=handler, once=once)
        self._subscribers.setdefault(event, []).append(sub)
        return sub

    def once(self, event: str, handler: Handler) -> Subscription:
        return self.on(event, handler, once=True)

    def off(self, subscription: Subscription) -> None:
        subs = self._subscribers.get(subscription.event)
        if not subs:
            return
        self._subscribers[subscription.event] = [s for s in subs if s.id != subscription.id]
        if not self._subscribers[subscription.event]:
            del self._subscribers[subscription.event]

    def off_all(self, event: str) -> None:
        self._subscribers.pop(event, None)

    def emit(self, event: str, payload: Any = None) -> None:
        subs = list(self._subscribers.get(event, ()))
        if not subs:
            return

        for sub in subs:
            if sub.once:
                self.off(sub)
            try:
                sub.handler(payload)
            except Exception:
                logger.exception("Error in event handler for '%s'", event)

    def emit_cancellable(self, event: str, payload: dict[str, Any] | None = None) -> Veto:
        """Dispatch a vetoable event; any subscriber may call prevent_default()."""
        wrapped = CancellableEvent(name=event, payload=dict(payload or {}))
        self.emit(event, wrapped)
        if wrapped.default_prevented:
            logger.warning("'%s' cancelled by listener", event)
            return Veto.CANCELLED
        return Veto.PROCEED

    def subscriber_count(self, event: str) -> int:
        return len(self._subscribers.get(event, ()))

    def event_names(self) -> list[str]:
        return list(self._subscribers)

    def clear(self) -> None:
        self._subscribers.clear()

    def debug_info(self) -> dict[str, Any]:
        events = {name: len(subs) for name, subs in self._subscribers.items()}
        return {
            "totalEvents": len(events),
            "totalSubscriptions": sum(events.values()),
            "events": events,
        }
