from __future__ import annotations

from . import names
from .bus import CancellableEvent, EventBus, Subscription, Veto

__all__ = [
    "CancellableEvent",
    "EventBus",
    "Subscription",
    "Veto",
    "names",
]
