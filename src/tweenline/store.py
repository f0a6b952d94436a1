from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .events import EventBus, Subscription, names
from .schema import Keyframe


@dataclass(frozen=True)
class PropertySpec:
    default: Any = None
    validator: Optional[Callable[[Any], bool]] = None
    notify: bool = True


class StateStore:
    """Process-scoped key/value store for ephemeral cross-component state."""

    def __init__(self, events: EventBus):
        self._events = events
        self._state: dict[str, Any] = {}
        self._specs: dict[str, PropertySpec] = {}

    def register(
        self,
        key: str,
        default: Any = None,
        validator: Optional[Callable[[Any], bool]] = None,
        notify: bool = True,
    ) -> None:
        self._specs[key] = PropertySpec(default=default, validator=validator, notify=notify)
        if default is not None and key not in self._state:
            self._state[key] = default

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._state:
            return self._state[key]
        spec = self._specs.get(key)
        if spec is not None and spec.default is not None:
            return spec.default
        return default

    def has(self, key: str) -> bool:
        return key in self._state

    def set(self, key: str, value: Any) -> None:
        self._check(key, value)
        if key in self._state and self._state[key] == value:
            return
        old = self._state.get(key)
        self._state[key] = value
        self._notify(key, old, value)

    def update(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            self._check(key, value)

        changes = []
        for key, value in values.items():
            old = self._state.get(key)
            if key in self._state and old == value:
                continue
            self._state[key] = value
            change = self._notify(key, old, value)
            if change is not None:
                changes.append(change)

        if changes:
            self._events.emit(names.STATE_BATCH_CHANGE, changes)

    def delete(self, key: str) -> None:
        if key not in self._state:
            return
        old = self._state.pop(key)
        self._notify(key, old, None)

    def clear(self) -> None:
        for key in list(self._state):
            self.delete(key)

    def all(self) -> dict[str, Any]:
        return dict(self._state)

    def watch(self, key: str, handler: Callable[[dict[str, Any]], None]) -> Subscription:
        return self._events.on(names.state_change_for(key), handler)

    def watch_all(self, handler: Callable[[dict[str, Any]], None]) -> Subscription:
        return self._events.on(names.STATE_CHANGE, handler)

    def _check(self, key: str, value: Any) -> None:
        spec = self._specs.get(key)
        if spec is not None and spec.validator is not None and not spec.validator(value):
            raise ValueError(f"Invalid value for state property '{key}': {value!r}")

    def _notify(self, key: str, old: Any, new: Any) -> Optional[dict[str, Any]]:
        spec = self._specs.get(key)
        if spec is not None and not spec.notify:
            return None
        change = {
            "key": key,
            "oldValue": old,
            "newValue": new,
            "timestamp": time.time(),
        }
        self._events.emit(names.STATE_CHANGE, change)
        self._events.emit(names.state_change_for(key), change)
        return change


@dataclass(frozen=True)
class ClipboardEntry:
    layer_id: str
    frame: int
    keyframe: Keyframe


class Clipboard:
    """Single typed slot holding the keyframes pending paste."""

    KEY = "clipboard_keyframes"

    def __init__(self, store: StateStore):
        self._store = store
        self._store.register(self.KEY, validator=_is_entry_tuple)

    def put(self, entries: Iterable[ClipboardEntry]) -> None:
        # keyframes are copied at put time
        snapshot = tuple(
            ClipboardEntry(e.layer_id, e.frame, e.keyframe.model_copy()) for e in entries
        )
        self._store.set(self.KEY, snapshot)

    def entries(self) -> tuple[ClipboardEntry, ...]:
        return self._store.get(self.KEY, ())

    def is_empty(self) -> bool:
        return not self.entries()

    def clear(self) -> None:
        self._store.delete(self.KEY)

    def __len__(self) -> int:
        return len(self.entries())


def _is_entry_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, ClipboardEntry) for v in value)
