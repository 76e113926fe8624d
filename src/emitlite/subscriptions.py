"""Subscription records and task id generation for the event emitter."""

from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from typing_extensions import TypeAlias

Listener: TypeAlias = Callable[[Any], Any]
"""A listener receives the emitted payload; async listeners return an awaitable."""


@dataclass(eq=False)
class Subscription:
    """
    One registered interest in an event type.

    Owned by the emitter that created it. `fire_count` is the only field mutated after creation
    and is incremented once per successful invocation.
    """

    callback: Listener
    task_id: str
    once: bool = False
    priority: int = 0
    fire_count: int = 0

    def to_info(self) -> ListenerInfo:
        """Returns an immutable snapshot of this subscription."""
        return ListenerInfo(
            callback=self.callback,
            priority=self.priority,
            task_id=self.task_id,
            once=self.once,
            fire_count=self.fire_count,
        )


@dataclass(frozen=True)
class ListenerInfo:
    """Read-only view of a subscription, as returned by `EventEmitter.get_listeners`."""

    callback: Listener
    priority: int
    task_id: str
    once: bool
    fire_count: int


class TaskIdGenerator:
    """
    Thread-safe generator of task ids of the form ``<prefix>_<n>_<epoch ms>``.

    Each emitter owns its own generator so that counters are never shared between instances.

    Examples:
        >>> generate = TaskIdGenerator(prefix="event")
        >>> generate()  # doctest: +ELLIPSIS
        'event_1_...'
        >>> generate()  # doctest: +ELLIPSIS
        'event_2_...'
    """

    def __init__(self, prefix: str = "event") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{self._prefix}_{n}_{int(time.time() * 1000)}"


def sort_by_priority(subscriptions: list[Subscription]) -> list[Subscription]:
    """
    Sort subscriptions by descending priority.

    The sort is stable, so subscriptions sharing a priority keep their registration order.
    """
    return sorted(subscriptions, key=lambda s: s.priority, reverse=True)
