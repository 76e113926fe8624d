"""Plugin that tallies listener invocations per event type."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Hashable

from emitlite.exceptions import ListenerError
from emitlite.plugins.hooks.markers import hook_impl


class ListenerStatsPlugin:
    """
    Counts listener calls, successes and failures for each event type.

    Examples:
        >>> from emitlite import EventEmitter
        >>> stats = ListenerStatsPlugin()
        >>> emitter = EventEmitter(plugins=[stats])
        >>> _ = emitter.subscribe("ping", lambda payload: None)
        >>> emitter.emit("ping", 1)
        >>> stats.calls["ping"], stats.successes["ping"], stats.failures["ping"]
        (1, 1, 0)
    """

    def __init__(self) -> None:
        self.calls: Counter[Hashable] = Counter()
        self.successes: Counter[Hashable] = Counter()
        self.failures: Counter[Hashable] = Counter()
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Clear all counters."""
        with self._lock:
            self.calls.clear()
            self.successes.clear()
            self.failures.clear()

    @hook_impl
    def before_listener_call(
        self, event_type: Hashable, task_id: str, payload: Any, is_async: bool
    ) -> None:
        with self._lock:
            self.calls[event_type] += 1

    @hook_impl
    def after_listener_call(
        self, event_type: Hashable, task_id: str, payload: Any, is_async: bool
    ) -> None:
        with self._lock:
            self.successes[event_type] += 1

    @hook_impl
    def on_listener_error(
        self, event_type: Hashable, task_id: str, error: ListenerError, is_async: bool
    ) -> None:
        with self._lock:
            self.failures[event_type] += 1
