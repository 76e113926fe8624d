"""
In-process event emitter with priority ordering, one-shot listeners and failure isolation.

Example:
    >>> from emitlite import EventEmitter
    >>> emitter = EventEmitter()
    >>> received = []
    >>> task_id = emitter.subscribe("greet", received.append, priority=1)
    >>> emitter.emit("greet", "hello")
    >>> received
    ['hello']
    >>> emitter.unsubscribe_by_id("greet", task_id)
    >>> emitter.event_names()
    []
"""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Hashable, Iterator

from pluggy import PluginManager

from emitlite.exceptions import DuplicateListenerError
from emitlite.exceptions import DuplicateTaskIdError
from emitlite.exceptions import InvalidEventTypeError
from emitlite.exceptions import InvalidListenerError
from emitlite.exceptions import ListenerError
from emitlite.plugins.manager import create_hook_manager_with_plugins
from emitlite.settings import get_global_settings
from emitlite.subscriptions import Listener
from emitlite.subscriptions import ListenerInfo
from emitlite.subscriptions import Subscription
from emitlite.subscriptions import TaskIdGenerator
from emitlite.subscriptions import sort_by_priority

logger = logging.getLogger(__name__)

SYNC_ERROR_MESSAGE = "Error in event listener for '{event_type}': {error}"
ASYNC_ERROR_MESSAGE = "Error in async event listener for '{event_type}': {error}"
HOOK_ERROR_MESSAGE = "Error in plugin hook '{hook}' for '{event_type}': {error}"


class EventEmitter:
    """
    Registry mapping event types to prioritized listener subscriptions.

    Listeners run in descending priority order; listeners sharing a priority run in the order
    they were registered. A listener that raises is logged (and reported to the
    `on_listener_error` hook) without affecting the remaining listeners or the caller.

    All registry mutations are serialized behind a re-entrant lock. Listeners themselves always
    run outside the lock, so they may freely subscribe, unsubscribe or emit on the same emitter;
    such changes never affect a dispatch already in progress.

    Args:
        plugins: Additional pluggy hook implementations for this emitter, combined with the
            globally registered plugins.
        id_factory: Callable producing task ids. Defaults to a `TaskIdGenerator` owned by this
            emitter using the configured `task_id_prefix`.
    """

    def __init__(
        self,
        plugins: list[Any] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        settings = get_global_settings()
        self._log_tracebacks = settings.log_tracebacks
        self._id_factory = id_factory or TaskIdGenerator(prefix=settings.task_id_prefix)
        self._hooks: PluginManager = create_hook_manager_with_plugins(plugins or [])
        self._listeners: dict[Hashable, dict[Listener, Subscription]] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} events={len(self._listeners)} listeners={len(self)}>"

    def __len__(self) -> int:
        with self._lock:
            return sum(len(subscriptions) for subscriptions in self._listeners.values())

    def __contains__(self, event_type: object) -> bool:
        with self._lock:
            return event_type in self._listeners

    # region Registration

    def subscribe(
        self, event_type: Hashable, callback: Listener, once: bool = False, priority: int = 0
    ) -> str:
        """
        Register a listener for an event type.

        Args:
            event_type: Event type key; must be truthy.
            callback: Callable invoked with the payload of each emitted event.
            once: Remove the listener after its first successful invocation.
            priority: Higher priorities run earlier.

        Returns:
            The task id of the new subscription, usable with `unsubscribe_by_id`.

        Raises:
            InvalidEventTypeError: If `event_type` is empty.
            InvalidListenerError: If `callback` is not callable.
            DuplicateListenerError: If `callback` is already registered for `event_type`.
        """
        if not event_type:
            raise InvalidEventTypeError("Event type must not be empty")
        if not callable(callback):
            raise InvalidListenerError(f"Listener must be callable, got {type(callback).__name__}")

        with self._lock:
            subscriptions = self._listeners.get(event_type, {})
            if callback in subscriptions:
                raise DuplicateListenerError(event_type, callback)
            task_id = self._id_factory()
            if any(s.task_id == task_id for s in subscriptions.values()):
                raise DuplicateTaskIdError(event_type, task_id)
            subscription = Subscription(callback, task_id, once=once, priority=priority)
            self._listeners.setdefault(event_type, subscriptions)[callback] = subscription

        logger.debug(f"Subscribed {task_id} to '{event_type}' (priority={priority}, once={once})")
        self._call_hook(
            "on_subscribe", event_type=event_type, task_id=task_id, priority=priority, once=once
        )
        return task_id

    def subscribe_once(self, event_type: Hashable, callback: Listener, priority: int = 0) -> str:
        """Register a listener that is removed after its first successful invocation."""
        return self.subscribe(event_type, callback, once=True, priority=priority)

    on = subscribe
    once = subscribe_once

    def listener(
        self, event_type: Hashable, *, once: bool = False, priority: int = 0
    ) -> Callable[[Listener], Listener]:
        """
        Decorator form of `subscribe`; the decorated function is returned unchanged.

        Examples:
            >>> emitter = EventEmitter()
            >>> @emitter.listener("saved", priority=5)
            ... def on_saved(payload):
            ...     print(f"saved {payload}")
            >>> emitter.emit("saved", 42)
            saved 42
        """

        def decorator(func: Listener) -> Listener:
            self.subscribe(event_type, func, once=once, priority=priority)
            return func

        return decorator

    # region Removal

    def unsubscribe(self, event_type: Hashable, callback: Listener) -> None:
        """Remove the listener registered for `event_type`, if any."""
        with self._lock:
            subscriptions = self._listeners.get(event_type)
            if not subscriptions:
                return
            removed = subscriptions.pop(callback, None)
            self._discard_if_empty(event_type)

        if removed is not None:
            self._notify_unsubscribed(event_type, removed)

    off = unsubscribe

    def unsubscribe_by_id(self, event_type: Hashable, task_id: str) -> None:
        """Remove the subscription with the given task id, if any."""
        with self._lock:
            subscriptions = self._listeners.get(event_type)
            if not subscriptions:
                return
            removed = None
            for callback, subscription in subscriptions.items():
                if subscription.task_id == task_id:
                    removed = subscriptions.pop(callback)
                    break
            self._discard_if_empty(event_type)

        if removed is not None:
            self._notify_unsubscribed(event_type, removed)

    def remove_all(self, event_type: Hashable | None = None) -> None:
        """
        Remove listeners in bulk.

        Args:
            event_type: Event type to clear. If omitted, every event type is cleared.
        """
        with self._lock:
            if event_type is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event_type, None)
        target = "all events" if event_type is None else repr(event_type)
        logger.debug(f"Removed all listeners for {target}")

    # region Dispatch

    def emit(self, event_type: Hashable, payload: Any = None) -> None:
        """
        Invoke every listener of `event_type` with `payload`, synchronously.

        Emitting an event type without listeners does nothing. Listener failures are logged
        and never propagate to the caller.

        Args:
            event_type: Event type to dispatch.
            payload: Value passed to each listener.
        """
        snapshot = self._snapshot(event_type)
        if not snapshot:
            return

        fired: list[Subscription] = []
        try:
            for subscription in snapshot:
                if self._call_sync(event_type, subscription, payload) and subscription.once:
                    fired.append(subscription)
        finally:
            self._remove_fired(event_type, fired)

    async def emit_async(self, event_type: Hashable, payload: Any = None) -> None:
        """
        Invoke every listener of `event_type` with `payload`, awaiting each in turn.

        Listeners run strictly one after another in priority order; a listener is not started
        until the previous one (including any awaitable it returned) has settled.

        Args:
            event_type: Event type to dispatch.
            payload: Value passed to each listener.
        """
        snapshot = self._snapshot(event_type)
        if not snapshot:
            return

        fired: list[Subscription] = []
        try:
            for subscription in snapshot:
                if await self._call_async(event_type, subscription, payload) and subscription.once:
                    fired.append(subscription)
        finally:
            self._remove_fired(event_type, fired)

    # region Introspection

    def listener_count(self, event_type: Hashable) -> int:
        """Number of listeners registered for `event_type`."""
        with self._lock:
            return len(self._listeners.get(event_type, ()))

    def has_listeners(self, event_type: Hashable) -> bool:
        """Whether any listener is registered for `event_type`."""
        return self.listener_count(event_type) > 0

    def event_names(self) -> list[Hashable]:
        """Event types that currently have at least one listener."""
        with self._lock:
            return list(self._listeners)

    def get_listeners(self, event_type: Hashable) -> list[ListenerInfo]:
        """Listeners of `event_type` in dispatch order."""
        return [subscription.to_info() for subscription in self._snapshot(event_type)]

    def __iter__(self) -> Iterator[Hashable]:
        """Iterate over the event types that currently have listeners (see `event_names`)."""
        return iter(self.event_names())

    # region Helpers

    def _snapshot(self, event_type: Hashable) -> list[Subscription]:
        with self._lock:
            subscriptions = self._listeners.get(event_type)
            if not subscriptions:
                return []
            return sort_by_priority(list(subscriptions.values()))

    def _call_sync(self, event_type: Hashable, subscription: Subscription, payload: Any) -> bool:
        self._call_hook(
            "before_listener_call",
            event_type=event_type,
            task_id=subscription.task_id,
            payload=payload,
            is_async=False,
        )
        error = _invoke(subscription.callback, payload)
        return self._settle(event_type, subscription, payload, error, is_async=False)

    async def _call_async(
        self, event_type: Hashable, subscription: Subscription, payload: Any
    ) -> bool:
        self._call_hook(
            "before_listener_call",
            event_type=event_type,
            task_id=subscription.task_id,
            payload=payload,
            is_async=True,
        )
        error = await _invoke_async(subscription.callback, payload)
        return self._settle(event_type, subscription, payload, error, is_async=True)

    def _settle(
        self,
        event_type: Hashable,
        subscription: Subscription,
        payload: Any,
        error: Exception | None,
        is_async: bool,
    ) -> bool:
        """Record the outcome of one listener call; returns True if it succeeded."""
        if error is None:
            with self._lock:
                subscription.fire_count += 1
            self._call_hook(
                "after_listener_call",
                event_type=event_type,
                task_id=subscription.task_id,
                payload=payload,
                is_async=is_async,
            )
            return True

        failure = ListenerError(event_type, subscription.task_id, error, is_async)
        message = ASYNC_ERROR_MESSAGE if is_async else SYNC_ERROR_MESSAGE
        logger.error(
            message.format(event_type=event_type, error=error),
            exc_info=error if self._log_tracebacks else None,
        )
        self._call_hook(
            "on_listener_error",
            event_type=event_type,
            task_id=subscription.task_id,
            error=failure,
            is_async=is_async,
        )
        return False

    def _call_hook(self, name: str, event_type: Hashable, **kwargs: Any) -> None:
        """Call a plugin hook; a raising plugin is logged and never interrupts the emitter."""
        try:
            getattr(self._hooks.hook, name)(event_type=event_type, **kwargs)
        except Exception as e:
            logger.error(
                HOOK_ERROR_MESSAGE.format(hook=name, event_type=event_type, error=e),
                exc_info=e if self._log_tracebacks else None,
            )

    def _remove_fired(self, event_type: Hashable, fired: list[Subscription]) -> None:
        if not fired:
            return

        removed: list[Subscription] = []
        with self._lock:
            subscriptions = self._listeners.get(event_type)
            if subscriptions is None:
                return
            for subscription in fired:
                # A listener re-registered during dispatch owns a new subscription; keep it.
                if subscriptions.get(subscription.callback) is subscription:
                    del subscriptions[subscription.callback]
                    removed.append(subscription)
            self._discard_if_empty(event_type)

        for subscription in removed:
            self._notify_unsubscribed(event_type, subscription)

    def _discard_if_empty(self, event_type: Hashable) -> None:
        if event_type in self._listeners and not self._listeners[event_type]:
            del self._listeners[event_type]

    def _notify_unsubscribed(self, event_type: Hashable, subscription: Subscription) -> None:
        logger.debug(f"Unsubscribed {subscription.task_id} from '{event_type}'")
        self._call_hook("on_unsubscribe", event_type=event_type, task_id=subscription.task_id)


def _invoke(callback: Listener, payload: Any) -> Exception | None:
    """Call a listener synchronously, capturing any failure as a value."""
    try:
        result = callback(payload)
    except Exception as e:
        return e

    if inspect.isawaitable(result):
        _close_awaitable(result)
        return TypeError(
            f"Listener {callback!r} returned an awaitable during synchronous emit; "
            "use emit_async() to dispatch to async listeners"
        )
    return None


async def _invoke_async(callback: Listener, payload: Any) -> Exception | None:
    """Call a listener and await its result when awaitable, capturing any failure as a value."""
    try:
        result = callback(payload)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        return e
    return None


def _close_awaitable(awaitable: Awaitable[Any]) -> None:
    close = getattr(awaitable, "close", None)
    if close is not None:
        close()
