"""Hook specifications for emitter subscription and dispatch lifecycle events."""

from typing import Any, Hashable

from emitlite.exceptions import ListenerError
from emitlite.plugins.hooks.markers import hook_spec


class ListenerSpec:
    """Hook specifications for listener registration and invocation."""

    @hook_spec
    def on_subscribe(self, event_type: Hashable, task_id: str, priority: int, once: bool) -> None:
        """
        Called after a listener has been registered.

        Args:
            event_type: Event type the listener was registered for.
            task_id: Id assigned to the new subscription.
            priority: Dispatch priority of the subscription.
            once: Whether the subscription is removed after its first successful call.
        """

    @hook_spec
    def on_unsubscribe(self, event_type: Hashable, task_id: str) -> None:
        """
        Called after a single subscription has been removed.

        Not called for bulk removal via `remove_all`.

        Args:
            event_type: Event type the subscription belonged to.
            task_id: Id of the removed subscription.
        """

    @hook_spec
    def before_listener_call(
        self, event_type: Hashable, task_id: str, payload: Any, is_async: bool
    ) -> None:
        """
        Called before a listener is invoked.

        Args:
            event_type: Event type being dispatched.
            task_id: Id of the subscription about to run.
            payload: Payload passed to the listener.
            is_async: True when dispatched through `emit_async`.
        """

    @hook_spec
    def after_listener_call(
        self, event_type: Hashable, task_id: str, payload: Any, is_async: bool
    ) -> None:
        """
        Called after a listener completes successfully.

        Args:
            event_type: Event type being dispatched.
            task_id: Id of the subscription that ran.
            payload: Payload passed to the listener.
            is_async: True when dispatched through `emit_async`.
        """

    @hook_spec
    def on_listener_error(
        self, event_type: Hashable, task_id: str, error: ListenerError, is_async: bool
    ) -> None:
        """
        Called when a listener raises (or its awaitable fails) during dispatch.

        Args:
            event_type: Event type being dispatched.
            task_id: Id of the failed subscription.
            error: Wrapped failure; the original exception is `error.__cause__`.
            is_async: True when dispatched through `emit_async`.
        """
