"""
Centralized exception classes for the emitlite library.

All emitlite-specific exceptions inherit from EmitliteError for easy catching.
"""

from __future__ import annotations

from typing import Any, Hashable, cast


class EmitliteError(Exception):
    """Base exception for all emitlite errors."""


class InvalidArgumentError(EmitliteError, ValueError):
    """Raised when a registration call receives an unusable argument."""


class InvalidEventTypeError(InvalidArgumentError):
    """Raised when an event type key is empty or missing."""


class InvalidListenerError(InvalidArgumentError, TypeError):
    """Raised when a listener is not callable."""


class DuplicateListenerError(EmitliteError):
    """Raised when the same listener is registered twice for one event type."""

    def __init__(self, event_type: Hashable, listener: Any) -> None:
        self.event_type = event_type
        self.listener = listener
        super().__init__(f"Listener {listener!r} is already registered for event '{event_type}'")


class DuplicateTaskIdError(DuplicateListenerError):
    """Raised when an id factory returns a task id already in use for one event type."""

    def __init__(self, event_type: Hashable, task_id: str) -> None:
        self.event_type = event_type
        self.listener = None
        self.task_id = task_id
        EmitliteError.__init__(
            self, f"Task id '{task_id}' is already in use for event '{event_type}'"
        )


class ListenerError(EmitliteError):
    """
    Failure raised by a listener during dispatch.

    Never raised out of `emit` or `emit_async`; instances are handed to the logging sink and to
    the `on_listener_error` hook. The original exception is available as `__cause__`.
    """

    def __init__(
        self, event_type: Hashable, task_id: str, error: BaseException, is_async: bool
    ) -> None:
        self.event_type = event_type
        self.task_id = task_id
        self.is_async = is_async
        self.__cause__ = error
        super().__init__(str(error))

    @property
    def error(self) -> BaseException:
        """The exception raised by the listener."""
        return cast(BaseException, self.__cause__)
