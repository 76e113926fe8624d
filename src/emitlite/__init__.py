"""Emitlite: Lightweight in-process event emitter with priorities, one-shot and async listeners."""

__version__ = "0.1.0"

from . import settings
from .emitter import EventEmitter
from .exceptions import DuplicateListenerError
from .exceptions import DuplicateTaskIdError
from .exceptions import EmitliteError
from .exceptions import InvalidArgumentError
from .exceptions import InvalidEventTypeError
from .exceptions import InvalidListenerError
from .exceptions import ListenerError
from .plugins.manager import _initialize_plugin_system
from .subscriptions import ListenerInfo

# Initialize hooks system on module import
_initialize_plugin_system()

__all__ = [
    "DuplicateListenerError",
    "DuplicateTaskIdError",
    "EmitliteError",
    "EventEmitter",
    "InvalidArgumentError",
    "InvalidEventTypeError",
    "InvalidListenerError",
    "ListenerError",
    "ListenerInfo",
    "settings",
]
