from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_EMITLITE_SETTINGS: EmitliteSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class EmitliteSettings:
    """Configuration settings for emitlite."""

    task_id_prefix: str = "event"
    """Prefix used by the default task id generator (`<prefix>_<n>_<epoch ms>`)."""

    log_tracebacks: bool = True
    """
    Whether listener failures are logged with their traceback attached.

    When False only the one-line diagnostic (event type and error message) is logged.
    """


def get_global_settings() -> EmitliteSettings:
    """
    Get the global emitlite settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_EMITLITE_SETTINGS
        if _GLOBAL_EMITLITE_SETTINGS is None:
            _GLOBAL_EMITLITE_SETTINGS = EmitliteSettings()
        return _GLOBAL_EMITLITE_SETTINGS


def set_global_settings(settings: EmitliteSettings) -> None:
    """
    Set the global emitlite settings instance (thread-safe).

    Note: Settings are read when an `EventEmitter` is constructed. Emitters created before the
    change keep the settings they were built with.

    Args:
        settings (EmitliteSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_EMITLITE_SETTINGS
        _GLOBAL_EMITLITE_SETTINGS = settings
