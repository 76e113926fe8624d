"""Utility functions to manage the project-wide hook configuration."""

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from .hooks.markers import HOOK_NAMESPACE
from .hooks.specs import ListenerSpec

logger = logging.getLogger(__name__)

_PLUGIN_ENTRY_POINT = "emitlite.plugins"  # entry-point to load hooks from for installed plugins
_PLUGIN_MANAGER: PluginManager | None = None


# region API


def register_plugins(*plugins: Any) -> None:
    """Register emitlite plugins with the global plugin manager."""
    plugin_manager = _get_global_plugin_manager()
    for plugin in plugins:
        if not plugin_manager.is_registered(plugin):
            _check_is_instance(plugin)
            plugin_manager.register(plugin)


def unregister_plugins(*plugins: Any) -> None:
    """Unregister previously registered plugins from the global plugin manager."""
    plugin_manager = _get_global_plugin_manager()
    for plugin in plugins:
        if plugin_manager.is_registered(plugin):
            plugin_manager.unregister(plugin)


def register_plugins_entry_points(_plugin_manager: PluginManager | None = None) -> int:
    """Register emitlite plugins from Python package entrypoints."""
    _plugin_manager = _plugin_manager if _plugin_manager else _get_global_plugin_manager()
    # Doesn't use setuptools
    return _plugin_manager.load_setuptools_entrypoints(_PLUGIN_ENTRY_POINT)


def create_hook_manager_with_plugins(plugins: list[Any]) -> PluginManager:
    """
    Create a new hook manager with both global and emitter-specific plugins.

    Used by `EventEmitter` to support per-emitter plugins without touching the global manager.

    Args:
        plugins: Additional hook implementations to register.

    Returns:
        A new PluginManager with global + emitter-specific hooks.
    """
    manager = _create_plugin_manager()

    global_manager = _get_global_plugin_manager()
    for plugin in global_manager.get_plugins():
        if not manager.is_registered(plugin):  # pragma: no branch
            manager.register(plugin)

    for plugin in plugins:
        if not manager.is_registered(plugin):
            _check_is_instance(plugin)
            manager.register(plugin)

    return manager


# region Helpers


def _initialize_plugin_system() -> PluginManager:
    """Initializes hooks for the emitlite library."""
    manager = _create_plugin_manager()
    global _PLUGIN_MANAGER
    _PLUGIN_MANAGER = manager
    return manager


def _get_global_plugin_manager() -> PluginManager:
    """Returns initialized global plugin manager, creating it if needed."""
    plugin_manager = _PLUGIN_MANAGER
    if plugin_manager is None:
        plugin_manager = _initialize_plugin_system()
    return plugin_manager


def _create_plugin_manager() -> PluginManager:
    """Create a new PluginManager instance and register emitlite's hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(ListenerSpec)
    return manager


def _check_is_instance(plugin: Any) -> None:
    if isclass(plugin):
        raise TypeError(
            "emitlite expects plugins to be registered as instances. "
            "Have you forgotten the `()` when registering a plugin class?"
        )
