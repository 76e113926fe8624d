"""Pluggy markers for emitlite hook specifications and implementations."""

import pluggy

HOOK_NAMESPACE = "emitlite"

hook_spec = pluggy.HookspecMarker(HOOK_NAMESPACE)
hook_impl = pluggy.HookimplMarker(HOOK_NAMESPACE)
