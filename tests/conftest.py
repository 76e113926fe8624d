"""Conftest for all pytest configuration - fixtures, hooks, and doctest setup."""

import doctest

import pytest

from emitlite import EventEmitter
from emitlite.settings import EmitliteSettings
from emitlite.settings import set_global_settings

# Doctest Configuration


def pytest_configure(config):
    """Configure pytest with custom doctest options."""
    doctest.ELLIPSIS_MARKER = "..."


def pytest_collection_modifyitems(items):
    """Automatically mark doctest items with the 'doctest' marker."""
    for item in items:
        if isinstance(item, pytest.DoctestItem):
            item.add_marker(pytest.mark.doctest)


# Fixtures


@pytest.fixture(autouse=True)
def reset_settings():
    """Restore default global settings after each test."""
    yield
    set_global_settings(EmitliteSettings())


@pytest.fixture
def emitter() -> EventEmitter:
    return EventEmitter()
