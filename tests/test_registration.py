"""Tests for listener registration and removal."""

import re

import pytest

from emitlite import DuplicateListenerError
from emitlite import DuplicateTaskIdError
from emitlite import EventEmitter
from emitlite import InvalidArgumentError
from emitlite import InvalidEventTypeError
from emitlite import InvalidListenerError


class TestSubscribe:
    """Tests for subscribe() and its variants."""

    def test_subscribe_returns_task_id(self, emitter: EventEmitter) -> None:
        """Subscribing returns a generated task id."""
        task_id = emitter.subscribe("demo", lambda payload: None)

        assert re.fullmatch(r"event_\d+_\d+", task_id)

    def test_task_ids_are_unique(self, emitter: EventEmitter) -> None:
        """Each subscription receives its own task id."""
        ids = {emitter.subscribe("demo", lambda payload: None) for _ in range(50)}

        assert len(ids) == 50

    @pytest.mark.parametrize("event_type", ["", None])
    def test_empty_event_type_raises(self, emitter: EventEmitter, event_type) -> None:
        """Empty event types are rejected."""
        with pytest.raises(InvalidEventTypeError, match="must not be empty"):
            emitter.subscribe(event_type, lambda payload: None)

        assert emitter.event_names() == []

    def test_invalid_event_type_is_value_error(self, emitter: EventEmitter) -> None:
        """Argument errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            emitter.subscribe("", lambda payload: None)

    def test_non_callable_listener_raises(self, emitter: EventEmitter) -> None:
        """Listeners must be callable."""
        with pytest.raises(InvalidListenerError):
            emitter.subscribe("demo", "not callable")  # type: ignore[arg-type]

        with pytest.raises(InvalidArgumentError):
            emitter.subscribe("demo", 42)  # type: ignore[arg-type]

    def test_duplicate_listener_raises(self, emitter: EventEmitter) -> None:
        """The same callback cannot be registered twice for one event type."""

        def listener(payload) -> None:
            pass

        emitter.subscribe("test", listener)

        with pytest.raises(DuplicateListenerError, match="already registered"):
            emitter.subscribe("test", listener)
        with pytest.raises(DuplicateListenerError):
            emitter.subscribe_once("test", listener, priority=10)

        assert emitter.listener_count("test") == 1

    def test_same_listener_for_different_types(self, emitter: EventEmitter) -> None:
        """A callback may be registered for several event types independently."""

        def listener(payload) -> None:
            pass

        emitter.subscribe("a", listener)
        emitter.subscribe("b", listener)

        assert emitter.listener_count("a") == 1
        assert emitter.listener_count("b") == 1

    def test_duplicate_task_id_from_factory_raises(self) -> None:
        """A custom id factory that repeats an id for one event type is rejected."""
        emitter = EventEmitter(id_factory=lambda: "fixed")
        emitter.subscribe("test", lambda payload: None)

        with pytest.raises(DuplicateTaskIdError, match="Task id 'fixed' is already in use"):
            emitter.subscribe("test", lambda payload: None)
        with pytest.raises(DuplicateListenerError):
            emitter.subscribe("test", lambda payload: None)
        assert emitter.listener_count("test") == 1

        # Ids only need to be unique within one event type
        assert emitter.subscribe("other", lambda payload: None) == "fixed"

    def test_custom_id_factory(self) -> None:
        """Task ids come from the injected factory."""
        ids = iter(["first", "second"])
        emitter = EventEmitter(id_factory=lambda: next(ids))

        assert emitter.subscribe("test", lambda payload: None) == "first"
        assert emitter.subscribe("test", lambda payload: None) == "second"

    def test_aliases(self, emitter: EventEmitter) -> None:
        """on/once/off mirror subscribe/subscribe_once/unsubscribe."""
        calls = []

        def listener(payload) -> None:
            calls.append(payload)

        emitter.on("a", listener)
        emitter.once("b", listener)
        emitter.emit("a", 1)
        emitter.emit("b", 2)
        emitter.emit("b", 3)
        emitter.off("a", listener)
        emitter.emit("a", 4)

        assert calls == [1, 2]
        assert emitter.event_names() == []

    def test_listener_decorator(self, emitter: EventEmitter) -> None:
        """The decorator registers the function and returns it unchanged."""
        calls = []

        @emitter.listener("saved", once=True, priority=3)
        def on_saved(payload) -> None:
            calls.append(payload)

        [info] = emitter.get_listeners("saved")
        assert info.callback is on_saved
        assert info.priority == 3
        assert info.once is True

        on_saved("direct")
        assert calls == ["direct"]


class TestUnsubscribe:
    """Tests for unsubscribe(), unsubscribe_by_id() and remove_all()."""

    def test_unsubscribe_removes_listener(self, emitter: EventEmitter) -> None:
        """Only the given listener is removed."""
        calls1, calls2 = [], []

        def listener1(payload) -> None:
            calls1.append(payload)

        def listener2(payload) -> None:
            calls2.append(payload)

        emitter.subscribe("test", listener1)
        emitter.subscribe("test", listener2)
        emitter.unsubscribe("test", listener1)
        emitter.emit("test", "data")

        assert calls1 == []
        assert calls2 == ["data"]

    def test_unsubscribe_cleans_up_empty_event_type(self, emitter: EventEmitter) -> None:
        """Removing the last listener deletes the event type entry."""

        def listener(payload) -> None:
            pass

        emitter.subscribe("test", listener)
        emitter.unsubscribe("test", listener)

        assert emitter.listener_count("test") == 0
        assert "test" not in emitter.event_names()
        assert "test" not in emitter

    def test_unsubscribe_unknown_is_noop(self, emitter: EventEmitter) -> None:
        """Removing unknown listeners or event types does not raise."""

        def listener(payload) -> None:
            pass

        emitter.subscribe("test", listener)
        emitter.unsubscribe("missing", listener)
        emitter.unsubscribe("test", lambda payload: None)

        assert emitter.listener_count("test") == 1

    def test_unsubscribe_by_id(self, emitter: EventEmitter) -> None:
        """Only the subscription with the matching id is removed."""
        calls = []

        def first(payload) -> None:
            calls.append(("first", payload))

        def second(payload) -> None:
            calls.append(("second", payload))

        first_id = emitter.subscribe("test", first)
        emitter.subscribe("test", second)

        emitter.unsubscribe_by_id("test", first_id)
        emitter.emit("test", 1)
        emitter.emit("test", 2)

        assert calls == [("second", 1), ("second", 2)]
        assert emitter.listener_count("test") == 1

    def test_unsubscribe_by_id_last_listener_cleans_up(self, emitter: EventEmitter) -> None:
        """Removing the last subscription by id deletes the event type entry."""
        task_id = emitter.subscribe("test", lambda payload: None)

        emitter.unsubscribe_by_id("test", task_id)

        assert emitter.event_names() == []

    def test_unsubscribe_by_id_unknown_is_noop(self, emitter: EventEmitter) -> None:
        """Unknown ids and event types are ignored."""
        task_id = emitter.subscribe("test", lambda payload: None)

        emitter.unsubscribe_by_id("test", "event_0_0")
        emitter.unsubscribe_by_id("missing", task_id)

        assert emitter.listener_count("test") == 1

    def test_remove_all_for_type(self, emitter: EventEmitter) -> None:
        """remove_all(type) clears only that event type."""
        emitter.subscribe("a", lambda payload: None)
        emitter.subscribe("a", lambda payload: None)
        emitter.subscribe("b", lambda payload: None)

        emitter.remove_all("a")

        assert emitter.listener_count("a") == 0
        assert emitter.event_names() == ["b"]

    def test_remove_all(self, emitter: EventEmitter) -> None:
        """remove_all() with no argument clears every event type."""
        emitter.subscribe("a", lambda payload: None)
        emitter.subscribe("b", lambda payload: None)
        emitter.subscribe("c", lambda payload: None)

        emitter.remove_all()

        assert emitter.event_names() == []
        assert emitter.listener_count("a") == 0
        assert len(emitter) == 0

    def test_remove_all_unknown_type_is_noop(self, emitter: EventEmitter) -> None:
        """Clearing an unknown event type does not raise."""
        emitter.subscribe("a", lambda payload: None)

        emitter.remove_all("missing")

        assert emitter.event_names() == ["a"]
