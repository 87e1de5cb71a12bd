"""
Event Dispatcher — Dispatcher Tests
======================================
Tests for EventDispatcher propagation control.

Covers:
- All listeners run in provider order
- Stop mid-sequence
- Already-stopped short-circuit (provider never consulted)
- Fail-fast: listener error propagates verbatim
- Non-stoppable events ignore nothing
- Lazy provider is not drained after stop
- End-to-end with ListenerRegistry
"""

import pytest

from event_dispatcher.contracts import NamedEvent, StoppableEvent, type_identity
from event_dispatcher.dispatcher import EventDispatcher, dispatch
from event_dispatcher.registry import ListenerRegistry


# ══════════════════════════════════════════════════════════════
# TEST EVENTS & PROVIDERS
# ══════════════════════════════════════════════════════════════

class PlainEvent:
    def __init__(self):
        self.results = []


class HaltableEvent(StoppableEvent):
    def __init__(self):
        self.results = []


class UserRegistered(HaltableEvent, NamedEvent):
    def event_name(self):
        return "user_registered"


def record(tag):
    def listener(event):
        event.results.append(tag)
    return listener


def record_and_stop(tag):
    def listener(event):
        event.results.append(tag)
        event.stop_propagation()
    return listener


def explode(event):
    raise RuntimeError("Exception here")


class ListProvider:
    """Yields a fixed listener list; records how far it was consumed."""

    def __init__(self, listeners):
        self.listeners = listeners
        self.calls = 0
        self.yielded = 0

    def resolve_listeners(self, event):
        self.calls += 1
        for listener in self.listeners:
            self.yielded += 1
            yield listener


def five(middle):
    return [record("1"), record("2"), middle, record("4"), record("5")]


# ══════════════════════════════════════════════════════════════
# NORMAL PROPAGATION
# ══════════════════════════════════════════════════════════════

class TestPropagation:
    """Every listener runs when nothing stops or fails."""

    def test_all_listeners_run_in_order(self):
        provider = ListProvider(five(record("3")))
        event = PlainEvent()
        EventDispatcher(provider).dispatch(event)
        assert "".join(event.results) == "12345"

    def test_returns_same_event(self):
        event = PlainEvent()
        assert EventDispatcher(ListProvider([])).dispatch(event) is event

    def test_no_listeners(self):
        event = HaltableEvent()
        EventDispatcher(ListProvider([])).dispatch(event)
        assert event.results == []
        assert event.is_propagation_stopped() is False

    def test_listener_receives_event_only(self):
        received = []
        event = PlainEvent()
        EventDispatcher(ListProvider([lambda *args: received.append(args)])).dispatch(event)
        assert received == [(event,)]

    def test_stop_ignored_for_non_stoppable_event(self):
        def fake_stop(event):
            event.results.append("3")
            event.stopped = True

        event = PlainEvent()
        EventDispatcher(ListProvider(five(fake_stop))).dispatch(event)
        assert "".join(event.results) == "12345"

    def test_functional_dispatch(self):
        event = dispatch(PlainEvent(), ListProvider(five(record("3"))))
        assert "".join(event.results) == "12345"


# ══════════════════════════════════════════════════════════════
# STOPPABLE EVENTS
# ══════════════════════════════════════════════════════════════

class TestStoppable:
    """Stop flag halts propagation."""

    def test_stop_mid_sequence(self):
        provider = ListProvider(five(record_and_stop("3")))
        event = HaltableEvent()
        result = EventDispatcher(provider).dispatch(event)
        assert "".join(event.results) == "123"
        assert result is event
        assert event.is_propagation_stopped() is True

    def test_provider_not_drained_after_stop(self):
        provider = ListProvider(five(record_and_stop("3")))
        EventDispatcher(provider).dispatch(HaltableEvent())
        assert provider.yielded == 3

    def test_stop_by_first_listener(self):
        provider = ListProvider([record_and_stop("1"), record("2")])
        event = HaltableEvent()
        EventDispatcher(provider).dispatch(event)
        assert event.results == ["1"]

    def test_stop_by_last_listener(self):
        provider = ListProvider(five(record("3"))[:-1] + [record_and_stop("5")])
        event = HaltableEvent()
        EventDispatcher(provider).dispatch(event)
        assert "".join(event.results) == "12345"

    def test_already_stopped_event(self):
        provider = ListProvider(five(record("3")))
        event = HaltableEvent()
        event.stop_propagation()

        result = EventDispatcher(provider).dispatch(event)

        assert result is event
        assert event.results == []
        assert provider.calls == 0

    def test_stop_flag_starts_false(self):
        assert HaltableEvent().is_propagation_stopped() is False


# ══════════════════════════════════════════════════════════════
# FAILURE PASSTHROUGH
# ══════════════════════════════════════════════════════════════

class TestFailFast:
    """Listener errors propagate verbatim and abort dispatch."""

    def test_exception_propagates(self):
        provider = ListProvider(five(explode))
        event = PlainEvent()

        with pytest.raises(RuntimeError, match="Exception here"):
            EventDispatcher(provider).dispatch(event)

        assert "".join(event.results) == "12"

    def test_exception_is_not_wrapped(self):
        error = ValueError("original")

        def raising(event):
            raise error

        with pytest.raises(ValueError) as exc_info:
            EventDispatcher(ListProvider([raising])).dispatch(PlainEvent())
        assert exc_info.value is error

    def test_later_listeners_not_resolved(self):
        provider = ListProvider(five(explode))
        with pytest.raises(RuntimeError):
            EventDispatcher(provider).dispatch(HaltableEvent())
        assert provider.yielded == 3

    def test_partial_side_effects_kept(self):
        provider = ListProvider([record("1"), explode])
        event = HaltableEvent()
        with pytest.raises(RuntimeError):
            EventDispatcher(provider).dispatch(event)
        assert event.results == ["1"]
        assert event.is_propagation_stopped() is False


# ══════════════════════════════════════════════════════════════
# WITH LISTENER REGISTRY
# ══════════════════════════════════════════════════════════════

class TestWithRegistry:
    """Dispatcher driven by a real ListenerRegistry."""

    @pytest.fixture
    def registry(self):
        return ListenerRegistry()

    def test_priority_and_stop(self, registry):
        identity = type_identity(HaltableEvent)
        registry.register(identity, record("low"), -5)
        registry.register(identity, record_and_stop("high"), 10)
        registry.register(identity, record("mid"))

        event = EventDispatcher(registry).dispatch(HaltableEvent())
        assert event.results == ["high"]

    def test_named_event(self, registry):
        registry.register("user_registered", record("welcome"))
        registry.register(type_identity(HaltableEvent), record("typed"))

        event = EventDispatcher(registry).dispatch(UserRegistered())
        assert event.results == ["welcome"]

    def test_stop_skips_unresolvable_tail(self, registry):
        identity = type_identity(HaltableEvent)
        registry.register(identity, record_and_stop("stop"), 1)
        registry.register(identity, "no_such_module_xyz.listener")

        event = EventDispatcher(registry).dispatch(HaltableEvent())
        assert event.results == ["stop"]

    def test_provider_exposed(self, registry):
        assert EventDispatcher(registry).provider is registry
