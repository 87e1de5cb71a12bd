"""
Event Dispatcher — Dispatcher
===============================
Invokes resolved listeners for an event, in order.

Dispatch behavior:
1. Stoppable event already stopped → return it untouched
2. Ask the ListenerProvider for the ordered listeners
3. Call each listener with the event as its only argument
4. Listener raises → propagate to the caller as-is, stop dispatching
5. Stoppable event stopped by a listener → return, skip the rest
6. Listeners exhausted → return the event

This module does NOT:
- Catch, wrap, log-and-continue or retry listener failures
- Mutate the event (listeners do that)
- Roll back side effects of listeners that already ran
- Reach into a global registry (the provider is injected)
"""

import logging
from enum import Enum
from typing import Any, TypeVar

from event_dispatcher.contracts import ListenerProvider, StoppableEvent

logger = logging.getLogger("event_dispatcher.dispatch")

E = TypeVar("E")


class DispatchState(Enum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    FAILED = "FAILED"
    DONE = "DONE"


def _describe(listener: Any) -> str:
    return getattr(listener, "__qualname__", repr(listener))


class EventDispatcher:
    """
    Synchronous, in-process event dispatcher.

    Usage:
        dispatcher = EventDispatcher(registry)
        event = dispatcher.dispatch(OrderPlaced(order_id=...))
    """

    def __init__(self, provider: ListenerProvider):
        self._provider = provider

    @property
    def provider(self) -> ListenerProvider:
        return self._provider

    def dispatch(self, event: E) -> E:
        """
        Dispatch an event to every applicable listener.

        Returns:
            The same event object, as mutated by the listeners.

        Raises:
            Whatever a listener raises, unchanged.
        """
        is_stoppable = isinstance(event, StoppableEvent)

        if is_stoppable and event.is_propagation_stopped():
            logger.debug(
                f"Skipped {type(event).__qualname__}: propagation already stopped"
            )
            return event

        state = DispatchState.RUNNING
        invoked = 0
        listeners = iter(self._provider.resolve_listeners(event))

        try:
            for listener in listeners:
                try:
                    listener(event)
                except Exception:
                    state = DispatchState.FAILED
                    logger.debug(
                        f"Listener {_describe(listener)} failed on "
                        f"{type(event).__qualname__}; propagating"
                    )
                    raise
                invoked += 1

                if is_stoppable and event.is_propagation_stopped():
                    state = DispatchState.STOPPED
                    break
            else:
                state = DispatchState.DONE
        finally:
            close = getattr(listeners, "close", None)
            if close is not None:
                close()

        logger.debug(
            f"Dispatch of {type(event).__qualname__} finished: "
            f"{state.value} after {invoked} listener(s)"
        )
        return event


def dispatch(event: E, provider: ListenerProvider) -> E:
    """Dispatch event through provider. See EventDispatcher.dispatch()."""
    return EventDispatcher(provider).dispatch(event)
