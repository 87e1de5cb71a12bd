"""
Event Dispatcher — Public API
===============================
Synchronous, in-process event notification.

Register listeners on a ListenerRegistry, hand events to an
EventDispatcher. Listeners run highest priority first; a Stoppable
event can halt the run; a failing listener aborts it and its error
reaches the caller unchanged.
"""

from event_dispatcher.contracts import (
    ListenerProvider,
    NamedEvent,
    NameResolver,
    StoppableEvent,
    event_identities,
    type_identity,
)
from event_dispatcher.defaults import (
    get_default_dispatcher,
    get_default_registry,
    reset_defaults,
)
from event_dispatcher.dispatcher import DispatchState, EventDispatcher, dispatch
from event_dispatcher.errors import (
    EventDispatcherError,
    ImproperlyConfigured,
    InvalidIdentity,
    InvalidListener,
    UnresolvableListener,
)
from event_dispatcher.references import DirectListener, IndirectListener
from event_dispatcher.registry import ListenerRegistry
from event_dispatcher.resolver import ImportStringResolver

__all__ = [
    "dispatch",
    "EventDispatcher",
    "DispatchState",
    "ListenerRegistry",
    "ListenerProvider",
    "NameResolver",
    "ImportStringResolver",
    "DirectListener",
    "IndirectListener",
    "NamedEvent",
    "StoppableEvent",
    "type_identity",
    "event_identities",
    "get_default_registry",
    "get_default_dispatcher",
    "reset_defaults",
    "EventDispatcherError",
    "InvalidIdentity",
    "InvalidListener",
    "UnresolvableListener",
    "ImproperlyConfigured",
]
