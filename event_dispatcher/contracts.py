"""
Event Dispatcher — Contracts
==============================
Event capabilities and the collaborator protocols.

Capabilities are nominal. An event is a Named-Event only if its class
derives from NamedEvent, and Stoppable only if it derives from
StoppableEvent. A `name` attribute alone changes nothing.

Protocols:
- ListenerProvider: anything that resolves listeners for an event
- NameResolver:     turns an indirect reference string into a callable
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Protocol


# ══════════════════════════════════════════════════════════════
# EVENT CAPABILITIES
# ══════════════════════════════════════════════════════════════

class NamedEvent(ABC):
    """
    Event that supplies its own identity.

    The returned name replaces type-based identity entirely:
    listeners registered against the event's class or its
    ancestors are NOT consulted.

    Implement event_name(); name() is an alias for it. Resolution
    always calls event_name(), so a subclass may shadow name with
    a field of its own.
    """

    @abstractmethod
    def event_name(self) -> str:
        """Return the identity listeners were registered under."""
        ...  # pragma: no cover

    def name(self) -> str:
        return self.event_name()


class StoppableEvent:
    """
    Event whose propagation a listener may halt.

    The flag starts False. Once a listener calls stop_propagation(),
    the dispatcher invokes no further listeners for this event.
    Subclasses must stay mutable (no frozen dataclasses).
    """

    _propagation_stopped: bool = False

    def is_propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def stop_propagation(self) -> None:
        self._propagation_stopped = True


# ══════════════════════════════════════════════════════════════
# COLLABORATOR PROTOCOLS
# ══════════════════════════════════════════════════════════════

class ListenerProvider(Protocol):
    """
    Query contract the dispatcher depends on.

    ListenerRegistry implements it; tests and applications may
    supply their own.
    """

    def resolve_listeners(self, event: Any) -> Iterable[Callable[[Any], Any]]:
        """Return the listeners for event, in invocation order."""
        ...  # pragma: no cover


class NameResolver(Protocol):
    """Turns an indirect listener reference into a callable."""

    def resolve(self, reference: str) -> Callable[[Any], Any]:
        """
        Raises:
            UnresolvableListener: Target cannot be located.
        """
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IDENTITY HELPERS
# ══════════════════════════════════════════════════════════════

def type_identity(cls: type) -> str:
    """Canonical identity of a class: 'module.QualifiedName'."""
    return f"{cls.__module__}.{cls.__qualname__}"


def event_identities(event_class: type) -> list[str]:
    """
    Identities searched for an instance of event_class.

    The class itself first, then every ancestor in MRO order.
    `object` is excluded, so no identity matches every event.
    """
    return [
        type_identity(cls)
        for cls in event_class.__mro__
        if cls is not object
    ]
