"""
Event Dispatcher — Listener Registry
======================================
Controls which listeners receive which events, and in what order.

Registration table:
    identity → priority → [listener, listener, ...]

Rules:
- Identities are non-empty strings (type identity or explicit name)
- Higher priority runs first; equal priority keeps registration order
- Buckets are append-only; only new buckets are slotted into order
- Named-Events match their explicit name only
- Other events match their class and every ancestor (MRO order)
- Same-priority buckets of different identities merge, most-derived first
- Indirect references resolve when yielded, never at registration
- Thread-safe; the lock is never held while a listener runs
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Iterator, Optional, Union

from event_dispatcher.contracts import (
    NamedEvent,
    NameResolver,
    event_identities,
    type_identity,
)
from event_dispatcher.errors import InvalidIdentity
from event_dispatcher.mapper import discover_listeners
from event_dispatcher.references import ListenerReference, as_listener_reference
from event_dispatcher.resolver import ImportStringResolver

logger = logging.getLogger("event_dispatcher.registry")


def _validate_identity(identity: Any) -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentity(identity)
    return identity


def _validate_priority(priority: Any) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise TypeError(
            f"Priority must be an int, got {type(priority).__name__}."
        )
    return priority


class ListenerRegistry:
    """
    In-memory registry of event listeners.

    Usage:
        registry = ListenerRegistry()

        registry.register("shop.events.OrderPlaced", send_receipt, priority=10)
        registry.register("user_registered", "accounts.hooks.Welcome->send")
        registry.map(AuditListeners())

        for listener in registry.resolve_listeners(OrderPlaced(...)):
            ...
    """

    def __init__(self, resolver: Optional[NameResolver] = None):
        self._resolver = resolver if resolver is not None else ImportStringResolver()
        self._listeners: dict[str, dict[int, list[ListenerReference]]] = {}
        self._lock = Lock()

    @property
    def resolver(self) -> NameResolver:
        return self._resolver

    # ══════════════════════════════════════════════════════════
    # REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register(
        self,
        event_identity: str,
        listener: Any,
        priority: int = 0,
    ) -> None:
        """
        Register a listener for an event identity.

        Args:
            event_identity: Type identity ('pkg.mod.Type') or explicit name
            listener:       Callable, ListenerReference, or indirect
                            reference string ('pkg.mod.Type::method')
            priority:       Higher runs first. Default 0.

        Raises:
            InvalidIdentity: Empty or non-string identity
            InvalidListener: Listener neither callable nor a reference
            TypeError:       Priority is not an int
        """
        _validate_identity(event_identity)
        entry = as_listener_reference(listener)
        _validate_priority(priority)

        with self._lock:
            buckets = self._listeners.setdefault(event_identity, {})
            if priority in buckets:
                buckets[priority].append(entry)
            else:
                buckets[priority] = [entry]
                self._listeners[event_identity] = dict(
                    sorted(buckets.items(), key=lambda item: item[0], reverse=True)
                )

        logger.debug(
            f"Listener registered: {entry.describe()} → {event_identity} "
            f"(priority: {priority})"
        )

    def listens_to(
        self,
        event: Union[str, type],
        priority: int = 0,
    ) -> Callable[[Callable[[Any], Any]], Callable[[Any], Any]]:
        """
        Decorator form of register().

            @registry.listens_to(OrderPlaced, priority=5)
            def send_receipt(event): ...

        A class is converted to its type identity.
        """
        identity = type_identity(event) if isinstance(event, type) else event

        def decorator(listener: Callable[[Any], Any]) -> Callable[[Any], Any]:
            self.register(identity, listener, priority)
            return listener

        return decorator

    def map(self, listener_holder: Any, priority: int = 0) -> list[str]:
        """
        Register every on<Event> method of an instance or class.

        See event_dispatcher.mapper for the naming convention.

        Returns:
            Identities registered, in registration order.
        """
        registered = []
        for identity, listener in discover_listeners(listener_holder):
            self.register(identity, listener, priority)
            registered.append(identity)

        holder = listener_holder if isinstance(listener_holder, type) else type(listener_holder)
        logger.info(
            f"Mapped {len(registered)} listener(s) from {holder.__qualname__}"
        )
        return registered

    def clear(self) -> None:
        """Remove every registration."""
        with self._lock:
            self._listeners.clear()

    # ══════════════════════════════════════════════════════════
    # RESOLUTION
    # ══════════════════════════════════════════════════════════

    def identities_for(self, event: Any) -> list[str]:
        """
        Identities searched for event, in visit order.

        Raises:
            InvalidIdentity: Named-Event returned an empty/non-string name
        """
        if isinstance(event, NamedEvent):
            return [_validate_identity(event.event_name())]
        return event_identities(type(event))

    def resolve_listeners(self, event: Any) -> Iterator[Callable[[Any], Any]]:
        """
        Listeners applicable to event, highest priority first.

        The table is read once, now. The returned iterator resolves
        indirect references only as each one is reached, so a caller
        that stops early never resolves the rest.

        Returns empty iterator if nothing matches (not an error).
        """
        identities = self.identities_for(event)

        merged: dict[int, list[ListenerReference]] = {}
        with self._lock:
            for identity in identities:
                for priority, bucket in self._listeners.get(identity, {}).items():
                    merged.setdefault(priority, []).extend(bucket)

        ordered = [merged[priority] for priority in sorted(merged, reverse=True)]
        return self._iterate(ordered)

    def _iterate(
        self, buckets: list[list[ListenerReference]]
    ) -> Iterator[Callable[[Any], Any]]:
        for bucket in buckets:
            for entry in bucket:
                yield entry.resolve(self._resolver)

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════

    def has_listeners(self, event_identity: str) -> bool:
        """Check if any listener is registered under exactly this identity."""
        with self._lock:
            return bool(self._listeners.get(event_identity))

    def listener_count(self, event_identity: str) -> int:
        """Count listeners registered under exactly this identity."""
        with self._lock:
            return sum(
                len(bucket)
                for bucket in self._listeners.get(event_identity, {}).values()
            )

    def get_all_identities(self) -> frozenset[str]:
        """Return all identities with registered listeners."""
        with self._lock:
            return frozenset(self._listeners.keys())
