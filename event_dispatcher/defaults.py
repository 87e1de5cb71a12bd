"""
Event Dispatcher — Process-Wide Defaults
==========================================
Convenience factory for one shared registry and dispatcher.

The core never calls into this module. Code that wants explicit
wiring builds its own ListenerRegistry and EventDispatcher.

Lifecycle:
    1. get_default_registry() creates the registry on first use,
       with the configured RESOLVER
    2. EventDispatcherConfig.ready() loads configured listeners into it
    3. reset_defaults() drops both instances (tests, re-bootstrap)
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from django.utils.module_loading import import_string

from event_dispatcher.conf import DispatcherSettings, get_dispatcher_settings
from event_dispatcher.dispatcher import EventDispatcher
from event_dispatcher.errors import ImproperlyConfigured
from event_dispatcher.registry import ListenerRegistry

logger = logging.getLogger("event_dispatcher.bootstrap")

_default_registry: Optional[ListenerRegistry] = None
_default_dispatcher: Optional[EventDispatcher] = None
_lock = Lock()


def build_registry(conf: Optional[DispatcherSettings] = None) -> ListenerRegistry:
    """
    Create a fresh registry using the configured resolver.

    Raises:
        ImproperlyConfigured: RESOLVER cannot be imported
    """
    conf = conf or get_dispatcher_settings()

    try:
        resolver_class = import_string(conf.resolver)
    except ImportError as exc:
        raise ImproperlyConfigured("RESOLVER", str(exc)) from exc

    return ListenerRegistry(resolver=resolver_class())


def load_configured_listeners(
    registry: ListenerRegistry,
    conf: Optional[DispatcherSettings] = None,
) -> int:
    """
    Register every declared listener and map every declared holder.

    Returns:
        Number of registrations made.

    Raises:
        ImproperlyConfigured: A SUBSCRIBERS holder cannot be imported
        InvalidIdentity / InvalidListener: A declared entry is rejected
    """
    conf = conf or get_dispatcher_settings()
    count = 0

    for spec in conf.listeners:
        registry.register(spec.event, spec.listener, spec.priority)
        count += 1

    for spec in conf.subscribers:
        try:
            holder = import_string(spec.holder)
        except ImportError as exc:
            raise ImproperlyConfigured("SUBSCRIBERS", str(exc)) from exc
        count += len(registry.map(holder, spec.priority))

    logger.info(
        f"Configured listeners loaded: {count} registration(s) from "
        f"{len(conf.listeners)} listener(s), {len(conf.subscribers)} subscriber(s)"
    )
    return count


def get_default_registry() -> ListenerRegistry:
    """Process-wide registry, created on first call."""
    global _default_registry
    with _lock:
        if _default_registry is None:
            _default_registry = build_registry()
        return _default_registry


def get_default_dispatcher() -> EventDispatcher:
    """Process-wide dispatcher bound to the default registry."""
    global _default_dispatcher
    registry = get_default_registry()
    with _lock:
        if _default_dispatcher is None:
            _default_dispatcher = EventDispatcher(registry)
        return _default_dispatcher


def reset_defaults() -> None:
    """Forget the process-wide instances."""
    global _default_registry, _default_dispatcher
    with _lock:
        _default_registry = None
        _default_dispatcher = None
