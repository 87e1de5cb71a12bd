"""
Event Dispatcher — Configuration
==================================
Reads the EVENT_DISPATCHER dict from Django settings.

    EVENT_DISPATCHER = {
        "RESOLVER": "event_dispatcher.resolver.ImportStringResolver",
        "AUTOLOAD": True,
        "LISTENERS": [
            {"event": "shop.events.OrderPlaced",
             "listener": "shop.mail.send_receipt",
             "priority": 10},
            ("user_registered", "accounts.hooks.Welcome->send"),
        ],
        "SUBSCRIBERS": [
            "shop.listeners.AuditListeners",
            ("shop.listeners.StockListeners", 5),
        ],
    }

Every key is optional. Without configured Django settings the
defaults apply, so the package also works outside a Django project.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from django.conf import settings

from event_dispatcher.errors import ImproperlyConfigured

SETTINGS_NAME = "EVENT_DISPATCHER"

DEFAULT_RESOLVER = "event_dispatcher.resolver.ImportStringResolver"

_KNOWN_KEYS = frozenset({"RESOLVER", "AUTOLOAD", "LISTENERS", "SUBSCRIBERS"})


# ══════════════════════════════════════════════════════════════
# SETTINGS ENTRIES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ListenerSpec:
    """One declared registration: event identity → listener reference."""

    event: str
    listener: str
    priority: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.event, str) or not self.event.strip():
            raise ImproperlyConfigured(
                "LISTENERS", f"event must be a non-empty string, got {self.event!r}."
            )
        if not isinstance(self.listener, str) or not self.listener.strip():
            raise ImproperlyConfigured(
                "LISTENERS",
                f"listener must be a reference string, got {self.listener!r}.",
            )
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ImproperlyConfigured(
                "LISTENERS", f"priority must be an int, got {self.priority!r}."
            )


@dataclass(frozen=True)
class SubscriberSpec:
    """A listener holder class to map(), by dotted path."""

    holder: str
    priority: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.holder, str) or not self.holder.strip():
            raise ImproperlyConfigured(
                "SUBSCRIBERS",
                f"holder must be a dotted path, got {self.holder!r}.",
            )
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ImproperlyConfigured(
                "SUBSCRIBERS", f"priority must be an int, got {self.priority!r}."
            )


@dataclass(frozen=True)
class DispatcherSettings:
    """Validated EVENT_DISPATCHER configuration."""

    resolver: str = DEFAULT_RESOLVER
    autoload: bool = True
    listeners: Tuple[ListenerSpec, ...] = ()
    subscribers: Tuple[SubscriberSpec, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.resolver, str) or not self.resolver.strip():
            raise ImproperlyConfigured(
                "RESOLVER", f"must be a dotted path, got {self.resolver!r}."
            )
        if not isinstance(self.autoload, bool):
            raise ImproperlyConfigured(
                "AUTOLOAD", f"must be a bool, got {self.autoload!r}."
            )


# ══════════════════════════════════════════════════════════════
# PARSING
# ══════════════════════════════════════════════════════════════

def _parse_listener(entry: Any) -> ListenerSpec:
    if isinstance(entry, Mapping):
        unknown = set(entry) - {"event", "listener", "priority"}
        if unknown:
            raise ImproperlyConfigured(
                "LISTENERS", f"unknown keys {sorted(unknown)}."
            )
        if "event" not in entry or "listener" not in entry:
            raise ImproperlyConfigured(
                "LISTENERS", "each entry needs 'event' and 'listener'."
            )
        return ListenerSpec(**entry)

    if isinstance(entry, (tuple, list)) and len(entry) in (2, 3):
        return ListenerSpec(*entry)

    raise ImproperlyConfigured(
        "LISTENERS",
        f"entries must be dicts or (event, listener[, priority]) tuples, "
        f"got {entry!r}.",
    )


def _parse_subscriber(entry: Any) -> SubscriberSpec:
    if isinstance(entry, str):
        return SubscriberSpec(entry)

    if isinstance(entry, (tuple, list)) and len(entry) == 2:
        return SubscriberSpec(*entry)

    raise ImproperlyConfigured(
        "SUBSCRIBERS",
        f"entries must be dotted paths or (path, priority) tuples, got {entry!r}.",
    )


def _parse_sequence(raw: Mapping[str, Any], key: str) -> list:
    value = raw.get(key, ())
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ImproperlyConfigured(key, f"must be a list, got {value!r}.")
    return list(value)


def parse_dispatcher_settings(raw: Any) -> DispatcherSettings:
    """
    Validate a raw EVENT_DISPATCHER value.

    Raises:
        ImproperlyConfigured: Unknown keys or malformed entries
    """
    if raw is None:
        return DispatcherSettings()
    if not isinstance(raw, Mapping):
        raise ImproperlyConfigured("*", f"must be a dict, got {type(raw).__name__}.")

    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise ImproperlyConfigured("*", f"unknown keys {sorted(unknown)}.")

    return DispatcherSettings(
        resolver=raw.get("RESOLVER", DEFAULT_RESOLVER),
        autoload=raw.get("AUTOLOAD", True),
        listeners=tuple(
            _parse_listener(entry) for entry in _parse_sequence(raw, "LISTENERS")
        ),
        subscribers=tuple(
            _parse_subscriber(entry) for entry in _parse_sequence(raw, "SUBSCRIBERS")
        ),
    )


def get_dispatcher_settings() -> DispatcherSettings:
    """Current settings; defaults when Django is not configured."""
    if not settings.configured:
        return DispatcherSettings()
    return parse_dispatcher_settings(getattr(settings, SETTINGS_NAME, None))
