"""
Event Dispatcher — Errors
===========================
Error types for registration, resolution and configuration.

Listener failures are NOT represented here. Whatever a listener
raises reaches the dispatch caller untouched.
"""

from typing import Any


class EventDispatcherError(Exception):
    """Base error for Event Dispatcher operations."""
    pass


class InvalidIdentity(EventDispatcherError):
    """Event identity is empty or not a string."""

    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(
            f"Event identity must be a non-empty string, got {identity!r}."
        )


class InvalidListener(EventDispatcherError):
    """Listener is neither callable nor a well-formed indirect reference."""

    def __init__(self, listener: Any):
        self.listener = listener
        super().__init__(
            f"Listener must be callable or an indirect reference such as "
            f"'module.Type::method', got {listener!r}."
        )


class UnresolvableListener(EventDispatcherError):
    """Indirect listener reference could not be turned into a callable."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(
            f"Cannot resolve listener '{reference}': {reason}"
        )


class ImproperlyConfigured(EventDispatcherError):
    """EVENT_DISPATCHER settings are malformed."""

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(
            f"EVENT_DISPATCHER['{setting}'] is invalid: {reason}"
        )
