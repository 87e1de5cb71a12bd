"""
Event Dispatcher — Listener References
========================================
What the registration table actually stores.

A listener is one of:
- DirectListener:   a callable, invoked as-is
- IndirectListener: a string reference, resolved at dispatch time

Indirect reference forms:
    'pkg.module.function'       module-level callable
    'pkg.module.Type::method'   attribute of the class (static/class method)
    'pkg.module.Type->method'   method of a fresh Type() instance

Resolution is deferred to the moment the listener is yielded, so the
target only has to exist by dispatch time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Union

from event_dispatcher.contracts import NameResolver
from event_dispatcher.errors import InvalidListener

STATIC_SEPARATOR = "::"
INSTANCE_SEPARATOR = "->"

_REFERENCE_PATTERN = re.compile(
    r"^(?P<target>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)"
    r"(?:(?P<separator>::|->)(?P<method>[A-Za-z_]\w*))?$"
)


class ParsedReference(NamedTuple):
    target: str
    separator: Optional[str]
    method: Optional[str]


def parse_reference(reference: str) -> Optional[ParsedReference]:
    """
    Split an indirect reference into its parts.

    Returns None if the string is not a well-formed reference.
    The target must be dotted in every form: import needs a module part.
    """
    match = _REFERENCE_PATTERN.match(reference)
    if match is None:
        return None

    parsed = ParsedReference(
        target=match.group("target"),
        separator=match.group("separator"),
        method=match.group("method"),
    )
    if "." not in parsed.target:
        return None
    return parsed


# ══════════════════════════════════════════════════════════════
# LISTENER VARIANTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DirectListener:
    """Callable registered as-is."""

    target: Callable[[Any], Any]

    def resolve(self, resolver: NameResolver) -> Callable[[Any], Any]:
        return self.target

    def describe(self) -> str:
        return getattr(self.target, "__qualname__", repr(self.target))


@dataclass(frozen=True)
class IndirectListener:
    """String reference resolved through a NameResolver on demand."""

    reference: str

    def __post_init__(self) -> None:
        if not isinstance(self.reference, str) or parse_reference(self.reference) is None:
            raise InvalidListener(self.reference)

    def resolve(self, resolver: NameResolver) -> Callable[[Any], Any]:
        return resolver.resolve(self.reference)

    def describe(self) -> str:
        return self.reference


ListenerReference = Union[DirectListener, IndirectListener]


def as_listener_reference(listener: Any) -> ListenerReference:
    """
    Wrap a user-supplied listener into a ListenerReference.

    Raises:
        InvalidListener: Neither callable nor a well-formed reference.
    """
    if isinstance(listener, (DirectListener, IndirectListener)):
        return listener
    if isinstance(listener, str):
        return IndirectListener(listener)
    if callable(listener):
        return DirectListener(listener)
    raise InvalidListener(listener)
