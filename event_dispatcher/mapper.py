"""
Event Dispatcher — Listener Mapping
=====================================
Discovers listener methods on a class by naming convention.

A method qualifies when:
- its name is 'on' followed by an upper-case letter (onOrderPlaced)
- it takes exactly one positional parameter besides self/cls
- that parameter is annotated with a concrete class

Identity:
- name after 'on' == parameter class name → the class's type identity
- otherwise → the name after 'on' in snake_case (explicit event name)

    def onOrderPlaced(self, event: OrderPlaced)   → 'shop.events.OrderPlaced'
    def onStockLow(self, event: InventoryEvent)   → 'stock_low'

Anything else is skipped without error.
"""

from __future__ import annotations

import inspect
import logging
import re
import typing
from typing import Any, Callable, Optional

from event_dispatcher.contracts import type_identity
from event_dispatcher.references import (
    INSTANCE_SEPARATOR,
    STATIC_SEPARATOR,
    DirectListener,
    IndirectListener,
    ListenerReference,
)

logger = logging.getLogger("event_dispatcher.registry")

_LISTENER_NAME = re.compile(r"^on[A-Z]")
_INTERIOR_UPPER = re.compile(r"(?<!^)(?=[A-Z])")

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def to_snake_case(name: str) -> str:
    """'CustomEvent' → 'custom_event'."""
    return _INTERIOR_UPPER.sub("_", name).lower()


def _resolve_annotation(function: Callable[..., Any], annotation: Any) -> Any:
    """
    Evaluate one parameter annotation in the function's module.

    Only the event parameter is evaluated; other annotations (the
    return hint included) never affect qualification.
    Returns None when the annotation is missing or unresolvable.
    """
    if annotation is inspect.Parameter.empty:
        return None
    namespace = getattr(function, "__globals__", {})

    # Two passes: a quoted hint under postponed evaluation is a string twice
    for _ in range(2):
        if not isinstance(annotation, str):
            return annotation
        try:
            annotation = eval(annotation, namespace)
        except (NameError, AttributeError, SyntaxError, TypeError):
            # Unresolvable forward reference
            return None
    return annotation


def _event_parameter_type(
    function: Callable[..., Any], skip_first: bool
) -> Optional[type]:
    """Concrete class of the single event parameter, or None."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None

    parameters = list(signature.parameters.values())
    if skip_first:
        parameters = parameters[1:]
    if len(parameters) != 1 or parameters[0].kind not in _POSITIONAL_KINDS:
        return None

    hint = _resolve_annotation(function, parameters[0].annotation)
    if not isinstance(hint, type) or typing.get_origin(hint) is not None:
        return None
    if hint is object or hint is Any:
        return None
    return hint


def derive_identity(method_name: str, event_type: type) -> str:
    base_name = method_name[2:]
    if base_name == event_type.__name__:
        return type_identity(event_type)
    return to_snake_case(base_name)


def discover_listeners(holder: Any) -> list[tuple[str, ListenerReference]]:
    """
    Find on<Event> methods of an instance or a class.

    Instance holder → bound methods (DirectListener).
    Class holder    → 'Type::name' for static/class methods,
                      'Type->name' for instance methods (IndirectListener).

    Returns:
        (identity, listener) pairs in attribute-name order.
    """
    is_class = isinstance(holder, type)
    holder_class = holder if is_class else type(holder)
    discovered = []

    for name in dir(holder_class):
        if not _LISTENER_NAME.match(name):
            continue

        attribute = inspect.getattr_static(holder_class, name)
        if isinstance(attribute, staticmethod):
            function, skip_first = attribute.__func__, False
        elif isinstance(attribute, classmethod):
            function, skip_first = attribute.__func__, True
        elif inspect.isfunction(attribute):
            function, skip_first = attribute, True
        else:
            continue

        event_type = _event_parameter_type(function, skip_first)
        if event_type is None:
            logger.debug(
                f"Skipped {holder_class.__qualname__}.{name}: "
                f"not a single typed event parameter"
            )
            continue

        identity = derive_identity(name, event_type)

        if not is_class:
            listener = DirectListener(getattr(holder, name))
        elif isinstance(attribute, (staticmethod, classmethod)):
            listener = IndirectListener(
                f"{type_identity(holder_class)}{STATIC_SEPARATOR}{name}"
            )
        else:
            listener = IndirectListener(
                f"{type_identity(holder_class)}{INSTANCE_SEPARATOR}{name}"
            )

        discovered.append((identity, listener))

    return discovered
