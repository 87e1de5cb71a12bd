"""
Event Dispatcher — Name Resolver
==================================
Default NameResolver for indirect listener references.

Targets are located with Django's import_string, so the same dotted
paths used in settings work here. Nested classes are reached by
importing the longest importable prefix and walking the remaining
attributes.

    'shop.mail.send_receipt'          → shop.mail.send_receipt
    'shop.listeners.Audit::on_order'  → shop.listeners.Audit.on_order
    'shop.listeners.Audit->on_order'  → shop.listeners.Audit().on_order
"""

import logging
from typing import Any, Callable

from django.utils.module_loading import import_string

from event_dispatcher.errors import UnresolvableListener
from event_dispatcher.references import INSTANCE_SEPARATOR, parse_reference

logger = logging.getLogger("event_dispatcher.resolver")


def import_target(dotted_path: str) -> Any:
    """
    Import a dotted path, allowing attribute chains past the module.

    Raises:
        ImportError: No prefix imports, or an attribute is missing.
    """
    parts = dotted_path.split(".")
    last_error = None

    for split in range(len(parts), 1, -1):
        try:
            target = import_string(".".join(parts[:split]))
        except ImportError as exc:
            last_error = exc
            continue

        for attribute in parts[split:]:
            try:
                target = getattr(target, attribute)
            except AttributeError as exc:
                raise ImportError(
                    f"'{dotted_path}' has no attribute '{attribute}'."
                ) from exc
        return target

    raise ImportError(f"Cannot import '{dotted_path}'.") from last_error


class ImportStringResolver:
    """
    Resolves 'target', 'Type::method' and 'Type->method' references.

    Instances created for '->' references are not cached: every
    resolution builds a new one.
    """

    def resolve(self, reference: str) -> Callable[[Any], Any]:
        parsed = parse_reference(reference)
        if parsed is None:
            raise UnresolvableListener(reference, "malformed reference.")

        try:
            target = import_target(parsed.target)
        except ImportError as exc:
            raise UnresolvableListener(reference, str(exc)) from exc
        except Exception as exc:
            # Target module raised while being imported
            raise UnresolvableListener(
                reference,
                f"importing '{parsed.target}' failed: "
                f"{type(exc).__name__}: {exc}",
            ) from exc

        if parsed.separator is not None:
            if parsed.separator == INSTANCE_SEPARATOR:
                try:
                    target = target()
                except Exception as exc:
                    raise UnresolvableListener(
                        reference,
                        f"cannot instantiate '{parsed.target}': {exc}",
                    ) from exc

            try:
                target = getattr(target, parsed.method)
            except AttributeError as exc:
                raise UnresolvableListener(
                    reference,
                    f"'{parsed.target}' has no attribute '{parsed.method}'.",
                ) from exc

        if not callable(target):
            raise UnresolvableListener(
                reference, f"resolved to non-callable {type(target).__name__}."
            )

        logger.debug(f"Resolved listener reference '{reference}'")
        return target
