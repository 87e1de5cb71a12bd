"""
Event Dispatcher — App Configuration
======================================
Loads EVENT_DISPATCHER listeners into the default registry
when Django finishes loading.

Rules:
- Runs once via ready()
- Skipped when AUTOLOAD is False
- A bad declaration fails startup (no partial, silent wiring)
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger("event_dispatcher.bootstrap")


class EventDispatcherConfig(AppConfig):
    name = "event_dispatcher"
    label = "event_dispatcher"
    verbose_name = "Event Dispatcher"

    def ready(self):
        from event_dispatcher.conf import get_dispatcher_settings
        from event_dispatcher.defaults import (
            get_default_registry,
            load_configured_listeners,
        )

        conf = get_dispatcher_settings()
        if not conf.autoload:
            logger.info("Event listener autoload disabled by settings.")
            return

        load_configured_listeners(get_default_registry(), conf)
