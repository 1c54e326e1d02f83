"""EventHub - in-process publish/subscribe event dispatcher."""

from functools import lru_cache

from eventhub.config.logging import get_logger
from eventhub.config.settings import get_settings
from eventhub.core import (
    ERROR_EVENT,
    WILDCARD,
    ConfigurationError,
    EventHandler,
    EventHub,
    EventHubError,
    EventHubOptions,
    EventSource,
    Listener,
    WildcardEventHandler,
)

__version__ = "0.1.0"

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_event_hub() -> EventHub:
    """Return the process-wide default hub.

    Created on first call from ``Settings`` (``EVENTHUB_*`` environment
    variables) and kept for the life of the process. Use ``reset()`` on
    the returned hub to drop its listeners.
    """
    options = get_settings().to_options()
    logger.debug("event_hub.default_created", namespace=options.namespace)
    return EventHub(options)


__all__ = [
    "EventHub",
    "EventHubOptions",
    "EventSource",
    "Listener",
    "EventHandler",
    "WildcardEventHandler",
    "WILDCARD",
    "ERROR_EVENT",
    "EventHubError",
    "ConfigurationError",
    "get_event_hub",
    "__version__",
]
