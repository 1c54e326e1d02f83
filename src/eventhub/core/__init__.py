"""Core dispatcher, listener records and options for EventHub."""

from eventhub.core.exceptions import ConfigurationError, EventHubError
from eventhub.core.listener import (
    ERROR_EVENT,
    WILDCARD,
    EventHandler,
    Listener,
    WildcardEventHandler,
)
from eventhub.core.options import EventHubOptions
from eventhub.core.hub import EventHub
from eventhub.core.owner import EventSource

__all__ = [
    # Dispatcher
    "EventHub",
    "EventHubOptions",
    "EventSource",
    # Listeners
    "Listener",
    "EventHandler",
    "WildcardEventHandler",
    "WILDCARD",
    "ERROR_EVENT",
    # Exceptions
    "EventHubError",
    "ConfigurationError",
]
