"""Composition helper for components that own an event hub."""

from __future__ import annotations

from eventhub.core.hub import EventHub
from eventhub.core.options import EventHubOptions


class EventSource:
    """Base class for components that publish through their own hub.

    The hub is either injected through the constructor or created on first
    access to ``event_hub`` from ``hub_options``.

    Usage:
        class Uploader(EventSource):
            hub_options = EventHubOptions(namespace="uploader")

        uploader = Uploader()
        uploader.event_hub.on("done", notify)

        shared = EventHub()
        other = Uploader(event_hub=shared)
    """

    hub_options: EventHubOptions | None = None

    def __init__(self, event_hub: EventHub | None = None) -> None:
        self._event_hub = event_hub

    @property
    def event_hub(self) -> EventHub:
        hub = getattr(self, "_event_hub", None)
        if hub is None:
            hub = EventHub(self.hub_options)
            self._event_hub = hub
        return hub
