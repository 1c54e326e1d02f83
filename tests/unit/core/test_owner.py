"""Tests for the EventSource composition helper."""

import pytest

from eventhub.core.hub import EventHub
from eventhub.core.options import EventHubOptions
from eventhub.core.owner import EventSource


class Uploader(EventSource):
    hub_options = EventHubOptions(namespace="uploader", max_listeners=3)


@pytest.mark.unit
class TestEventSource:
    """Tests for owned hubs."""

    def test_hub_created_lazily_and_kept(self) -> None:
        source = EventSource()

        assert source._event_hub is None
        hub = source.event_hub

        assert isinstance(hub, EventHub)
        assert source.event_hub is hub

    def test_hub_options_used_for_lazy_hub(self) -> None:
        uploader = Uploader()

        assert uploader.event_hub.namespace == "uploader"
        assert uploader.event_hub.max_listeners == 3

    def test_injected_hub(self) -> None:
        shared = EventHub()

        first = Uploader(event_hub=shared)
        second = Uploader(event_hub=shared)

        assert first.event_hub is shared
        assert second.event_hub is shared

    def test_each_instance_owns_its_hub(self) -> None:
        assert Uploader().event_hub is not Uploader().event_hub

    def test_subclass_without_super_init(self) -> None:
        class Bare(EventSource):
            def __init__(self) -> None:
                self.name = "bare"

        bare = Bare()

        assert isinstance(bare.event_hub, EventHub)
        assert bare.event_hub is bare.event_hub

    @pytest.mark.asyncio
    async def test_component_publishes_through_owned_hub(self) -> None:
        class Job(EventSource):
            async def finish(self) -> None:
                await self.event_hub.emit("finished", self)

        job = Job()
        seen = []
        job.event_hub.on("finished", lambda finished: seen.append(finished))

        await job.finish()

        assert seen == [job]
