"""Construction options for an event hub."""

from pydantic import BaseModel, ConfigDict, Field


class EventHubOptions(BaseModel):
    """Options fixed when a hub is constructed.

    Only ``max_listeners`` may change afterwards, through
    ``EventHub.set_max_listeners``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_listeners: int = Field(
        default=10, ge=0, description="Advisory limit on the total listener count"
    )
    wildcard: bool = Field(default=True, description="Accept '*' subscriptions")
    enable_async: bool = Field(
        default=True, description="Await awaitable listener results during emit"
    )
    debug: bool = Field(default=False, description="Emit diagnostic log records")
    namespace: str | None = Field(default=None, description="Label used in log records")
