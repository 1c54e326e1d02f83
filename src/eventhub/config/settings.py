"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventhub.core.options import EventHubOptions


class Settings(BaseSettings):
    """Settings for the default event hub, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EVENTHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dispatcher
    max_listeners: int = Field(default=10, ge=0)
    wildcard: bool = True
    enable_async: bool = True
    debug: bool = False
    namespace: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    def to_options(self) -> EventHubOptions:
        """Build hub options from the dispatcher settings."""
        return EventHubOptions(
            max_listeners=self.max_listeners,
            wildcard=self.wildcard,
            enable_async=self.enable_async,
            debug=self.debug,
            namespace=self.namespace,
        )

    @property
    def is_json_logging(self) -> bool:
        return self.log_format.lower() == "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
