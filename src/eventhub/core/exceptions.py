"""Custom exceptions for EventHub."""


class EventHubError(Exception):
    """Base exception for all EventHub errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(EventHubError):
    """Raised when hub options are invalid."""

    pass
