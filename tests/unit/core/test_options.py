"""Tests for hub options."""

import pytest
from pydantic import ValidationError

from eventhub.core.options import EventHubOptions


@pytest.mark.unit
class TestEventHubOptions:
    """Tests for EventHubOptions."""

    def test_defaults(self) -> None:
        options = EventHubOptions()

        assert options.max_listeners == 10
        assert options.wildcard is True
        assert options.enable_async is True
        assert options.debug is False
        assert options.namespace is None

    def test_negative_max_listeners_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventHubOptions(max_listeners=-1)

    def test_zero_max_listeners_allowed(self) -> None:
        assert EventHubOptions(max_listeners=0).max_listeners == 0

    def test_frozen(self) -> None:
        options = EventHubOptions()

        with pytest.raises(ValidationError):
            options.debug = True  # type: ignore[misc]

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventHubOptions(wildcards=False)  # type: ignore[call-arg]
