"""Listener records and handler types."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias, Union, runtime_checkable

WILDCARD = "*"
ERROR_EVENT = "error"

# A handler either finishes immediately or hands back something to await.
HandlerResult: TypeAlias = Union[Awaitable[Any], Any]


@runtime_checkable
class EventHandler(Protocol):
    """Handler for a named event.

    Called as ``handler(*args)``, or ``handler(context, *args)`` when
    registered with a context.
    """

    def __call__(self, *args: Any) -> HandlerResult: ...


@runtime_checkable
class WildcardEventHandler(Protocol):
    """Handler for ``"*"`` subscriptions.

    Called as ``handler(event, *args)``, or ``handler(context, event, *args)``
    when registered with a context.
    """

    def __call__(self, event: str, /, *args: Any) -> HandlerResult: ...


def same_handler(registered: Any, handler: Any) -> bool:
    """Whether *registered* is the very handler *handler* refers to.

    Bound methods are rebuilt on every attribute access, so two of them
    match when they wrap the same function on the same object.
    """
    if registered is handler:
        return True
    return (
        inspect.ismethod(registered)
        and inspect.ismethod(handler)
        and registered.__self__ is handler.__self__
        and registered.__func__ is handler.__func__
    )


@dataclass(frozen=True, eq=False)
class Listener:
    """A registered handler plus its one-shot flag, priority and receiver.

    Records compare by identity, so registering the same handler twice
    yields two independent records.
    """

    handler: EventHandler | WildcardEventHandler
    once: bool = False
    priority: int = 0
    context: Any = None

    def invoke(self, *args: Any) -> HandlerResult:
        """Call the handler, passing the bound context first when there is one.

        Only ``None`` means "no context"; falsy receivers such as ``0`` or
        ``""`` are passed like any other.
        """
        if self.context is not None:
            return self.handler(self.context, *args)
        return self.handler(*args)

    @property
    def handler_name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))


def insert_by_priority(listeners: list[Listener], listener: Listener) -> None:
    """Insert *listener* keeping *listeners* sorted by descending priority.

    The new record goes before the first record with a strictly lower
    priority, so equal priorities keep their registration order.
    """
    for index, existing in enumerate(listeners):
        if existing.priority < listener.priority:
            listeners.insert(index, listener)
            return
    listeners.append(listener)
