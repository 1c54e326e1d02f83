"""Event hub: listener registry and dispatch.

Listeners are kept per event name in lists sorted by descending priority,
with a separate list for wildcard (``"*"``) subscriptions. ``emit`` runs a
wildcard fan-out and a specific fan-out over snapshots of those lists, so
listeners added or removed while an event is being dispatched only take
effect on the next ``emit``.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from eventhub.core.exceptions import ConfigurationError
from eventhub.core.listener import (
    ERROR_EVENT,
    WILDCARD,
    EventHandler,
    Listener,
    WildcardEventHandler,
    insert_by_priority,
    same_handler,
)
from eventhub.core.options import EventHubOptions

logger = structlog.get_logger(__name__)


def _build_options(
    options: EventHubOptions | None, overrides: dict[str, Any]
) -> EventHubOptions:
    base = options or EventHubOptions()
    if not overrides:
        return base
    try:
        return EventHubOptions.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid event hub options", details={"errors": e.errors()}
        ) from e


def _without_handler(listeners: list[Listener], handler: Any) -> list[Listener]:
    return [listener for listener in listeners if not same_handler(listener.handler, handler)]


class EventHub:
    """In-process publish/subscribe dispatcher.

    Usage:
        hub = EventHub(max_listeners=20)
        hub.on("task", on_task, priority=10)
        hub.once("*", audit)
        await hub.emit("task", payload)

    Handlers may be plain callables or return an awaitable. With
    ``enable_async`` set (the default) awaitable results are awaited one
    listener at a time; otherwise they are scheduled on the running loop
    and ``emit`` does not wait for them.
    """

    def __init__(self, options: EventHubOptions | None = None, **overrides: Any) -> None:
        """Create a hub.

        Args:
            options: Base options. Defaults to ``EventHubOptions()``.
            **overrides: Individual option fields applied on top of *options*.

        Raises:
            ConfigurationError: If the resulting options are invalid.
        """
        self._options = _build_options(options, overrides)
        self._events: dict[str, list[Listener]] = {}
        self._wildcard_listeners: list[Listener] = []
        self._background: set[asyncio.Future[Any]] = set()
        self._log = logger.bind(namespace=self._options.namespace)

    def __repr__(self) -> str:
        return (
            f"EventHub(namespace={self.namespace!r}, "
            f"listeners={self._total_listener_count()})"
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def options(self) -> EventHubOptions:
        return self._options

    @property
    def namespace(self) -> str | None:
        return self._options.namespace

    @property
    def max_listeners(self) -> int:
        return self._options.max_listeners

    @property
    def wildcard_enabled(self) -> bool:
        return self._options.wildcard

    @property
    def async_enabled(self) -> bool:
        return self._options.enable_async

    @property
    def debug(self) -> bool:
        return self._options.debug

    def set_max_listeners(self, n: int) -> EventHub:
        """Change the advisory listener limit."""
        self._options = _build_options(self._options, {"max_listeners": n})
        return self

    def create_namespace(self, namespace: str) -> EventHub:
        """Return a new hub with the same options and an empty registry."""
        return EventHub(self._options, namespace=namespace)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_event(self, event: str) -> bool:
        if event == WILDCARD and self.wildcard_enabled:
            return bool(self._wildcard_listeners)
        return event in self._events

    def listener_count(self, event: str) -> int:
        if event == WILDCARD and self.wildcard_enabled:
            return len(self._wildcard_listeners)
        return len(self._events.get(event, ()))

    def event_names(self) -> list[str]:
        """Names of events with at least one listener, wildcard excluded."""
        return list(self._events)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(
        self,
        event: str,
        handler: EventHandler | WildcardEventHandler,
        context: Any = None,
        priority: int = 0,
    ) -> EventHub:
        """Subscribe *handler* to *event*.

        Args:
            event: Event name, or ``"*"`` to receive every event.
            handler: Called with the emit arguments. Wildcard handlers get
                the event name first.
            context: Receiver passed as the first argument on every call.
                Only ``None`` means no receiver; ``0`` or ``""`` is passed.
            priority: Higher values run earlier. Ties keep registration order.

        Returns:
            The hub, for chaining.
        """
        return self._add_listener(event, handler, False, context, priority)

    def once(
        self,
        event: str,
        handler: EventHandler | WildcardEventHandler,
        context: Any = None,
        priority: int = 0,
    ) -> EventHub:
        """Like ``on``, but the listener is dropped after its first call."""
        return self._add_listener(event, handler, True, context, priority)

    def off(
        self,
        event: str | None = None,
        handler: EventHandler | WildcardEventHandler | None = None,
    ) -> EventHub:
        """Unsubscribe listeners.

        With no event every listener is removed. With only an event, all of
        that event's listeners are removed. With both, only listeners whose
        handler is *handler* are removed. Bound methods match when they wrap
        the same function on the same object.
        """
        if event is None:
            return self.reset()

        if event == WILDCARD and self.wildcard_enabled:
            if handler is None:
                self._wildcard_listeners = []
            else:
                self._wildcard_listeners = _without_handler(
                    self._wildcard_listeners, handler
                )
            return self

        if handler is None:
            self._events.pop(event, None)
        elif event in self._events:
            self._set_listeners(event, _without_handler(self._events[event], handler))
        return self

    def reset(self) -> EventHub:
        """Remove every listener."""
        self._events.clear()
        self._wildcard_listeners = []
        return self

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def emit(self, event: str, *args: Any) -> bool:
        """Invoke the wildcard and specific listeners for *event*.

        Listener failures never propagate; they are routed to ``"error"``
        listeners when there are any.

        Returns:
            ``True`` once both fan-outs have finished.
        """
        wildcard = list(self._wildcard_listeners) if self.wildcard_enabled else []
        specific = list(self._events.get(event, ()))
        self._debug(
            "event_hub.emit",
            event_name=event,
            wildcard_listeners=len(wildcard),
            listeners=len(specific),
        )

        if self.async_enabled:
            await asyncio.gather(
                self._fan_out(event, args, wildcard, is_wildcard=True),
                self._fan_out(event, args, specific, is_wildcard=False),
            )
        else:
            await self._fan_out(event, args, wildcard, is_wildcard=True)
            await self._fan_out(event, args, specific, is_wildcard=False)
        return True

    async def _fan_out(
        self,
        event: str,
        args: tuple[Any, ...],
        listeners: Sequence[Listener],
        *,
        is_wildcard: bool,
    ) -> None:
        call_args = (event, *args) if is_wildcard else args
        for listener in listeners:
            failure: Exception | None = None
            try:
                result = listener.invoke(*call_args)
                if inspect.isawaitable(result):
                    await self._settle(result, event, listener)
            except Exception as e:
                failure = e
            finally:
                if listener.once:
                    self._remove_listener(event, listener, is_wildcard=is_wildcard)
            if failure is not None:
                await self._handle_error(failure, event, listener)

    async def _settle(self, result: Awaitable[Any], event: str, listener: Listener) -> None:
        if self.async_enabled:
            await result
            return

        task = asyncio.ensure_future(result)
        self._track(task)

        def _done(finished: asyncio.Future[Any]) -> None:
            if finished.cancelled() or finished.exception() is None:
                return
            self._track(
                asyncio.ensure_future(
                    self._handle_error(finished.exception(), event, listener)
                )
            )

        task.add_done_callback(_done)

    def _track(self, task: asyncio.Future[Any]) -> None:
        # Hold a reference until the task finishes so it is not collected.
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _handle_error(
        self, error: BaseException, event: str, listener: Listener
    ) -> None:
        if event != ERROR_EVENT and self.listener_count(ERROR_EVENT) > 0:
            try:
                await self.emit(ERROR_EVENT, error, event, listener.handler)
            except Exception as e:
                self._debug(
                    "event_hub.error_dispatch_failed",
                    event_name=event,
                    handler=listener.handler_name,
                    error=repr(e),
                )
            return

        self._debug(
            "event_hub.listener_error",
            level="error",
            event_name=event,
            handler=listener.handler_name,
            error=repr(error),
        )

    # ------------------------------------------------------------------
    # Registry internals
    # ------------------------------------------------------------------

    def _add_listener(
        self,
        event: str,
        handler: EventHandler | WildcardEventHandler,
        once: bool,
        context: Any,
        priority: int,
    ) -> EventHub:
        if event == WILDCARD and not self.wildcard_enabled:
            self._debug("event_hub.wildcard_disabled", event_name=event)
            return self

        total = self._total_listener_count()
        if total >= self.max_listeners:
            self._log.warning(
                "event_hub.max_listeners_exceeded",
                event_name=event,
                listener_count=total,
                max_listeners=self.max_listeners,
                hint="possible listener leak, use set_max_listeners() to raise the limit",
            )

        listener = Listener(handler=handler, once=once, priority=priority, context=context)
        if event == WILDCARD:
            insert_by_priority(self._wildcard_listeners, listener)
        else:
            insert_by_priority(self._events.setdefault(event, []), listener)

        self._debug(
            "event_hub.listener_added",
            event_name=event,
            handler=listener.handler_name,
            once=once,
            priority=priority,
        )
        return self

    def _remove_listener(self, event: str, listener: Listener, *, is_wildcard: bool) -> None:
        if is_wildcard:
            self._wildcard_listeners = [
                existing for existing in self._wildcard_listeners if existing is not listener
            ]
            return
        if event in self._events:
            self._set_listeners(
                event, [existing for existing in self._events[event] if existing is not listener]
            )

    def _set_listeners(self, event: str, listeners: list[Listener]) -> None:
        if listeners:
            self._events[event] = listeners
        else:
            del self._events[event]

    def _total_listener_count(self) -> int:
        return len(self._wildcard_listeners) + sum(
            len(listeners) for listeners in self._events.values()
        )

    def _debug(self, message: str, level: str = "debug", **fields: Any) -> None:
        if not self.debug:
            return
        getattr(self._log, level)(message, **fields)
