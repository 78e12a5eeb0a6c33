"""Synchronous event bus connecting the application layer to the TUI.

FormRecord publishes focus requests, dropdown redraws and saved entries;
widgets subscribe on mount and unsubscribe on unmount. Nothing here knows
about Textual.

Handler contract:
    Handlers are plain (non-async) callables and run inline, in the order
    they subscribed. A handler that needs to await something schedules it
    (``call_later``, ``asyncio.create_task``) instead of awaiting.
"""

import inspect
from collections import defaultdict
from typing import Callable, Type, TypeVar

from tooltrack.logger import get_logger

from .types import Event

logger = get_logger("events.bus")

E = TypeVar("E", bound=Event)

EventHandler = Callable[[Event], None]


class EventBus:
    """Routes each published event to the handlers registered for its exact type.

    Example:
        ```python
        bus = EventBus()
        bus.subscribe(FocusRequested, lambda event: app.set_focus_by_id(event.widget_id))
        bus.publish(FocusRequested(widget_id="quantity-3f2a9c"))
        ```

    Not thread-safe: publish and subscribe from the event loop thread only.
    """

    def __init__(self):
        self._subscribers: defaultdict[Type[Event], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        """
        Register ``handler`` for ``event_type``. Subscribing twice is a no-op.

        Raises:
            TypeError: If ``handler`` is a coroutine function
        """
        if inspect.iscoroutinefunction(handler):
            raise TypeError(
                f"{event_type.__name__} handler {getattr(handler, '__name__', handler)!r} is async; "
                "event handlers must be synchronous and schedule async work themselves"
            )

        handlers = self._subscribers[event_type]
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug(f"{event_type.__name__}: {len(handlers)} subscriber(s)")

    def unsubscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        handlers = self._subscribers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug(f"{event_type.__name__}: {len(handlers)} subscriber(s)")

    def publish(self, event: Event) -> None:
        """
        Deliver ``event`` to its subscribers.

        An exception from one handler is logged and the remaining handlers
        still run; publish itself never raises on handler failure.
        """
        # Copy: handlers may unsubscribe while we iterate
        for handler in tuple(self._subscribers.get(type(event), ())):
            try:
                handler(event)
            except Exception:
                logger.exception(f"{type(event).__name__} handler {handler!r} failed")

    def has_subscribers(self, event_type: Type[Event]) -> bool:
        return bool(self._subscribers.get(event_type))

    def clear(self) -> None:
        self._subscribers.clear()
