"""
Minimal publish/subscribe surface for the voice agent client.

Subscribers register per event name and are called in registration order. Plain
callables run inline; coroutine handlers are scheduled as tasks on the running
loop so that a slow subscriber never holds up the receive loop.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Set

from deepgram_bridge.config.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

EventHandler = Callable[..., Any]


class EventEmitter:
    """Named event channels with independent subscribers."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._pending: Set[asyncio.Task] = set()

    def on(self, event: str, handler: EventHandler) -> EventHandler:
        """Subscribe a handler to an event. Returns the handler."""
        self._handlers[event].append(handler)
        return handler

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a previously registered handler, if present."""
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Deliver an event to every subscriber.

        Args:
            event: Event name
            *args: Payload passed positionally to each handler

        Returns:
            True if at least one handler was registered for the event
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            try:
                result = handler(*args)
            except Exception as e:
                logger.error(f"Error in '{event}' handler {handler!r}: {e}", exc_info=True)
                continue

            if asyncio.iscoroutine(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._make_done_callback(event))
        return bool(handlers)

    def _make_done_callback(self, event: str):
        def _done(task: asyncio.Task) -> None:
            self._pending.discard(task)
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                logger.error(f"Error in async '{event}' handler: {exc}", exc_info=exc)

        return _done

    async def wait_for_handlers(self) -> None:
        """Wait until every scheduled coroutine handler has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
