"""
DebounceScheduler - coalesces rapid query changes into one delayed dispatch.

Each logical input field (a form row's part-name input) has at most one
pending timer. A new ``schedule()`` for the same field cancels the pending
timer and arms a fresh one, so only the last text typed before the field
goes quiet is dispatched.
"""

import asyncio
from typing import Awaitable, Callable

from tooltrack.logger import get_logger
from tooltrack.utils import truncate

logger = get_logger("debounce")

# Receives (field_id, query_text) once the field has been quiet for the delay
DispatchCallback = Callable[[str, str], Awaitable[None]]

DEFAULT_DELAY = 0.3


class DebounceScheduler:
    """
    Per-field debounce timers backed by asyncio tasks.

    The scheduler performs no I/O itself: when a timer expires it awaits the
    dispatch callback. Once a dispatch has started it is no longer a pending
    timer, so a later ``schedule()`` will not cancel it; the session is
    responsible for ignoring its result if it turned stale meanwhile.
    """

    def __init__(self, dispatch: DispatchCallback, delay: float = DEFAULT_DELAY):
        """
        Initialize the scheduler.

        Args:
            dispatch: Async callback invoked with (field_id, query_text)
            delay: Quiet period in seconds before dispatching
        """
        self._dispatch = dispatch
        self.delay = delay
        self._timers: dict[str, asyncio.Task] = {}
        self._inflight: set[asyncio.Task] = set()

    def schedule(self, field_id: str, query_text: str) -> None:
        """
        Arm (or re-arm) the timer for a field.

        Must be called from within the running event loop.

        Args:
            field_id: Logical field the query belongs to
            query_text: Text captured now and dispatched on expiry
        """
        superseded = self.cancel(field_id)
        task = asyncio.get_running_loop().create_task(
            self._fire(field_id, query_text),
            name=f"debounce:{field_id}",
        )
        self._timers[field_id] = task
        logger.debug(
            f"Scheduled dispatch for {field_id} in {self.delay:.3f}s: '{truncate(query_text)}'"
            f"{' (superseded pending timer)' if superseded else ''}"
        )

    def cancel(self, field_id: str) -> bool:
        """
        Cancel the pending timer for a field.

        Returns:
            True if a pending timer was cancelled
        """
        task = self._timers.pop(field_id, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        """Cancel every pending timer (in-flight dispatches keep running)."""
        for field_id in list(self._timers):
            self.cancel(field_id)

    def is_pending(self, field_id: str) -> bool:
        """Check whether a field has an armed, not yet expired timer."""
        return field_id in self._timers

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    async def shutdown(self) -> None:
        """Cancel timers and in-flight dispatches and wait for them to finish."""
        tasks = list(self._timers.values()) + list(self._inflight)
        self._timers.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug(f"Debounce scheduler shut down ({len(tasks)} task(s) cancelled)")

    async def _fire(self, field_id: str, query_text: str) -> None:
        await asyncio.sleep(self.delay)

        task = asyncio.current_task()
        if self._timers.get(field_id) is not task:
            return

        # From here on this is an in-flight dispatch, not a pending timer
        del self._timers[field_id]
        self._inflight.add(task)
        try:
            await self._dispatch(field_id, query_text)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Dispatch for {field_id} failed")
        finally:
            self._inflight.discard(task)
