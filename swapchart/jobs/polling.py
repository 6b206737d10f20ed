from __future__ import annotations

import asyncio
import logging
import traceback
from typing import Awaitable, Callable

log = logging.getLogger("polling")

Sleep = Callable[[float], Awaitable[None]]


class CancelHandle:
    """Owns one polling task. cancel() may be called any number of times."""

    def __init__(self, task: asyncio.Task) -> None:
        self._task = task
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()

    async def wait(self) -> None:
        """Wait for the task to finish after cancel()."""
        try:
            await self._task
        except asyncio.CancelledError:
            pass


async def _poll_loop(fn: Callable[[], Awaitable[None]], interval_seconds: float, sleep: Sleep) -> None:
    """
    Background loop:
    run fn now, then again interval_seconds after each run finishes, until cancelled.
    """
    while True:
        try:
            await fn()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Keep loop alive if one refresh fails, but log the error.
            log.error("Polling step failed error=%s", repr(e))
            log.error(traceback.format_exc())

        await sleep(interval_seconds)


def start_polling(
    fn: Callable[[], Awaitable[None]],
    interval_seconds: float,
    sleep: Sleep = asyncio.sleep,
) -> CancelHandle:
    """
    Run fn immediately, then keep re-running it in the background.

    The wait starts once fn returns, so the effective period is
    interval_seconds plus however long fn takes; runs never overlap.
    Must be called from a running event loop.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")
    task = asyncio.create_task(_poll_loop(fn, interval_seconds, sleep))
    return CancelHandle(task)
