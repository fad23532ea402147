"""Run blocking store calls off the event loop with a timeout."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_bounded(
    fn: Callable[..., T],
    *args: Any,
    timeout: float,
    retries: int = 0,
) -> T:
    """Call ``fn(*args)`` in a worker thread, giving up after ``timeout`` seconds.

    Only timeouts are retried, up to ``retries`` extra attempts; any other
    exception propagates immediately. Raises ``asyncio.TimeoutError`` once
    the attempts are exhausted.

    A timed-out worker thread is abandoned, not stopped: it runs to
    completion in the background and its result is discarded. A retry
    starts a fresh call and does not wait on the abandoned one.
    """
    attempt = 0
    while True:
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout)
        except asyncio.TimeoutError:
            if attempt >= retries:
                raise
            attempt += 1
            logger.info(
                "%s timed out after %.2fs, retrying (%d/%d)",
                getattr(fn, "__name__", "lookup"), timeout, attempt, retries,
            )
