"""Deferred-call scheduling and debouncing.

Provides a protocol for scheduling a callable after a delay and getting back
a cancel handle, with an asyncio event-loop implementation.  ``Debouncer``
builds last-write-wins behaviour on top: each new call cancels the previous
still-pending one.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol

from loguru import logger


class CancelHandle(Protocol):
    """Handle returned by a scheduler for a deferred call."""

    def cancel(self) -> None:
        """Prevent the deferred call from running if it has not run yet."""
        ...


class Scheduler(Protocol):
    """Protocol for deferring a callable."""

    def schedule(self, fn: Callable[[], None], delay: float) -> CancelHandle:
        """Run ``fn`` after ``delay`` seconds.

        Args:
            fn: Zero-argument callable to run.
            delay: Quiet period in seconds.

        Returns:
            A handle whose ``cancel()`` drops the call.
        """
        ...


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later`` on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, fn: Callable[[], None], delay: float) -> asyncio.TimerHandle:
        """Schedule ``fn`` on the event loop after ``delay`` seconds.

        Args:
            fn: Zero-argument callable to run.
            delay: Quiet period in seconds.

        Returns:
            The loop's ``TimerHandle``.
        """
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, fn)


class Debouncer:
    """Last-write-wins deferral of calls through a ``Scheduler``.

    Args:
        scheduler: Scheduler that performs the actual deferral.
        delay: Quiet period in seconds.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._handle: CancelHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether a deferred call is scheduled and has not run yet."""
        return self._handle is not None

    def call(self, fn: Callable[[], None]) -> None:
        """Cancel any pending call and schedule ``fn`` in its place."""
        self.cancel()

        def _run() -> None:
            self._handle = None
            fn()

        self._handle = self._scheduler.schedule(_run, self._delay)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            logger.trace("Cancelling superseded deferred call")
            self._handle.cancel()
            self._handle = None
