"""Cancellable timers used to debounce assessment requests."""

import asyncio
from typing import Any, Callable, Optional, Protocol

from ..log import get_logger

logger = get_logger("storylingo.timers")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay and hand back a cancellable handle."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    Callbacks run in the loop's default executor because they make blocking
    LLM calls.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, self._run_in_executor, callback)

    def _run_in_executor(self, callback: Callable[[], Any]) -> None:
        future = self.loop.run_in_executor(None, callback)
        future.add_done_callback(_log_failure)


def _log_failure(future: "asyncio.Future[Any]") -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(
            "Scheduled callback failed",
            exc_info=(type(error), error, error.__traceback__),
            extra={"component": "timers"},
        )


class Debouncer:
    """
    Runs only the last submitted callback, once ``delay`` has passed quietly.

    Each submit cancels the pending timer and starts a new one; there is no
    maximum wait, so continuous submissions keep postponing the call.
    """

    def __init__(self, scheduler: Scheduler, delay: float):
        self.scheduler = scheduler
        self.delay = delay
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, callback: Callable[[], Any]) -> None:
        self.cancel()
        handle = None

        def fire() -> None:
            # A newer submit may already have replaced this handle
            if self._handle is handle:
                self._handle = None
            callback()

        handle = self.scheduler.call_later(self.delay, fire)
        self._handle = handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
