import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional
from loguru import logger
from ..config import settings


class ScheduledTask:
    """Handle for a callback scheduled on a Scheduler."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        if not self.cancelled and not self.done:
            self._cancel()
            self.cancelled = True


class Scheduler(ABC):
    """Schedule/cancel primitive the debouncer runs on."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run `callback` once after `delay` seconds."""


class AsyncioScheduler(Scheduler):
    """Runs callbacks on the asyncio event loop via call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._loop or asyncio.get_running_loop()
        task: ScheduledTask

        def run():
            task.done = True
            callback()

        handle = loop.call_later(delay, run)
        task = ScheduledTask(handle.cancel)
        return task


class Debouncer:
    """
    Collapse a burst of keystrokes into one search intent.

    Each keystroke cancels the pending task and schedules a new one
    `delay` seconds out, so the intent fires once the input has been quiet
    for the full delay and carries the last text entered, stripped.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        callback: Callable[[str], None],
        delay: Optional[float] = None
    ):
        self.scheduler = scheduler
        self.callback = callback
        self.delay = settings.DEBOUNCE_MS / 1000 if delay is None else delay
        self._pending: Optional[ScheduledTask] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def on_keystroke(self, text: str) -> None:
        self.cancel()
        value = (text or '').strip()
        self._pending = self.scheduler.schedule(
            self.delay, lambda: self._fire(value))

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, value: str) -> None:
        self._pending = None
        logger.debug(f"Search intent: {value!r}")
        self.callback(value)
