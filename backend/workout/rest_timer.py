"""
Rest countdown for the on-device workout engine.

Lifecycle: inactive -> running -> completed -> inactive.

A countdown ticks once per second from the configured duration down to zero.
Reaching zero marks it completed (once), and after a short grace period it
resets itself to inactive. Starting a new countdown while one is running
cancels the old one first, so at most one countdown is ever live.

All methods must be called from the event loop that owns the engine.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from application.ports.workout_runtime import NotificationScheduler

logger = logging.getLogger(__name__)

REST_TIMER_NOTIFICATION_ID = "rest-timer"
REST_COMPLETE_TITLE = "Rest Complete"
REST_COMPLETE_BODY = "Time to start your next set!"


class RestTimerState(str, Enum):
    INACTIVE = "inactive"
    RUNNING = "running"
    COMPLETED = "completed"


class RestCountdown:
    """
    Cancellable countdown with completion and auto-dismiss.

    Args:
        tick_seconds: Wall-clock length of one countdown step
        grace_seconds: How long the completed state is shown before reset
        notifier: Optional scheduler mirroring the deadline as a local alert
        on_complete: Callback invoked once when the countdown reaches zero
    """

    def __init__(
        self,
        *,
        tick_seconds: float = 1.0,
        grace_seconds: float = 2.0,
        notifier: Optional[NotificationScheduler] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self._tick_seconds = tick_seconds
        self._grace_seconds = grace_seconds
        self._notifier = notifier
        self._on_complete = on_complete
        self._task: Optional[asyncio.Task] = None

        self.state = RestTimerState.INACTIVE
        self.remaining: float = 0
        self.duration: float = 0
        self.is_minimized = False

    @property
    def is_resting(self) -> bool:
        """True while running or showing the completed state."""
        return self.state is not RestTimerState.INACTIVE

    @property
    def formatted_remaining(self) -> str:
        minutes, seconds = divmod(int(self.remaining), 60)
        return f"{minutes}:{seconds:02d}"

    def start(self, duration: float) -> None:
        """
        Start a countdown, replacing any countdown already in progress.

        Args:
            duration: Rest length in seconds (must be > 0)
        """
        if duration <= 0:
            raise ValueError("Rest duration must be positive")

        if self.is_resting:
            logger.debug("Cancelling existing rest countdown")
            self.stop()

        self.state = RestTimerState.RUNNING
        self.remaining = duration
        self.duration = duration
        self.is_minimized = False

        if self._notifier is not None:
            self._notifier.schedule(
                REST_TIMER_NOTIFICATION_ID,
                REST_COMPLETE_TITLE,
                REST_COMPLETE_BODY,
                duration * self._tick_seconds,
            )

        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Rest countdown started: {duration:.0f}s")

    def stop(self) -> None:
        """Cancel the countdown and reset to inactive. Safe to call repeatedly."""
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

        if self._notifier is not None:
            self._notifier.cancel(REST_TIMER_NOTIFICATION_ID)

        self._reset()

    def skip(self) -> None:
        """User-initiated cancellation."""
        if self.is_resting:
            logger.info(f"Rest skipped with {self.remaining:.0f}s remaining")
        self.stop()

    def minimize(self) -> None:
        self.is_minimized = True

    def expand(self) -> None:
        self.is_minimized = False

    async def wait(self) -> None:
        """Wait until the current countdown (including grace period) finishes."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self._tick_seconds)
            self.remaining = max(0, self.remaining - 1)
            remaining = int(self.remaining)
            if remaining % 10 == 0 or remaining < 5:
                logger.debug(f"Rest countdown tick - remaining: {remaining}s")

        self._complete()

        await asyncio.sleep(self._grace_seconds)

        # A countdown started from the completion callback owns the state now
        if self._task is asyncio.current_task():
            self._reset()
            self._task = None

    def _complete(self) -> None:
        # Guard so completion can only fire once per countdown
        if self.state is not RestTimerState.RUNNING:
            return

        self.state = RestTimerState.COMPLETED
        self.is_minimized = False
        logger.info("Rest countdown completed")

        if self._on_complete is not None:
            self._on_complete()

    def _reset(self) -> None:
        self.state = RestTimerState.INACTIVE
        self.remaining = 0
        self.duration = 0
        self.is_minimized = False
