"""
Event-loop notification scheduler.

One-shot alerts keyed by identifier, fired with ``loop.call_later``.
Scheduling an identifier that is already pending replaces the old alert.
"""
from typing import Callable, Dict, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)


def _log_delivery(title: str, body: str) -> None:
    logger.info(f"Notification: {title} - {body}")


class LoopNotificationScheduler:
    """NotificationScheduler implementation on the running asyncio loop."""

    def __init__(self, deliver: Optional[Callable[[str, str], None]] = None):
        """
        Args:
            deliver: Called with (title, body) when an alert fires (default: log)
        """
        self._deliver = deliver or _log_delivery
        self._pending: Dict[str, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, identifier: str, title: str, body: str, delay_seconds: float) -> None:
        self.cancel(identifier)
        loop = asyncio.get_running_loop()
        self._pending[identifier] = loop.call_later(
            max(0.0, delay_seconds), self._fire, identifier, title, body
        )

    def cancel(self, identifier: str) -> None:
        handle = self._pending.pop(identifier, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, identifier: str, title: str, body: str) -> None:
        self._pending.pop(identifier, None)
        self._deliver(title, body)
