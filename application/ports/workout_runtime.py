"""
Companion-device collaborator interfaces (Ports).

The workout session engine runs on the wrist device and talks to three
black boxes:
- SensorMetricsSource: health-sensor session (heart rate, calories, elapsed time)
- MessageChannel: transport back to the phone
- NotificationScheduler: one-shot local alerts (rest timer deadline)
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from domain.models import CompletedWorkoutPayload


@dataclass
class SessionMetrics:
    """Metrics returned when the sensor session is finalized."""
    workout_id: Optional[str] = None
    active_calories: Optional[float] = None
    average_heart_rate: Optional[float] = None
    duration_seconds: Optional[float] = None


class SensorMetricsSource(Protocol):
    """
    Abstract interface for the health-sensor workout session.

    ``heart_rate``, ``active_calories`` and ``elapsed_time`` are readable at
    any time and polled by the engine once per second.
    """

    heart_rate: Optional[float]
    active_calories: Optional[float]
    elapsed_time: Optional[float]

    async def request_authorization(self) -> bool:
        """Ask for permission to read sensors; False when refused."""
        ...

    async def start_session(self, routine_name: str) -> None:
        """
        Begin collecting metrics.

        Raises:
            Exception: If the session cannot be started
        """
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    async def end_session(self) -> SessionMetrics:
        """
        Stop collecting and persist the session.

        Raises:
            Exception: If the session cannot be finalized
        """
        ...

    def discard_session(self) -> None:
        """Abandon the session immediately without saving anything."""
        ...


class MessageChannel(Protocol):
    """Fire-and-forget transport to the phone."""

    async def send(self, payload: CompletedWorkoutPayload) -> None:
        """Deliver a payload; failures are logged by the implementation, never raised."""
        ...


class NotificationScheduler(Protocol):
    """One-shot local notifications addressed by a fixed identifier."""

    def schedule(self, identifier: str, title: str, body: str, delay_seconds: float) -> None:
        """Schedule an alert, replacing any pending alert with the same identifier."""
        ...

    def cancel(self, identifier: str) -> None:
        """Cancel a pending alert; no-op when nothing is pending."""
        ...
