"""
Application Ports (Interfaces).

This package defines Protocol interfaces for everything the core needs
from the outside world. Concrete implementations live in infrastructure/,
fakes for tests live in tests/fakes/.

Usage:
    from application.ports import WorkoutSessionRepository, SessionQuery

    def load(repo: WorkoutSessionRepository):
        return repo.fetch_sessions(SessionQuery(completed_only=True))
"""

from application.ports.session_repository import (
    SessionQuery,
    SessionStoreError,
    SortOrder,
    WorkoutSessionRepository,
)
from application.ports.workout_runtime import (
    MessageChannel,
    NotificationScheduler,
    SensorMetricsSource,
    SessionMetrics,
)

__all__ = [
    # Session store
    "WorkoutSessionRepository",
    "SessionQuery",
    "SessionStoreError",
    "SortOrder",
    # Companion-device collaborators
    "SensorMetricsSource",
    "SessionMetrics",
    "MessageChannel",
    "NotificationScheduler",
]
