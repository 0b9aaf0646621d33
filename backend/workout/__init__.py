"""On-device workout session: rest countdown and session engine."""

from backend.workout.rest_timer import RestCountdown, RestTimerState
from backend.workout.session_engine import WorkoutSessionEngine, WorkoutState

__all__ = [
    "RestCountdown",
    "RestTimerState",
    "WorkoutSessionEngine",
    "WorkoutState",
]
