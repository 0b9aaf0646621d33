"""
Fake Implementations for Testing.

This package provides in-memory fake implementations of the application
ports for fast, isolated testing. No database, sensors or network required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutSessionRepository, make_session

    repo = FakeWorkoutSessionRepository()
    repo.seed([make_session(days_ago=3, exercises=[("Bench Press", [(100, 5)])])])
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from domain.models import (
    WatchExercise,
    WatchRoutine,
    WatchSet,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)
from tests.fakes.session_repository import FakeWorkoutSessionRepository
from tests.fakes.workout_runtime import (
    FakeNotificationScheduler,
    FakeSensorSource,
    RecordingMessageChannel,
)

# Fixed reference time so timeframe tests are deterministic
REFERENCE_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

# (weight, reps) or (weight, reps, is_completed)
SetSpec = Tuple


# =============================================================================
# Factory Functions
# =============================================================================


def make_sets(specs: Sequence[SetSpec]) -> List[WorkoutSet]:
    """Build ordered sets from (weight, reps[, is_completed]) tuples."""
    sets = []
    for index, spec in enumerate(specs):
        weight, reps = spec[0], spec[1]
        is_completed = spec[2] if len(spec) > 2 else True
        sets.append(WorkoutSet(
            order=index,
            planned_reps=reps,
            actual_reps=reps,
            planned_weight=weight,
            actual_weight=weight,
            is_completed=is_completed,
        ))
    return sets


def make_session(
    *,
    days_ago: float = 0,
    exercises: Sequence[Tuple[str, Sequence[SetSpec]]] = (),
    completed: bool = True,
    routine_name: str = "Test Routine",
    session_id: Optional[str] = None,
    now: datetime = REFERENCE_NOW,
) -> WorkoutSession:
    """
    Create a session starting ``days_ago`` before ``now``.

    Args:
        days_ago: Start offset from the reference time
        exercises: (name, set specs) pairs in ordinal order
        completed: Whether the session has an end time
        routine_name: Routine name recorded on the session
        session_id: Explicit id (random if omitted)
        now: Reference time
    """
    start = now - timedelta(days=days_ago)
    kwargs = {}
    if session_id is not None:
        kwargs["id"] = session_id

    return WorkoutSession(
        start_time=start,
        end_time=start + timedelta(hours=1) if completed else None,
        routine_name=routine_name,
        exercises=[
            WorkoutExercise(exercise_name=name, order=index, sets=make_sets(specs))
            for index, (name, specs) in enumerate(exercises)
        ],
        **kwargs,
    )


def make_routine(
    *,
    exercises: Sequence[Tuple[str, int, float]] = (("Bench Press", 3, 90.0), ("Row", 2, 60.0)),
    reps: int = 8,
    weight: float = 60.0,
) -> WatchRoutine:
    """
    Create a routine snapshot.

    Args:
        exercises: (name, set count, rest seconds) triples
        reps: Planned reps for every set
        weight: Planned weight for every set
    """
    return WatchRoutine(
        id="routine-1",
        name="Push Day",
        exercises=[
            WatchExercise(
                id=f"ex-{e_index}",
                name=name,
                muscle_group="Chest",
                order=e_index,
                sets=[
                    WatchSet(id=f"ex-{e_index}-set-{s_index}", reps=reps, weight=weight, rest_time=rest)
                    for s_index in range(set_count)
                ],
            )
            for e_index, (name, set_count, rest) in enumerate(exercises)
        ],
    )


__all__ = [
    "FakeWorkoutSessionRepository",
    "FakeSensorSource",
    "RecordingMessageChannel",
    "FakeNotificationScheduler",
    "REFERENCE_NOW",
    "make_sets",
    "make_session",
    "make_routine",
]
