"""
Domain models for the Streak Progress API.

These models represent the core business concepts:
- WorkoutSession: A performed workout containing exercises and sets
- Progress entities: data points, previous performance, comparisons
- Watch models: routine snapshots, live workout state, completed payloads

Usage:
    >>> from datetime import datetime, timezone
    >>> from domain.models import WorkoutSession, WorkoutExercise, WorkoutSet

    >>> session = WorkoutSession(
    ...     start_time=datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc),
    ...     end_time=datetime(2024, 1, 15, 19, 0, tzinfo=timezone.utc),
    ...     routine_name="Leg Day",
    ...     exercises=[
    ...         WorkoutExercise(
    ...             exercise_name="Squat",
    ...             sets=[WorkoutSet(order=0, actual_reps=5, actual_weight=100, is_completed=True)],
    ...         )
    ...     ],
    ... )

    >>> # Serialize to JSON
    >>> json_str = session.model_dump_json(indent=2)
"""

from domain.models.progress import (
    ChartTimeframe,
    CurrentExercisePerformance,
    ExerciseComparisonResult,
    ExerciseProgressData,
    ExerciseProgressDataPoint,
    PreviousExercisePerformance,
    ProgressMetric,
    SetComparison,
    SetPerformance,
)
from domain.models.session import (
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
    normalize_exercise_name,
)
from domain.models.watch import (
    ActiveWorkoutExercise,
    ActiveWorkoutSet,
    CompletedExercise,
    CompletedSet,
    CompletedWorkoutPayload,
    WatchExercise,
    WatchRoutine,
    WatchSet,
)

__all__ = [
    # Session graph
    "WorkoutSession",
    "WorkoutExercise",
    "WorkoutSet",
    "normalize_exercise_name",
    # Progress
    "ChartTimeframe",
    "ProgressMetric",
    "ExerciseProgressDataPoint",
    "ExerciseProgressData",
    "PreviousExercisePerformance",
    "SetPerformance",
    "SetComparison",
    "CurrentExercisePerformance",
    "ExerciseComparisonResult",
    # Watch
    "WatchRoutine",
    "WatchExercise",
    "WatchSet",
    "ActiveWorkoutExercise",
    "ActiveWorkoutSet",
    "CompletedWorkoutPayload",
    "CompletedExercise",
    "CompletedSet",
]
