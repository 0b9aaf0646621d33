"""
Domain layer for the Streak Progress API.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    ExerciseComparisonResult,
    ExerciseProgressData,
    ExerciseProgressDataPoint,
    PreviousExercisePerformance,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)

__all__ = [
    "ExerciseComparisonResult",
    "ExerciseProgressData",
    "ExerciseProgressDataPoint",
    "PreviousExercisePerformance",
    "WorkoutExercise",
    "WorkoutSession",
    "WorkoutSet",
]
