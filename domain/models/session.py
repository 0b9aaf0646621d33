"""
Workout session graph: WorkoutSession -> WorkoutExercise -> WorkoutSet.

These are the persisted records of finished (or in-progress) workouts.
The progress engine only ever reads them; they are owned by the session store.
"""

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class WorkoutSet(BaseModel):
    """
    A single performed set.

    Only sets with ``is_completed`` set count toward any aggregate metric.

    Examples:
        >>> s = WorkoutSet(order=0, actual_reps=5, actual_weight=100.0, is_completed=True)
        >>> s.volume
        500.0
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    order: int = Field(default=0, ge=0, description="Ordinal position within the exercise")
    planned_reps: int = Field(default=0, ge=0)
    actual_reps: int = Field(default=0, ge=0)
    planned_weight: float = Field(default=0.0, ge=0)
    actual_weight: float = Field(default=0.0, ge=0)
    rest_time: float = Field(default=0.0, ge=0, description="Configured rest in seconds")
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    @property
    def volume(self) -> float:
        """Weight x reps for this set, regardless of completion."""
        return self.actual_weight * self.actual_reps

    model_config = {"frozen": True}


class WorkoutExercise(BaseModel):
    """
    One exercise performed inside a session.

    ``exercise_name`` is free text; matching against it is case-insensitive.
    Exercises sharing a ``superset_id`` were performed back-to-back.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    exercise_name: str = Field(..., min_length=1)
    muscle_groups: List[str] = Field(default_factory=list)
    order: int = Field(default=0, ge=0)
    superset_id: Optional[str] = None
    superset_order: int = 0
    sets: List[WorkoutSet] = Field(default_factory=list)

    def sorted_sets(self) -> List[WorkoutSet]:
        """Sets in ordinal order (stable for equal ordinals)."""
        return sorted(self.sets, key=lambda s: s.order)

    def completed_sets(self) -> List[WorkoutSet]:
        return [s for s in self.sets if s.is_completed]

    def matches_name(self, name: str) -> bool:
        """Case-insensitive exact name comparison."""
        return normalize_exercise_name(self.exercise_name) == normalize_exercise_name(name)

    model_config = {"frozen": True}


class WorkoutSession(BaseModel):
    """
    Aggregate root for a performed workout.

    A session is completed iff ``end_time`` is set; sessions still in
    progress are invisible to every progress query.

    Examples:
        >>> from datetime import datetime, timezone
        >>> session = WorkoutSession(
        ...     start_time=datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc),
        ...     routine_name="Push Day",
        ... )
        >>> session.is_completed
        False
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    start_time: datetime
    end_time: Optional[datetime] = None
    routine_name: str = ""
    exercises: List[WorkoutExercise] = Field(default_factory=list)
    did_update_template: bool = False
    healthkit_workout_id: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def sorted_exercises(self) -> List[WorkoutExercise]:
        """Exercises in ordinal order (stable for equal ordinals)."""
        return sorted(self.exercises, key=lambda e: e.order)

    model_config = {"frozen": True}


def normalize_exercise_name(name: str) -> str:
    """Normalize an exercise name for identity comparison."""
    return name.casefold()
