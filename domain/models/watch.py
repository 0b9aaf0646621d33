"""
Companion-device workout models.

Two families live here:
- Wire models (pydantic) exchanged with the phone: WatchRoutine and friends
  arrive from the phone, CompletedWorkoutPayload goes back once a workout ends.
  They serialize with camelCase aliases.
- Live state (dataclasses) mutated by the workout session engine while a
  workout is running: ActiveWorkoutExercise / ActiveWorkoutSet.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


# =============================================================================
# Routine snapshot (phone -> watch)
# =============================================================================


class WatchSet(BaseModel):
    """Planned set from a routine template."""

    model_config = _WIRE_CONFIG

    id: str
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    rest_time: float = Field(default=0.0, ge=0)


class WatchExercise(BaseModel):
    """Planned exercise from a routine template."""

    model_config = _WIRE_CONFIG

    id: str
    name: str
    muscle_group: str = ""
    sets: List[WatchSet] = Field(default_factory=list)
    order: int = 0
    superset_id: Optional[str] = None
    superset_order: int = 0

    def to_active(self) -> "ActiveWorkoutExercise":
        """
        Snapshot into mutable live state.

        Exercise and set ids are preserved so the completed payload can be
        matched back to the routine on the phone. Actual values start equal
        to planned values.
        """
        return ActiveWorkoutExercise(
            id=self.id,
            name=self.name,
            muscle_group=self.muscle_group,
            sets=[
                ActiveWorkoutSet(
                    id=s.id,
                    planned_reps=s.reps,
                    actual_reps=s.reps,
                    planned_weight=s.weight,
                    actual_weight=s.weight,
                    rest_time=s.rest_time,
                    order=index,
                )
                for index, s in enumerate(self.sets)
            ],
            order=self.order,
            superset_id=self.superset_id,
            superset_order=self.superset_order,
        )


class WatchRoutine(BaseModel):
    """Routine template synced from the phone."""

    model_config = _WIRE_CONFIG

    id: str
    name: str
    exercises: List[WatchExercise] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)


# =============================================================================
# Completed workout (watch -> phone)
# =============================================================================


class CompletedSet(BaseModel):
    model_config = _WIRE_CONFIG

    id: str
    planned_reps: int
    actual_reps: int
    planned_weight: float
    actual_weight: float
    rest_time: float = 0.0
    is_completed: bool
    completed_at: Optional[datetime] = None
    order: int

    @property
    def was_modified(self) -> bool:
        return self.actual_reps != self.planned_reps or self.actual_weight != self.planned_weight


class CompletedExercise(BaseModel):
    model_config = _WIRE_CONFIG

    id: str
    name: str
    muscle_group: str = ""
    sets: List[CompletedSet] = Field(default_factory=list)
    order: int
    superset_id: Optional[str] = None
    superset_order: int = 0


class CompletedWorkoutPayload(BaseModel):
    """
    Synchronization payload emitted when a workout ends on the watch.

    ``should_update_template`` asks the phone to write the actual values
    back into the routine template.
    """

    model_config = _WIRE_CONFIG

    id: str
    routine_id: str
    routine_name: str
    start_time: datetime
    end_time: datetime
    exercises: List[CompletedExercise] = Field(default_factory=list)
    should_update_template: bool = False
    healthkit_workout_id: Optional[str] = Field(default=None, alias="healthKitWorkoutId")

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def has_modified_sets(self) -> bool:
        return any(s.was_modified for e in self.exercises for s in e.sets)

    @property
    def modified_sets_count(self) -> int:
        return sum(1 for e in self.exercises for s in e.sets if s.was_modified)


# =============================================================================
# Live workout state
# =============================================================================


@dataclass
class ActiveWorkoutSet:
    """A set being performed; actual values may diverge from planned ones."""

    id: str
    planned_reps: int
    actual_reps: int
    planned_weight: float
    actual_weight: float
    rest_time: float
    order: int
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def was_modified(self) -> bool:
        return self.actual_reps != self.planned_reps or self.actual_weight != self.planned_weight

    def to_completed(self) -> CompletedSet:
        return CompletedSet(
            id=self.id,
            planned_reps=self.planned_reps,
            actual_reps=self.actual_reps,
            planned_weight=self.planned_weight,
            actual_weight=self.actual_weight,
            rest_time=self.rest_time,
            is_completed=self.is_completed,
            completed_at=self.completed_at,
            order=self.order,
        )


@dataclass
class ActiveWorkoutExercise:
    id: str
    name: str
    muscle_group: str
    sets: List[ActiveWorkoutSet] = field(default_factory=list)
    order: int = 0
    superset_id: Optional[str] = None
    superset_order: int = 0

    @property
    def completed_sets_count(self) -> int:
        return sum(1 for s in self.sets if s.is_completed)

    @property
    def is_complete(self) -> bool:
        return all(s.is_completed for s in self.sets)

    @property
    def is_in_superset(self) -> bool:
        return self.superset_id is not None

    def first_incomplete_set_index(self) -> int:
        """Index of the first incomplete set, or 0 when every set is done."""
        for index, s in enumerate(self.sets):
            if not s.is_completed:
                return index
        return 0

    def to_completed(self) -> CompletedExercise:
        return CompletedExercise(
            id=self.id,
            name=self.name,
            muscle_group=self.muscle_group,
            sets=[s.to_completed() for s in self.sets],
            order=self.order,
            superset_id=self.superset_id,
            superset_order=self.superset_order,
        )
