"""
Derived exercise-progress entities.

None of these are persisted. They are recomputed on demand from the
WorkoutSession graph by the progress service.
"""

import calendar
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class ChartTimeframe(str, Enum):
    """Named lookback windows used to bound progress queries."""

    WEEK = "1W"
    MONTH = "1M"
    THREE_MONTHS = "3M"
    YEAR = "1Y"
    ALL = "All"

    def start_date(self, now: Optional[datetime] = None) -> datetime:
        """
        Resolve the window to its inclusive lower boundary.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            The earliest session start time included in the window.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        if self is ChartTimeframe.WEEK:
            return now - timedelta(days=7)
        if self is ChartTimeframe.MONTH:
            return _subtract_months(now, 1)
        if self is ChartTimeframe.THREE_MONTHS:
            return _subtract_months(now, 3)
        if self is ChartTimeframe.YEAR:
            return _subtract_months(now, 12)
        return datetime.min.replace(tzinfo=timezone.utc)


class ProgressMetric(str, Enum):
    """Metric plotted on a progress chart."""

    MAX_WEIGHT = "maxWeight"
    ESTIMATED_1RM = "estimated1RM"
    VOLUME = "volume"

    @property
    def unit(self) -> str:
        return "kg"


class ExerciseProgressDataPoint(BaseModel):
    """
    Snapshot of one exercise instance within one completed session.

    Never built for an instance without completed sets.
    """

    date: datetime
    max_weight: float
    estimated_1rm: float
    total_volume: float
    total_sets: int = Field(..., ge=1)
    total_reps: int
    workout_session_id: str

    def value(self, metric: ProgressMetric) -> float:
        """Value of the requested metric for this point."""
        if metric is ProgressMetric.MAX_WEIGHT:
            return self.max_weight
        if metric is ProgressMetric.ESTIMATED_1RM:
            return self.estimated_1rm
        return self.total_volume

    model_config = {"frozen": True}


class ExerciseProgressData(BaseModel):
    """
    Time series of progress snapshots for one exercise.

    ``data_points`` is ascending by session start time; trend computations
    rely on the first and last entries.
    """

    exercise_name: str
    data_points: List[ExerciseProgressDataPoint] = Field(default_factory=list)

    @property
    def personal_record(self) -> Optional[float]:
        """Highest max weight across the series."""
        if not self.data_points:
            return None
        return max(p.max_weight for p in self.data_points)

    @property
    def personal_record_1rm(self) -> Optional[float]:
        if not self.data_points:
            return None
        return max(p.estimated_1rm for p in self.data_points)

    @property
    def best_volume(self) -> Optional[float]:
        if not self.data_points:
            return None
        return max(p.total_volume for p in self.data_points)

    def progress_percentage(self, metric: ProgressMetric) -> Optional[float]:
        """
        Percentage change between the first and last point.

        Returns:
            None with fewer than two points or when the first value is zero.
        """
        if len(self.data_points) < 2:
            return None

        first_value = self.data_points[0].value(metric)
        last_value = self.data_points[-1].value(metric)

        if first_value <= 0:
            return None

        return (last_value - first_value) / first_value * 100

    @property
    def session_count(self) -> int:
        return len(self.data_points)

    @property
    def has_enough_data(self) -> bool:
        return len(self.data_points) >= 1

    @property
    def has_enough_data_for_trend(self) -> bool:
        return len(self.data_points) >= 2

    model_config = {"frozen": True}


class SetPerformance(BaseModel):
    """Reps/weight/completion of one set from a previous session."""

    reps: int
    weight: float
    is_completed: bool

    model_config = {"frozen": True}


class PreviousExercisePerformance(BaseModel):
    """
    The most recent completed session, before a cutoff, containing an exercise.

    ``sets`` is ordered by set ordinal.
    """

    date: datetime
    routine_name: str
    sets: List[SetPerformance] = Field(default_factory=list)

    def _completed(self) -> List[SetPerformance]:
        return [s for s in self.sets if s.is_completed]

    @property
    def best_set(self) -> Optional[SetPerformance]:
        """Heaviest completed set (first one wins on ties)."""
        completed = self._completed()
        if not completed:
            return None
        return max(completed, key=lambda s: s.weight)

    @property
    def total_volume(self) -> float:
        return sum(s.weight * s.reps for s in self._completed())

    @property
    def completed_sets_count(self) -> int:
        return len(self._completed())

    @property
    def total_reps(self) -> int:
        return sum(s.reps for s in self._completed())

    model_config = {"frozen": True}


class SetComparison(BaseModel):
    """A current set paired positionally with the previous session's set."""

    set_number: int = Field(..., ge=1)
    current_reps: int
    current_weight: float
    previous_reps: Optional[int] = None
    previous_weight: Optional[float] = None
    is_completed: bool

    @property
    def reps_delta(self) -> Optional[int]:
        if self.previous_reps is None:
            return None
        return self.current_reps - self.previous_reps

    @property
    def weight_delta(self) -> Optional[float]:
        if self.previous_weight is None:
            return None
        return self.current_weight - self.previous_weight

    model_config = {"frozen": True}


class CurrentExercisePerformance(BaseModel):
    """Per-set comparisons plus totals over the current session's completed sets."""

    sets: List[SetComparison] = Field(default_factory=list)
    total_volume: float = 0.0
    completed_sets_count: int = 0
    total_reps: int = 0

    model_config = {"frozen": True}


class ExerciseComparisonResult(BaseModel):
    """Session-over-session comparison for one exercise."""

    exercise_name: str
    current_performance: CurrentExercisePerformance
    previous_performance: Optional[PreviousExercisePerformance] = None

    @property
    def is_first_time(self) -> bool:
        return self.previous_performance is None

    @property
    def volume_delta(self) -> Optional[float]:
        if self.previous_performance is None:
            return None
        return self.current_performance.total_volume - self.previous_performance.total_volume

    @property
    def volume_delta_percentage(self) -> Optional[float]:
        if self.previous_performance is None:
            return None
        previous_volume = self.previous_performance.total_volume
        if previous_volume <= 0:
            return None
        return (self.current_performance.total_volume - previous_volume) / previous_volume * 100

    model_config = {"frozen": True}
