"""
Exercise Progress Service.

Business logic for reviewing historical performance of an exercise:
- Progress time series (max weight, estimated 1RM, volume) over a timeframe
- Previous performance lookup before a cutoff date
- Session-over-session comparison with positional set alignment

Store failures degrade to "no data": they are logged, never raised, so
callers cannot tell an empty history from an unavailable store.
"""
from datetime import datetime
from typing import List, Optional
import logging

from application.ports.session_repository import (
    SessionQuery,
    SessionStoreError,
    SortOrder,
    WorkoutSessionRepository,
)
from backend.core import metrics
from domain.models import (
    ChartTimeframe,
    CurrentExercisePerformance,
    ExerciseComparisonResult,
    ExerciseProgressData,
    ExerciseProgressDataPoint,
    PreviousExercisePerformance,
    SetComparison,
    SetPerformance,
    WorkoutSession,
)

logger = logging.getLogger(__name__)


class ExerciseProgressService:
    """
    Service for exercise progress aggregation and comparison.

    Every call allocates its own result and never mutates the sessions it
    reads, so one instance can be shared between concurrent callers.
    """

    def __init__(self, session_repo: WorkoutSessionRepository):
        """
        Initialize the progress service.

        Args:
            session_repo: Repository for completed workout sessions
        """
        self._session_repo = session_repo

    def _fetch(self, query: SessionQuery) -> Optional[List[WorkoutSession]]:
        try:
            return self._session_repo.fetch_sessions(query)
        except SessionStoreError as e:
            logger.exception(f"Error fetching workout sessions: {e}")
            return None

    # -------------------------------------------------------------------------
    # Progress time series
    # -------------------------------------------------------------------------

    def fetch_progress_data(
        self,
        exercise_name: str,
        timeframe: ChartTimeframe,
        *,
        now: Optional[datetime] = None,
    ) -> ExerciseProgressData:
        """
        Build the progress series for an exercise within a timeframe.

        One data point is emitted per matching exercise instance that has at
        least one completed set; instances without completed sets are skipped.

        Args:
            exercise_name: Exercise name (case-insensitive match)
            timeframe: Lookback window
            now: Reference time for the window (defaults to current UTC time)

        Returns:
            ExerciseProgressData ordered by session start time ascending;
            empty if nothing matches or the store query fails
        """
        query = SessionQuery(
            started_at_or_after=timeframe.start_date(now),
            completed_only=True,
            order=SortOrder.ASCENDING,
        )
        sessions = self._fetch(query)
        if sessions is None:
            return ExerciseProgressData(exercise_name=exercise_name, data_points=[])

        data_points: List[ExerciseProgressDataPoint] = []
        for session in sessions:
            for exercise in session.exercises:
                if not exercise.matches_name(exercise_name):
                    continue

                completed = exercise.completed_sets()
                if not completed:
                    continue

                data_points.append(ExerciseProgressDataPoint(
                    date=session.start_time,
                    max_weight=metrics.max_weight(completed),
                    estimated_1rm=metrics.estimated_one_rep_max(completed),
                    total_volume=metrics.total_volume(completed),
                    total_sets=metrics.total_sets(completed),
                    total_reps=metrics.total_reps(completed),
                    workout_session_id=session.id,
                ))

        logger.debug(
            f"Progress for '{exercise_name}' ({timeframe.value}): "
            f"{len(data_points)} points from {len(sessions)} sessions"
        )
        return ExerciseProgressData(exercise_name=exercise_name, data_points=data_points)

    # -------------------------------------------------------------------------
    # Previous performance
    # -------------------------------------------------------------------------

    def previous_performance(
        self,
        exercise_name: str,
        before: datetime,
    ) -> Optional[PreviousExercisePerformance]:
        """
        Find the most recent completed session before a date containing an exercise.

        When a session contains the exercise more than once, the first
        instance in document order is used.

        Args:
            exercise_name: Exercise name (case-insensitive match)
            before: Exclusive cutoff on session start time

        Returns:
            PreviousExercisePerformance, or None if there is no prior history
            or the store query fails
        """
        query = SessionQuery(
            started_before=before,
            completed_only=True,
            order=SortOrder.DESCENDING,
        )
        sessions = self._fetch(query)
        if sessions is None:
            return None

        for session in sessions:
            exercise = next(
                (e for e in session.exercises if e.matches_name(exercise_name)),
                None,
            )
            if exercise is None:
                continue

            return PreviousExercisePerformance(
                date=session.start_time,
                routine_name=session.routine_name,
                sets=[
                    SetPerformance(
                        reps=s.actual_reps,
                        weight=s.actual_weight,
                        is_completed=s.is_completed,
                    )
                    for s in exercise.sorted_sets()
                ],
            )

        return None

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare_with_previous(self, session: WorkoutSession) -> List[ExerciseComparisonResult]:
        """
        Compare each exercise of a session with its previous performance.

        The session's own start time is the cutoff, so a session is never
        compared against itself or anything later. Sets are paired by index
        after sorting by ordinal; surplus sets on either side have no
        counterpart.

        Args:
            session: Session to compare

        Returns:
            One comparison per exercise, in exercise ordinal order
        """
        results: List[ExerciseComparisonResult] = []

        for exercise in session.sorted_exercises():
            previous = self.previous_performance(exercise.exercise_name, session.start_time)
            previous_sets = previous.sets if previous is not None else []

            comparisons: List[SetComparison] = []
            for index, current in enumerate(exercise.sorted_sets()):
                counterpart = previous_sets[index] if index < len(previous_sets) else None
                comparisons.append(SetComparison(
                    set_number=index + 1,
                    current_reps=current.actual_reps,
                    current_weight=current.actual_weight,
                    previous_reps=counterpart.reps if counterpart else None,
                    previous_weight=counterpart.weight if counterpart else None,
                    is_completed=current.is_completed,
                ))

            results.append(ExerciseComparisonResult(
                exercise_name=exercise.exercise_name,
                current_performance=CurrentExercisePerformance(
                    sets=comparisons,
                    total_volume=metrics.total_volume(exercise.sets),
                    completed_sets_count=metrics.total_sets(exercise.sets),
                    total_reps=metrics.total_reps(exercise.sets),
                ),
                previous_performance=previous,
            ))

        return results

    def compare_session(self, session_id: str) -> Optional[List[ExerciseComparisonResult]]:
        """
        Load a session by ID and compare it with previous performances.

        Args:
            session_id: Session UUID

        Returns:
            Comparison list, or None if the session does not exist or
            cannot be loaded
        """
        session = self.get_session(session_id)
        if session is None:
            return None
        return self.compare_with_previous(session)

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        """Load a single session; None when missing or the store fails."""
        try:
            return self._session_repo.get_session(session_id)
        except SessionStoreError as e:
            logger.exception(f"Error fetching workout session {session_id}: {e}")
            return None
