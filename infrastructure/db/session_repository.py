"""
Supabase Workout Session Repository Implementation.

This module implements the WorkoutSessionRepository protocol using Supabase.
Sessions live in three tables (workout_sessions -> workout_exercises ->
workout_sets) and are read back with a single nested select.
"""
from typing import List, Optional
import logging

from supabase import Client

from application.ports.session_repository import (
    SessionQuery,
    SessionStoreError,
    SortOrder,
)
from domain.converters import db_row_to_session, session_to_db_rows
from domain.models import WorkoutSession

logger = logging.getLogger(__name__)

SESSION_SELECT = "*, workout_exercises(*, workout_sets(*))"


class SupabaseWorkoutSessionRepository:
    """
    Supabase implementation of WorkoutSessionRepository.

    Scoped to one user: every read and write is filtered by ``user_id``.
    Store errors are wrapped in SessionStoreError so the service layer can
    decide how to degrade.
    """

    def __init__(self, client: Client, user_id: str):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
            user_id: Owner whose sessions this repository reads and writes
        """
        self._client = client
        self._user_id = user_id

    def fetch_sessions(self, query: SessionQuery) -> List[WorkoutSession]:
        try:
            request = self._client.table("workout_sessions") \
                .select(SESSION_SELECT) \
                .eq("user_id", self._user_id)

            if query.started_at_or_after is not None:
                request = request.gte("start_time", query.started_at_or_after.isoformat())
            if query.started_before is not None:
                request = request.lt("start_time", query.started_before.isoformat())
            if query.completed_only:
                request = request.not_.is_("end_time", "null")

            result = request \
                .order("start_time", desc=query.order is SortOrder.DESCENDING) \
                .execute()

            return [db_row_to_session(row) for row in result.data or []]

        except Exception as e:
            raise SessionStoreError(f"Failed to fetch workout sessions: {e}") from e

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        try:
            result = self._client.table("workout_sessions") \
                .select(SESSION_SELECT) \
                .eq("id", session_id) \
                .eq("user_id", self._user_id) \
                .limit(1) \
                .execute()

            if not result.data:
                return None
            return db_row_to_session(result.data[0])

        except Exception as e:
            raise SessionStoreError(f"Failed to fetch workout session {session_id}: {e}") from e

    def save_session(self, session: WorkoutSession) -> WorkoutSession:
        """
        Upsert a session with its exercises and sets.

        Rows are keyed by id, so saving the same session twice leaves one copy.
        """
        session_row, exercise_rows, set_rows = session_to_db_rows(session, self._user_id)

        try:
            self._client.table("workout_sessions").upsert(session_row).execute()
            if exercise_rows:
                self._client.table("workout_exercises").upsert(exercise_rows).execute()
            if set_rows:
                self._client.table("workout_sets").upsert(set_rows).execute()
        except Exception as e:
            raise SessionStoreError(f"Failed to save workout session {session.id}: {e}") from e

        logger.info(
            f"Workout session saved for user {self._user_id}: {session.id} "
            f"({len(exercise_rows)} exercises, {len(set_rows)} sets)"
        )
        return session
