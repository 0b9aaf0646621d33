"""
Domain converters for the workout session graph.

- db_row_to_session: Database row (from Supabase) -> WorkoutSession
- session_to_db_rows: WorkoutSession -> Database rows (for persistence)
- completed_payload_to_session: CompletedWorkoutPayload (from the watch) -> WorkoutSession

All converters are pure functions with no side effects.
"""

from domain.converters.completed_workout import completed_payload_to_session
from domain.converters.db_converters import db_row_to_session, session_to_db_rows

__all__ = [
    "db_row_to_session",
    "session_to_db_rows",
    "completed_payload_to_session",
]
