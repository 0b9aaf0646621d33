"""
Converters: Database row format <-> domain WorkoutSession.

Provides bidirectional conversion between Supabase rows and the
WorkoutSession graph.

Database schema:
- workout_sessions: id, user_id, start_time, end_time, routine_name,
  did_update_template, healthkit_workout_id
- workout_exercises: id, session_id, exercise_name, muscle_groups (text[]),
  order_index, superset_id, superset_order
- workout_sets: id, exercise_id, set_order, planned_reps, actual_reps,
  planned_weight, actual_weight, rest_time, is_completed, completed_at

Reads use a nested select, so a session row carries its
``workout_exercises`` and each exercise row its ``workout_sets``.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import re

from domain.models import WorkoutExercise, WorkoutSession, WorkoutSet

# PostgREST trims trailing zeros from fractional seconds
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$|$)")


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse datetime from various formats."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            # Postgres may emit a Z suffix
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def db_row_to_set(row: Dict[str, Any]) -> WorkoutSet:
    return WorkoutSet(
        id=row["id"],
        order=row.get("set_order") or 0,
        planned_reps=row.get("planned_reps") or 0,
        actual_reps=row.get("actual_reps") or 0,
        planned_weight=row.get("planned_weight") or 0.0,
        actual_weight=row.get("actual_weight") or 0.0,
        rest_time=row.get("rest_time") or 0.0,
        is_completed=bool(row.get("is_completed", False)),
        completed_at=_parse_datetime(row.get("completed_at")),
    )


def db_row_to_exercise(row: Dict[str, Any]) -> WorkoutExercise:
    return WorkoutExercise(
        id=row["id"],
        exercise_name=row["exercise_name"],
        muscle_groups=row.get("muscle_groups") or [],
        order=row.get("order_index") or 0,
        superset_id=row.get("superset_id"),
        superset_order=row.get("superset_order") or 0,
        sets=[db_row_to_set(s) for s in row.get("workout_sets") or []],
    )


def db_row_to_session(row: Dict[str, Any]) -> WorkoutSession:
    """
    Convert a nested database row to a domain WorkoutSession.

    Args:
        row: workout_sessions row with embedded workout_exercises/workout_sets

    Returns:
        WorkoutSession domain model

    Raises:
        ValueError: If start_time is missing or unparseable

    Examples:
        >>> row = {
        ...     "id": "s-1",
        ...     "start_time": "2024-01-15T18:00:00Z",
        ...     "end_time": "2024-01-15T19:00:00Z",
        ...     "routine_name": "Leg Day",
        ...     "workout_exercises": [
        ...         {"id": "e-1", "exercise_name": "Squat", "order_index": 0, "workout_sets": []}
        ...     ],
        ... }
        >>> db_row_to_session(row).exercises[0].exercise_name
        'Squat'
    """
    start_time = _parse_datetime(row.get("start_time"))
    if start_time is None:
        raise ValueError("Database row missing start_time")

    return WorkoutSession(
        id=row["id"],
        start_time=start_time,
        end_time=_parse_datetime(row.get("end_time")),
        routine_name=row.get("routine_name") or "",
        exercises=[db_row_to_exercise(e) for e in row.get("workout_exercises") or []],
        did_update_template=bool(row.get("did_update_template", False)),
        healthkit_workout_id=row.get("healthkit_workout_id"),
    )


def session_to_db_rows(
    session: WorkoutSession,
    user_id: str,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Flatten a WorkoutSession into rows for the three session tables.

    Args:
        session: Session to persist
        user_id: Owner of the session

    Returns:
        Tuple of (session_row, exercise_rows, set_rows)
    """
    session_row: Dict[str, Any] = {
        "id": session.id,
        "user_id": user_id,
        "start_time": session.start_time.isoformat(),
        "end_time": _isoformat(session.end_time),
        "routine_name": session.routine_name,
        "did_update_template": session.did_update_template,
        "healthkit_workout_id": session.healthkit_workout_id,
    }

    exercise_rows: List[Dict[str, Any]] = []
    set_rows: List[Dict[str, Any]] = []

    for exercise in session.exercises:
        exercise_rows.append({
            "id": exercise.id,
            "session_id": session.id,
            "exercise_name": exercise.exercise_name,
            "muscle_groups": list(exercise.muscle_groups),
            "order_index": exercise.order,
            "superset_id": exercise.superset_id,
            "superset_order": exercise.superset_order,
        })
        for s in exercise.sets:
            set_rows.append({
                "id": s.id,
                "exercise_id": exercise.id,
                "set_order": s.order,
                "planned_reps": s.planned_reps,
                "actual_reps": s.actual_reps,
                "planned_weight": s.planned_weight,
                "actual_weight": s.actual_weight,
                "rest_time": s.rest_time,
                "is_completed": s.is_completed,
                "completed_at": _isoformat(s.completed_at),
            })

    return session_row, exercise_rows, set_rows
