"""
Converter: CompletedWorkoutPayload (from the watch) -> WorkoutSession.

The phone imports a finished watch workout as a completed session. Ids from
the payload are kept so a re-sent payload maps onto the same records.
"""

from domain.models import (
    CompletedExercise,
    CompletedWorkoutPayload,
    WorkoutExercise,
    WorkoutSession,
    WorkoutSet,
)


def _completed_exercise_to_exercise(exercise: CompletedExercise) -> WorkoutExercise:
    return WorkoutExercise(
        id=exercise.id,
        exercise_name=exercise.name,
        muscle_groups=[exercise.muscle_group] if exercise.muscle_group else [],
        order=exercise.order,
        superset_id=exercise.superset_id,
        superset_order=exercise.superset_order,
        sets=[
            WorkoutSet(
                id=s.id,
                order=s.order,
                planned_reps=s.planned_reps,
                actual_reps=s.actual_reps,
                planned_weight=s.planned_weight,
                actual_weight=s.actual_weight,
                rest_time=s.rest_time,
                is_completed=s.is_completed,
                completed_at=s.completed_at,
            )
            for s in exercise.sets
        ],
    )


def completed_payload_to_session(payload: CompletedWorkoutPayload) -> WorkoutSession:
    """
    Convert a completed watch workout into a completed WorkoutSession.

    Args:
        payload: Payload sent by the watch when the workout ended

    Returns:
        WorkoutSession with ``end_time`` set

    Raises:
        ValueError: If the workout ends before it starts
    """
    if payload.end_time < payload.start_time:
        raise ValueError("Workout end_time precedes start_time")

    return WorkoutSession(
        id=payload.id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        routine_name=payload.routine_name,
        exercises=[_completed_exercise_to_exercise(e) for e in payload.exercises],
        did_update_template=payload.should_update_template,
        healthkit_workout_id=payload.healthkit_workout_id,
    )
