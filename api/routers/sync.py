"""
Sync router for workouts completed on the companion device.

This router contains endpoints for:
- /sync/completed-workouts - Import a workout finished on the watch
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from api.deps import get_session_repo
from application.ports import SessionStoreError, WorkoutSessionRepository
from domain.converters import completed_payload_to_session
from domain.models import CompletedWorkoutPayload

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sync",
    tags=["Device Sync"],
)


class CompletedWorkoutSyncResponse(BaseModel):
    success: bool = True
    session_id: str
    exercise_count: int
    modified_sets_count: int
    should_update_template: bool


@router.post(
    "/completed-workouts",
    response_model=CompletedWorkoutSyncResponse,
    status_code=status.HTTP_201_CREATED,
)
def sync_completed_workout(
    payload: CompletedWorkoutPayload,
    session_repo: WorkoutSessionRepository = Depends(get_session_repo),
) -> CompletedWorkoutSyncResponse:
    """
    Store a workout completed on the watch as a completed session.

    Payload ids are kept, so re-sending the same workout overwrites the
    stored copy instead of duplicating it. The template-update flag is
    recorded on the session; applying it to the routine is the phone's job.
    """
    try:
        session = completed_payload_to_session(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        saved = session_repo.save_session(session)
    except SessionStoreError as e:
        logger.exception(f"Failed to store completed workout {payload.id}: {e}")
        raise HTTPException(status_code=503, detail="Failed to store workout session")

    logger.info(
        f"Imported completed workout {saved.id} ({payload.routine_name}): "
        f"{len(payload.exercises)} exercises, {payload.modified_sets_count} modified sets"
    )
    return CompletedWorkoutSyncResponse(
        session_id=saved.id,
        exercise_count=len(saved.exercises),
        modified_sets_count=payload.modified_sets_count,
        should_update_template=payload.should_update_template,
    )
