"""
Progress router for exercise history and session comparison.

This router provides endpoints for:
- Exercise progress series with personal records and trend
- Previous performance of an exercise before a date
- Session-over-session comparison
- Superset display labels for a session
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, Field

from api.deps import get_progress_service
from backend.core.progress_service import ExerciseProgressService
from backend.core.superset_labels import (
    SupersetLabelOverflowError,
    superset_color,
    superset_labels,
)
from domain.models import (
    ChartTimeframe,
    ExerciseComparisonResult,
    ExerciseProgressData,
    ExerciseProgressDataPoint,
    PreviousExercisePerformance,
    ProgressMetric,
    SetPerformance,
)

router = APIRouter(
    prefix="/progress",
    tags=["Progress"],
)


# =============================================================================
# Response Models
# =============================================================================


class SetPerformanceResponse(BaseModel):
    reps: int
    weight: float
    is_completed: bool


class PreviousPerformanceResponse(BaseModel):
    """Response model for the previous performance of an exercise."""
    date: datetime
    routine_name: str
    sets: List[SetPerformanceResponse] = Field(default_factory=list)
    best_set: Optional[SetPerformanceResponse] = None
    total_volume: float
    completed_sets_count: int
    total_reps: int


class ExerciseProgressResponse(BaseModel):
    """Response model for the exercise progress endpoint."""
    exercise_name: str
    timeframe: ChartTimeframe
    unit: str
    data_points: List[ExerciseProgressDataPoint] = Field(default_factory=list)
    personal_record: Optional[float] = None
    personal_record_1rm: Optional[float] = None
    best_volume: Optional[float] = None
    progress_percentage: Dict[ProgressMetric, Optional[float]] = Field(default_factory=dict)
    session_count: int
    has_enough_data: bool
    has_enough_data_for_trend: bool


class SetComparisonResponse(BaseModel):
    set_number: int
    current_reps: int
    current_weight: float
    previous_reps: Optional[int] = None
    previous_weight: Optional[float] = None
    reps_delta: Optional[int] = None
    weight_delta: Optional[float] = None
    is_completed: bool


class ExerciseComparisonResponse(BaseModel):
    """Response model for one exercise in a session comparison."""
    exercise_name: str
    sets: List[SetComparisonResponse] = Field(default_factory=list)
    total_volume: float
    completed_sets_count: int
    total_reps: int
    previous_performance: Optional[PreviousPerformanceResponse] = None
    is_first_time: bool
    volume_delta: Optional[float] = None
    volume_delta_percentage: Optional[float] = None


class SessionComparisonResponse(BaseModel):
    session_id: str
    exercises: List[ExerciseComparisonResponse] = Field(default_factory=list)


class SupersetLabel(BaseModel):
    superset_id: str
    label: str
    color: str


class SupersetLabelsResponse(BaseModel):
    session_id: str
    labels: List[SupersetLabel] = Field(default_factory=list)


# =============================================================================
# Conversion helpers
# =============================================================================


def _set_response(s: SetPerformance) -> SetPerformanceResponse:
    return SetPerformanceResponse(reps=s.reps, weight=s.weight, is_completed=s.is_completed)


def _previous_response(previous: PreviousExercisePerformance) -> PreviousPerformanceResponse:
    best = previous.best_set
    return PreviousPerformanceResponse(
        date=previous.date,
        routine_name=previous.routine_name,
        sets=[_set_response(s) for s in previous.sets],
        best_set=_set_response(best) if best is not None else None,
        total_volume=previous.total_volume,
        completed_sets_count=previous.completed_sets_count,
        total_reps=previous.total_reps,
    )


def _progress_response(
    data: ExerciseProgressData,
    timeframe: ChartTimeframe,
) -> ExerciseProgressResponse:
    return ExerciseProgressResponse(
        exercise_name=data.exercise_name,
        timeframe=timeframe,
        unit=ProgressMetric.MAX_WEIGHT.unit,
        data_points=data.data_points,
        personal_record=data.personal_record,
        personal_record_1rm=data.personal_record_1rm,
        best_volume=data.best_volume,
        progress_percentage={m: data.progress_percentage(m) for m in ProgressMetric},
        session_count=data.session_count,
        has_enough_data=data.has_enough_data,
        has_enough_data_for_trend=data.has_enough_data_for_trend,
    )


def _comparison_response(result: ExerciseComparisonResult) -> ExerciseComparisonResponse:
    current = result.current_performance
    previous = result.previous_performance
    return ExerciseComparisonResponse(
        exercise_name=result.exercise_name,
        sets=[
            SetComparisonResponse(
                set_number=s.set_number,
                current_reps=s.current_reps,
                current_weight=s.current_weight,
                previous_reps=s.previous_reps,
                previous_weight=s.previous_weight,
                reps_delta=s.reps_delta,
                weight_delta=s.weight_delta,
                is_completed=s.is_completed,
            )
            for s in current.sets
        ],
        total_volume=current.total_volume,
        completed_sets_count=current.completed_sets_count,
        total_reps=current.total_reps,
        previous_performance=_previous_response(previous) if previous is not None else None,
        is_first_time=result.is_first_time,
        volume_delta=result.volume_delta,
        volume_delta_percentage=result.volume_delta_percentage,
    )


def _as_utc(moment: datetime) -> datetime:
    """Treat naive query datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/exercises/{exercise_name}", response_model=ExerciseProgressResponse)
async def get_exercise_progress(
    exercise_name: str = Path(..., min_length=1, description="Exercise name (case-insensitive)"),
    timeframe: ChartTimeframe = Query(ChartTimeframe.MONTH, description="Lookback window"),
    service: ExerciseProgressService = Depends(get_progress_service),
) -> ExerciseProgressResponse:
    """
    Get the progress series of an exercise.

    One data point per completed session containing the exercise with at
    least one completed set, ascending by session start time.
    """
    data = service.fetch_progress_data(exercise_name, timeframe)
    return _progress_response(data, timeframe)


@router.get(
    "/exercises/{exercise_name}/previous",
    response_model=PreviousPerformanceResponse,
)
async def get_previous_performance(
    exercise_name: str = Path(..., min_length=1, description="Exercise name (case-insensitive)"),
    before: Optional[datetime] = Query(None, description="Exclusive cutoff (defaults to now)"),
    service: ExerciseProgressService = Depends(get_progress_service),
) -> PreviousPerformanceResponse:
    """Get the most recent completed performance of an exercise before a date."""
    cutoff = _as_utc(before) if before is not None else datetime.now(timezone.utc)

    previous = service.previous_performance(exercise_name, cutoff)
    if previous is None:
        raise HTTPException(
            status_code=404,
            detail=f"No previous performance found for exercise '{exercise_name}'",
        )
    return _previous_response(previous)


@router.get(
    "/sessions/{session_id}/comparison",
    response_model=SessionComparisonResponse,
)
async def get_session_comparison(
    session_id: str = Path(..., description="Workout session ID"),
    service: ExerciseProgressService = Depends(get_progress_service),
) -> SessionComparisonResponse:
    """Compare every exercise of a session with its previous performance."""
    results = service.compare_session(session_id)
    if results is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    return SessionComparisonResponse(
        session_id=session_id,
        exercises=[_comparison_response(r) for r in results],
    )


@router.get(
    "/sessions/{session_id}/superset-labels",
    response_model=SupersetLabelsResponse,
)
async def get_superset_labels(
    session_id: str = Path(..., description="Workout session ID"),
    service: ExerciseProgressService = Depends(get_progress_service),
) -> SupersetLabelsResponse:
    """Get the display letter and colour of each superset group in a session."""
    session = service.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    try:
        labels = superset_labels(session.exercises)
    except SupersetLabelOverflowError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SupersetLabelsResponse(
        session_id=session_id,
        labels=[
            SupersetLabel(superset_id=group_id, label=letter, color=superset_color(letter))
            for group_id, letter in labels.items()
        ],
    )
