"""
FastAPI Dependency Providers for the Streak Progress API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations, so routers
can be tested with in-memory fakes.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- The session repository is scoped to the authenticated user

Usage in routers:
    from api.deps import get_progress_service

    @router.get("/progress/exercises/{exercise_name}")
    def exercise_progress(
        exercise_name: str,
        service: ExerciseProgressService = Depends(get_progress_service),
    ):
        return service.fetch_progress_data(exercise_name, ChartTimeframe.MONTH)

Testing:
    app.dependency_overrides[get_session_repo] = lambda: FakeWorkoutSessionRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from application.ports import WorkoutSessionRepository
from backend.auth import get_current_user as _get_current_user
from backend.core.progress_service import ExerciseProgressService
from backend.settings import Settings, get_settings as _get_settings
from infrastructure import SupabaseWorkoutSessionRepository


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """Get application settings (cached instance from backend.settings)."""
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(x_api_key=x_api_key)


# =============================================================================
# Repository and Service Providers
# =============================================================================


def get_session_repo(
    user_id: str = Depends(get_current_user),
    client: Client = Depends(get_supabase_client_required),
) -> WorkoutSessionRepository:
    """
    Get WorkoutSessionRepository implementation scoped to the current user.

    Args:
        user_id: Current user ID (injected from auth)
        client: Supabase client (injected)
    """
    return SupabaseWorkoutSessionRepository(client, user_id)


def get_progress_service(
    session_repo: WorkoutSessionRepository = Depends(get_session_repo),
) -> ExerciseProgressService:
    return ExerciseProgressService(session_repo)


__all__ = [
    "get_settings",
    "get_supabase_client",
    "get_supabase_client_required",
    "get_current_user",
    "get_session_repo",
    "get_progress_service",
]
