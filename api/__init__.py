"""
API package for the Streak Progress API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_current_user,
    get_session_repo,
    get_progress_service,
)

__all__ = [
    "get_settings",
    "get_supabase_client",
    "get_supabase_client_required",
    "get_current_user",
    "get_session_repo",
    "get_progress_service",
]
