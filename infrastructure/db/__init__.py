"""
Infrastructure Database Layer.

Supabase-backed implementations of the repository interfaces defined in
application.ports.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseWorkoutSessionRepository

    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    session_repo = SupabaseWorkoutSessionRepository(client, user_id="user_123")
"""

from infrastructure.db.session_repository import SupabaseWorkoutSessionRepository

__all__ = [
    "SupabaseWorkoutSessionRepository",
]
