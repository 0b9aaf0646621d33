"""
Infrastructure Layer for the Streak Progress API.

Concrete implementations of the application ports:
- db/: Supabase session storage
- messaging/: phone message channel and local notification scheduler
"""

from infrastructure.db import SupabaseWorkoutSessionRepository
from infrastructure.messaging import HttpMessageChannel, LoopNotificationScheduler

__all__ = [
    "SupabaseWorkoutSessionRepository",
    "HttpMessageChannel",
    "LoopNotificationScheduler",
]
