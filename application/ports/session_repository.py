"""
Workout Session Repository Interface (Port).

This module defines the abstract interface for reading (and importing)
workout sessions. The progress engine depends only on the query contract:
"fetch all sessions matching a start-time/completion predicate, sorted by
start time".
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol

from domain.models import WorkoutSession


class SessionStoreError(Exception):
    """Raised by repositories when the underlying store query fails."""


class SortOrder(str, Enum):
    """Sort direction on session start time."""

    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class SessionQuery:
    """
    Predicate and ordering for a session fetch.

    All set conditions are combined with AND.

    Attributes:
        started_at_or_after: Inclusive lower bound on start_time
        started_before: Exclusive upper bound on start_time
        completed_only: Only sessions whose end_time is set
        order: Sort direction on start_time
    """
    started_at_or_after: Optional[datetime] = None
    started_before: Optional[datetime] = None
    completed_only: bool = True
    order: SortOrder = SortOrder.ASCENDING

    def matches(self, session: WorkoutSession) -> bool:
        """Evaluate the predicate against an in-memory session."""
        if self.completed_only and not session.is_completed:
            return False
        if self.started_at_or_after is not None and session.start_time < self.started_at_or_after:
            return False
        if self.started_before is not None and session.start_time >= self.started_before:
            return False
        return True


class WorkoutSessionRepository(Protocol):
    """
    Abstract interface for workout session storage.

    Implementations must return fresh lists on every call; callers never
    mutate the returned sessions.
    """

    def fetch_sessions(self, query: SessionQuery) -> List[WorkoutSession]:
        """
        Fetch sessions matching a predicate, sorted by start time.

        Args:
            query: Predicate and sort order

        Returns:
            Matching sessions in the requested order

        Raises:
            SessionStoreError: If the store cannot be queried
        """
        ...

    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        """
        Get a single session by ID.

        Args:
            session_id: Session UUID

        Returns:
            The session, or None if not found

        Raises:
            SessionStoreError: If the store cannot be queried
        """
        ...

    def save_session(self, session: WorkoutSession) -> WorkoutSession:
        """
        Persist a session with its exercises and sets.

        Args:
            session: Session to store

        Returns:
            The stored session

        Raises:
            SessionStoreError: If the write fails
        """
        ...
