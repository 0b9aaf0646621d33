"""
Tests for infrastructure adapter implementations.

These tests verify the Supabase session repository builds the right query
chain and converts rows, and that the messaging adapters behave as
fire-and-forget collaborators. No database or network is used.
"""
import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from application.ports import SessionQuery, SessionStoreError, SortOrder
from domain.models import CompletedWorkoutPayload
from infrastructure.db import SupabaseWorkoutSessionRepository
from infrastructure.messaging import HttpMessageChannel, LoopNotificationScheduler
from tests.fakes import make_session

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit


CHAIN_METHODS = ("select", "eq", "gte", "lt", "is_", "order", "limit", "upsert")


def _mock_client(rows=None, error=None):
    """Supabase client whose fluent query chain returns itself."""
    query = MagicMock()
    for name in CHAIN_METHODS:
        getattr(query, name).return_value = query
    query.not_ = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=rows or [])

    client = MagicMock()
    client.table.return_value = query
    return client, query


def _row(session_id="s-1", start="2024-05-01T18:00:00+00:00"):
    return {
        "id": session_id,
        "start_time": start,
        "end_time": "2024-05-01T19:00:00+00:00",
        "routine_name": "Legs",
        "workout_exercises": [
            {
                "id": "e-1",
                "exercise_name": "Squat",
                "order_index": 0,
                "workout_sets": [
                    {"id": "set-1", "set_order": 0, "actual_reps": 5, "actual_weight": 100, "is_completed": True},
                ],
            }
        ],
    }


# ============================================================================
# Session repository
# ============================================================================


class TestSupabaseWorkoutSessionRepository:

    def test_fetch_builds_predicate(self):
        client, query = _mock_client([_row()])
        repo = SupabaseWorkoutSessionRepository(client, "user-1")
        lower = datetime(2024, 4, 1, tzinfo=timezone.utc)
        upper = datetime(2024, 6, 1, tzinfo=timezone.utc)

        sessions = repo.fetch_sessions(SessionQuery(
            started_at_or_after=lower,
            started_before=upper,
            completed_only=True,
            order=SortOrder.DESCENDING,
        ))

        client.table.assert_called_with("workout_sessions")
        query.eq.assert_called_with("user_id", "user-1")
        query.gte.assert_called_once_with("start_time", lower.isoformat())
        query.lt.assert_called_once_with("start_time", upper.isoformat())
        query.is_.assert_called_once_with("end_time", "null")
        query.order.assert_called_once_with("start_time", desc=True)
        assert sessions[0].exercises[0].sets[0].actual_weight == 100

    def test_fetch_without_bounds(self):
        client, query = _mock_client([])
        repo = SupabaseWorkoutSessionRepository(client, "user-1")

        assert repo.fetch_sessions(SessionQuery(completed_only=False)) == []

        query.gte.assert_not_called()
        query.lt.assert_not_called()
        query.is_.assert_not_called()
        query.order.assert_called_once_with("start_time", desc=False)

    def test_fetch_error_wrapped(self):
        client, _ = _mock_client(error=RuntimeError("connection reset"))
        repo = SupabaseWorkoutSessionRepository(client, "user-1")

        with pytest.raises(SessionStoreError):
            repo.fetch_sessions(SessionQuery())

    def test_get_session(self):
        client, query = _mock_client([_row("s-9")])
        repo = SupabaseWorkoutSessionRepository(client, "user-1")

        session = repo.get_session("s-9")

        assert session.id == "s-9"
        query.limit.assert_called_once_with(1)

    def test_get_missing_session(self):
        client, _ = _mock_client([])
        repo = SupabaseWorkoutSessionRepository(client, "user-1")

        assert repo.get_session("missing") is None

    def test_save_upserts_all_tables(self):
        client, query = _mock_client([])
        repo = SupabaseWorkoutSessionRepository(client, "user-1")
        session = make_session(exercises=[("Squat", [(100, 5), (100, 5)])])

        assert repo.save_session(session) is session

        tables = [c.args[0] for c in client.table.call_args_list]
        assert tables == ["workout_sessions", "workout_exercises", "workout_sets"]
        session_row = query.upsert.call_args_list[0].args[0]
        assert session_row["user_id"] == "user-1"
        assert len(query.upsert.call_args_list[2].args[0]) == 2

    def test_save_error_wrapped(self):
        client, _ = _mock_client(error=RuntimeError("permission denied"))
        repo = SupabaseWorkoutSessionRepository(client, "user-1")

        with pytest.raises(SessionStoreError):
            repo.save_session(make_session())


# ============================================================================
# HTTP message channel
# ============================================================================


def _payload():
    start = datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc)
    return CompletedWorkoutPayload(
        id="w-1",
        routine_id="r-1",
        routine_name="Push",
        start_time=start,
        end_time=start.replace(hour=19),
    )


class TestHttpMessageChannel:

    @pytest.mark.asyncio
    async def test_posts_camel_case_payload(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"success": True})

        client = httpx.AsyncClient(base_url="http://phone.local", transport=httpx.MockTransport(handler))
        channel = HttpMessageChannel("http://phone.local", client=client)

        await channel.send(_payload())
        await channel.close()

        [request] = requests
        assert request.url.path == "/sync/completed-workouts"
        assert b'"routineId":"r-1"' in request.content.replace(b" ", b"")

    @pytest.mark.asyncio
    async def test_api_key_header(self):
        channel = HttpMessageChannel("http://phone.local", api_key="sk_test:user-1")

        assert channel._client.headers["X-API-Key"] == "sk_test:user-1"
        await channel.close()

    @pytest.mark.asyncio
    async def test_rejection_is_logged_not_raised(self, caplog):
        client = httpx.AsyncClient(
            base_url="http://phone.local",
            transport=httpx.MockTransport(lambda request: httpx.Response(503, text="down")),
        )
        channel = HttpMessageChannel("http://phone.local", client=client)

        with caplog.at_level("WARNING"):
            await channel.send(_payload())

        assert "rejected" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_error_is_logged_not_raised(self, caplog):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = httpx.AsyncClient(base_url="http://phone.local", transport=httpx.MockTransport(handler))
        channel = HttpMessageChannel("http://phone.local", client=client)

        with caplog.at_level("ERROR"):
            await channel.send(_payload())

        assert "failed" in caplog.text

    @pytest.mark.asyncio
    async def test_slow_phone_does_not_stall_event_loop(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.2)
            return httpx.Response(201)

        client = httpx.AsyncClient(base_url="http://phone.local", transport=httpx.MockTransport(handler))
        channel = HttpMessageChannel("http://phone.local", client=client)

        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.01)
                ticks += 1

        ticker_task = asyncio.create_task(ticker())
        await channel.send(_payload())
        ticker_task.cancel()
        await channel.close()

        assert ticks >= 5


# ============================================================================
# Notification scheduler
# ============================================================================


class TestLoopNotificationScheduler:

    @pytest.mark.asyncio
    async def test_fires_once(self):
        delivered = []
        scheduler = LoopNotificationScheduler(deliver=lambda title, body: delivered.append(title))

        scheduler.schedule("rest-timer", "Rest Complete", "Go", 0.001)
        await asyncio.sleep(0.02)

        assert delivered == ["Rest Complete"]
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_reschedule_replaces_pending(self):
        delivered = []
        scheduler = LoopNotificationScheduler(deliver=lambda title, body: delivered.append(body))

        scheduler.schedule("rest-timer", "Rest", "first", 0.001)
        scheduler.schedule("rest-timer", "Rest", "second", 0.001)
        await asyncio.sleep(0.02)

        assert delivered == ["second"]

    @pytest.mark.asyncio
    async def test_cancel(self):
        delivered = []
        scheduler = LoopNotificationScheduler(deliver=lambda title, body: delivered.append(body))

        scheduler.schedule("rest-timer", "Rest", "body", 0.001)
        scheduler.cancel("rest-timer")
        scheduler.cancel("rest-timer")
        await asyncio.sleep(0.02)

        assert delivered == []
