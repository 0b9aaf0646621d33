"""
Integration tests for Progress API endpoints.

Tests cover:
- Exercise progress series with summary
- Previous performance lookup
- Session comparison
- Superset labels
- Authentication and store availability
"""
import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from api.deps import get_session_repo, get_supabase_client
from backend.settings import get_settings
from domain.models import WorkoutExercise, WorkoutSession
from tests.fakes import FakeWorkoutSessionRepository, make_session

pytestmark = pytest.mark.integration


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def session_repo(now):
    """Fake repository seeded with three weeks of bench press."""
    return FakeWorkoutSessionRepository([
        make_session(now=now, days_ago=21, session_id="s-1", routine_name="Push A",
                     exercises=[("Bench Press", [(80, 8), (80, 8)])]),
        make_session(now=now, days_ago=14, session_id="s-2", routine_name="Push B",
                     exercises=[("Bench Press", [(85, 6), (85, 6)])]),
        make_session(now=now, days_ago=7, session_id="s-3", routine_name="Push A",
                     exercises=[("Bench Press", [(90, 5), (90, 5), (90, 4)]), ("Dips", [(0, 12)])]),
    ])


@pytest.fixture
def client(test_app, override_deps, session_repo):
    override_deps(get_session_repo, session_repo)
    return TestClient(test_app)


# =============================================================================
# Progress series
# =============================================================================


class TestExerciseProgress:

    def test_progress_series(self, client):
        response = client.get("/progress/exercises/bench press", params={"timeframe": "1M"})

        assert response.status_code == 200
        data = response.json()
        assert data["timeframe"] == "1M"
        assert data["unit"] == "kg"
        assert [p["max_weight"] for p in data["data_points"]] == [80, 85, 90]
        assert data["personal_record"] == 90
        assert data["session_count"] == 3
        assert data["has_enough_data_for_trend"] is True
        assert data["progress_percentage"]["maxWeight"] == pytest.approx(12.5)

    def test_default_timeframe_is_one_month(self, client):
        data = client.get("/progress/exercises/Bench Press").json()

        assert data["timeframe"] == "1M"

    def test_week_excludes_older_sessions(self, client):
        data = client.get("/progress/exercises/Bench Press", params={"timeframe": "1W"}).json()

        assert data["session_count"] == 1

    def test_unknown_exercise_is_empty(self, client):
        data = client.get("/progress/exercises/Deadlift").json()

        assert data["data_points"] == []
        assert data["personal_record"] is None
        assert data["has_enough_data"] is False

    def test_invalid_timeframe(self, client):
        response = client.get("/progress/exercises/Bench Press", params={"timeframe": "2W"})

        assert response.status_code == 422

    def test_store_failure_degrades_to_empty(self, client, session_repo):
        session_repo.fail = True

        response = client.get("/progress/exercises/Bench Press")

        assert response.status_code == 200
        assert response.json()["data_points"] == []


# =============================================================================
# Previous performance
# =============================================================================


class TestPreviousPerformance:

    def test_previous_before_date(self, client, now):
        before = (now - timedelta(days=10)).isoformat()

        response = client.get("/progress/exercises/Bench Press/previous", params={"before": before})

        assert response.status_code == 200
        data = response.json()
        assert data["routine_name"] == "Push B"
        assert data["best_set"]["weight"] == 85
        assert data["total_volume"] == pytest.approx(1020.0)

    def test_defaults_to_now(self, client):
        data = client.get("/progress/exercises/Bench Press/previous").json()

        assert data["completed_sets_count"] == 3

    def test_no_history_is_404(self, client):
        response = client.get("/progress/exercises/Deadlift/previous")

        assert response.status_code == 404


# =============================================================================
# Comparison
# =============================================================================


class TestSessionComparison:

    def test_comparison(self, client):
        response = client.get("/progress/sessions/s-3/comparison")

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == "s-3"
        bench, dips = data["exercises"]
        assert bench["exercise_name"] == "Bench Press"
        assert bench["is_first_time"] is False
        assert [s["weight_delta"] for s in bench["sets"]] == [5, 5, None]
        assert bench["previous_performance"]["routine_name"] == "Push B"
        assert dips["is_first_time"] is True
        assert dips["volume_delta"] is None

    def test_unknown_session_is_404(self, client):
        assert client.get("/progress/sessions/missing/comparison").status_code == 404


# =============================================================================
# Superset labels
# =============================================================================


class TestSupersetLabels:

    def test_labels(self, client, session_repo, now):
        session_repo.seed([WorkoutSession(
            id="s-super",
            start_time=now,
            end_time=now + timedelta(hours=1),
            exercises=[
                WorkoutExercise(exercise_name="Curl", order=0, superset_id="g-arms"),
                WorkoutExercise(exercise_name="Pushdown", order=1, superset_id="g-arms"),
                WorkoutExercise(exercise_name="Squat", order=2),
                WorkoutExercise(exercise_name="Lunge", order=3, superset_id="g-legs"),
            ],
        )])

        response = client.get("/progress/sessions/s-super/superset-labels")

        assert response.status_code == 200
        labels = response.json()["labels"]
        assert [(label["superset_id"], label["label"]) for label in labels] == [("g-arms", "A"), ("g-legs", "B")]
        assert labels[0]["color"].startswith("#")

    def test_unknown_session_is_404(self, client):
        assert client.get("/progress/sessions/missing/superset-labels").status_code == 404


# =============================================================================
# Auth and availability
# =============================================================================


class TestAuthAndAvailability:

    @pytest.fixture
    def raw_client(self, test_app, monkeypatch):
        """Client without the repository override, so auth and the DB provider run."""
        monkeypatch.setenv("API_KEYS", "sk_test_key")
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        get_settings.cache_clear()
        get_supabase_client.cache_clear()
        yield TestClient(test_app)
        get_settings.cache_clear()
        get_supabase_client.cache_clear()

    def test_missing_api_key_is_401(self, raw_client):
        response = raw_client.get("/progress/exercises/Bench Press")

        assert response.status_code == 401

    def test_invalid_api_key_is_401(self, raw_client):
        response = raw_client.get(
            "/progress/exercises/Bench Press",
            headers={"X-API-Key": "wrong"},
        )

        assert response.status_code == 401

    def test_database_not_configured_is_503(self, raw_client, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "")
        get_settings.cache_clear()
        get_supabase_client.cache_clear()

        response = raw_client.get(
            "/progress/exercises/Bench Press",
            headers={"X-API-Key": "sk_test_key:user-1"},
        )

        assert response.status_code == 503
