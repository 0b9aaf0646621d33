"""
Test Fixtures and Helpers for Fakes.

This module provides pytest fixtures and helper functions for overriding
FastAPI dependencies with fake implementations.

Usage:
    def test_something(override_deps, client):
        repo = override_deps(get_session_repo, FakeWorkoutSessionRepository())
        response = client.get("/progress/exercises/Squat")
        assert response.status_code == 200
"""

from typing import Any, Callable

import pytest
from fastapi import FastAPI

from backend.main import create_app
from backend.settings import Settings


RepoGetter = Callable[..., Any]

TEST_API_KEY = "sk_test_key"


def override_dependency(app: FastAPI, getter: RepoGetter, implementation: Any) -> None:
    """
    Override a FastAPI dependency with a fake implementation.

    Instances are wrapped in a lambda; factory functions are used directly.
    """
    if callable(implementation) and not isinstance(implementation, type):
        app.dependency_overrides[getter] = implementation
    else:
        app.dependency_overrides[getter] = lambda: implementation


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="test", api_keys=TEST_API_KEY, _env_file=None)


@pytest.fixture
def test_app(test_settings: Settings) -> FastAPI:
    """Fresh app per test so overrides never leak."""
    app = create_app(settings=test_settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def override_deps(test_app: FastAPI) -> Callable[[RepoGetter, Any], Any]:
    """
    Fixture that provides a dependency override helper.

    Returns:
        Function that accepts (getter, implementation) and returns the implementation
    """
    def _override(getter: RepoGetter, implementation: Any) -> Any:
        override_dependency(test_app, getter, implementation)
        return implementation

    return _override


@pytest.fixture
def fake_session_repo():
    from tests.fakes import FakeWorkoutSessionRepository
    return FakeWorkoutSessionRepository()


@pytest.fixture
def fake_sensor_source():
    from tests.fakes import FakeSensorSource
    return FakeSensorSource()


@pytest.fixture
def recording_channel():
    from tests.fakes import RecordingMessageChannel
    return RecordingMessageChannel()


@pytest.fixture
def fake_notifier():
    from tests.fakes import FakeNotificationScheduler
    return FakeNotificationScheduler()
