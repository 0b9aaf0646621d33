"""
Tests for port (Protocol) definitions.

These tests verify that:
1. Protocol definitions are importable and declare the expected methods
2. Fakes and adapters provide every method the Protocols declare
"""
import inspect

import pytest

from application.ports import (
    MessageChannel,
    NotificationScheduler,
    SensorMetricsSource,
    WorkoutSessionRepository,
)
from infrastructure import (
    HttpMessageChannel,
    LoopNotificationScheduler,
    SupabaseWorkoutSessionRepository,
)
from tests.fakes import (
    FakeNotificationScheduler,
    FakeSensorSource,
    FakeWorkoutSessionRepository,
    RecordingMessageChannel,
)

# All tests in this module are pure logic tests (no TestClient) - mark as unit
pytestmark = pytest.mark.unit


def _protocol_methods(protocol):
    return {
        name for name, member in inspect.getmembers(protocol, inspect.isfunction)
        if not name.startswith("_")
    }


@pytest.mark.parametrize(
    "protocol, implementations",
    [
        (WorkoutSessionRepository, [SupabaseWorkoutSessionRepository, FakeWorkoutSessionRepository]),
        (MessageChannel, [HttpMessageChannel, RecordingMessageChannel]),
        (NotificationScheduler, [LoopNotificationScheduler, FakeNotificationScheduler]),
        (SensorMetricsSource, [FakeSensorSource]),
    ],
)
def test_implementations_cover_protocol(protocol, implementations):
    methods = _protocol_methods(protocol)
    assert methods

    for implementation in implementations:
        missing = {m for m in methods if not hasattr(implementation, m)}
        assert not missing, f"{implementation.__name__} missing {missing}"


def test_session_repository_methods():
    assert _protocol_methods(WorkoutSessionRepository) == {
        "fetch_sessions",
        "get_session",
        "save_session",
    }


def test_async_sensor_methods_are_coroutines():
    for name in ("request_authorization", "start_session", "end_session"):
        assert inspect.iscoroutinefunction(getattr(FakeSensorSource, name))


def test_message_channel_send_is_coroutine():
    for implementation in (HttpMessageChannel, RecordingMessageChannel):
        assert inspect.iscoroutinefunction(implementation.send)
