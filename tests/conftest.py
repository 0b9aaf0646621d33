"""Shared fixtures: re-export the fake-backed fixtures for every test package."""

from tests.fakes.conftest import (  # noqa: F401
    fake_notifier,
    fake_sensor_source,
    fake_session_repo,
    override_deps,
    recording_channel,
    test_app,
    test_settings,
)
