"""Tests for configuration loading and the log masking filter."""

import pytest

from standings_pool.config import settings as settings_module
from standings_pool.config.settings import load_settings
from standings_pool.logging.setup import sensitive_data_filter


def test_defaults_load_without_environment(monkeypatch) -> None:
    for var in ("SUPABASE_URL", "SUPABASE_KEY", "SCORING_MODE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    loaded = load_settings()

    assert loaded.cache_max_age_seconds == 60
    assert loaded.min_feed_rows == 26
    assert loaded.scoring_mode == "weighted"


@pytest.mark.parametrize(
    "env, attribute, expected",
    [
        ({"LOG_LEVEL": "debug"}, "log_level", "DEBUG"),
        ({"LOG_LEVEL": "chatty"}, "log_level", "INFO"),
        ({"SCORING_MODE": "DISTANCE"}, "scoring_mode", "distance"),
        ({"SCORING_MODE": "vibes"}, "scoring_mode", "weighted"),
    ],
)
def test_values_are_normalized(monkeypatch, env, attribute, expected) -> None:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    assert getattr(load_settings(), attribute) == expected


def test_write_key_prefers_service_key(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    assert load_settings().write_key == "service-key"


def test_filter_masks_configured_secret(monkeypatch) -> None:
    monkeypatch.setattr(
        settings_module.settings, "supabase_key", "super-secret-anon-key"
    )
    record = {"message": "connecting with super-secret-anon-key", "extra": {}}

    assert sensitive_data_filter(record) is True
    assert record["message"] == "connecting with ********"


def test_filter_masks_sensitive_extra_keys() -> None:
    record = {
        "message": "request",
        "extra": {"api_token": "abcdefghijkl", "password": "short", "params": None},
    }

    sensitive_data_filter(record)

    assert record["extra"]["api_token"] == "abcd****ijkl"
    assert record["extra"]["password"] == "********"
    assert record["extra"]["params"] is None
