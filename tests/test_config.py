"""
tests/test_config.py -- Settings validation for the signing key and token TTL.

Each test clears the get_settings() and get_token_codec() caches on both sides
so the process-wide singletons built by conftest are restored afterwards.
"""

from __future__ import annotations

import logging

import pytest

from auth.tokens import get_token_codec
from core.config import MIN_SECRET_KEY_LENGTH, Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    get_settings.cache_clear()
    get_token_codec.cache_clear()
    yield
    monkeypatch.undo()
    get_settings.cache_clear()
    get_token_codec.cache_clear()


def test_missing_key_in_production_is_fatal(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValueError, match="SECRET_KEY is required"):
        Settings(_env_file=None)


def test_short_key_is_fatal(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("SECRET_KEY", "x" * (MIN_SECRET_KEY_LENGTH - 1))
    with pytest.raises(ValueError, match="at least 32 characters"):
        Settings(_env_file=None)


def test_short_key_is_fatal_in_debug_too(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("SECRET_KEY", "short")
    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_debug_generates_a_key(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.delenv("SECRET_KEY", raising=False)
    settings = Settings(_env_file=None)
    assert len(settings.secret_key) >= MIN_SECRET_KEY_LENGTH


def test_generated_key_is_logged_as_throwaway(monkeypatch, caplog) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with caplog.at_level(logging.WARNING, logger="taskdesk.config"):
        Settings(_env_file=None)
    assert any("throwaway SECRET_KEY" in r.getMessage() for r in caplog.records)


def test_explicit_key_and_ttl_are_used(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("SECRET_KEY", "s" * 40)
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "120")
    codec = get_token_codec()
    assert codec.expire_seconds == 120


def test_non_positive_ttl_is_fatal(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "0")
    with pytest.raises(ValueError, match="TOKEN_EXPIRE_SECONDS"):
        Settings(_env_file=None)


def test_codec_construction_surfaces_config_error(monkeypatch) -> None:
    """The API lifespan builds the codec first, so this aborts startup."""
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValueError):
        get_token_codec()
