"""Unit tests for core/config.py -- SECRET_KEY policy and defaults.

Settings is instantiated directly with _env_file=None so a developer's local
.env never leaks into the result. The environment is controlled through
monkeypatch; conftest sets DEBUG=true for the process, so tests that need
production mode remove it first.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings

_GOOD_KEY = "x" * 32


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DEBUG", "SECRET_KEY", "TOKEN_EXPIRE_SECONDS", "DATABASE_URL", "CORS_ORIGINS", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_production_mode_requires_secret_key(clean_env):
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(_env_file=None)


def test_debug_mode_generates_secret_key(clean_env):
    clean_env.setenv("DEBUG", "true")
    settings = Settings(_env_file=None)
    assert len(settings.secret_key) == 64


def test_debug_mode_generates_a_fresh_key_each_time(clean_env):
    clean_env.setenv("DEBUG", "true")
    assert Settings(_env_file=None).secret_key != Settings(_env_file=None).secret_key


def test_short_secret_key_rejected(clean_env):
    clean_env.setenv("SECRET_KEY", "too-short")
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(_env_file=None)


def test_explicit_secret_key_is_kept(clean_env):
    clean_env.setenv("SECRET_KEY", _GOOD_KEY)
    assert Settings(_env_file=None).secret_key == _GOOD_KEY


def test_defaults(clean_env):
    clean_env.setenv("SECRET_KEY", _GOOD_KEY)
    settings = Settings(_env_file=None)
    assert settings.debug is False
    assert settings.token_expire_seconds == 3600
    assert settings.database_url.startswith("sqlite:///")
    assert settings.database_url.endswith("staffdesk.db")
    assert settings.port == 3000


def test_environment_overrides(clean_env):
    clean_env.setenv("SECRET_KEY", _GOOD_KEY)
    clean_env.setenv("TOKEN_EXPIRE_SECONDS", "60")
    clean_env.setenv("DATABASE_URL", "sqlite:///:memory:")
    clean_env.setenv("CORS_ORIGINS", '["https://desk.example.com"]')
    settings = Settings(_env_file=None)
    assert settings.token_expire_seconds == 60
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.cors_origins == ["https://desk.example.com"]


def test_non_positive_token_lifetime_rejected(clean_env):
    clean_env.setenv("SECRET_KEY", _GOOD_KEY)
    clean_env.setenv("TOKEN_EXPIRE_SECONDS", "0")
    with pytest.raises(ValidationError, match="TOKEN_EXPIRE_SECONDS"):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
