from __future__ import annotations

import pytest

from app.core.config import AppEnv, Settings, load_settings

_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "DATABASE_URL",
    "ALLOWED_ORIGINS",
    "PASSWORD_HASH_COST",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ---- valid values ----


def test_load_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.port == 3000
    assert settings.database_url is None
    assert settings.allowed_origins == ("http://localhost:3001",)
    assert settings.password_hash_cost == 3


def test_load_settings_respects_env_vars(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "prod")
    clean_env.setenv("LOG_LEVEL", "error")
    clean_env.setenv("LOG_JSON", "true")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/ats")
    clean_env.setenv("PASSWORD_HASH_COST", "4")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "error"
    assert settings.log_json is True
    assert settings.port == 8080
    assert settings.database_url == "postgresql+asyncpg://u:p@db/ats"
    assert settings.password_hash_cost == 4


def test_load_settings_normalizes_case(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "PROD")
    clean_env.setenv("LOG_LEVEL", "DEBUG")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "debug"


def test_load_settings_strips_whitespace(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "  test  ")
    clean_env.setenv("LOG_LEVEL", "  warning  ")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "warning"


def test_allowed_origins_split_on_commas(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv(
        "ALLOWED_ORIGINS", "http://localhost:3001, https://ats.example.com ,"
    )
    settings = load_settings()
    assert settings.allowed_origins == (
        "http://localhost:3001",
        "https://ats.example.com",
    )


def test_empty_database_url_means_none(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DATABASE_URL", "   ")
    assert load_settings().database_url is None


# ---- invalid values ----


def test_load_settings_rejects_invalid_app_env(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("APP_ENV", "staging")
    with pytest.raises(ValueError, match="APP_ENV must be dev|test|prod"):
        load_settings()


def test_load_settings_rejects_invalid_log_level(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL must be debug|info|warning|error"):
        load_settings()


def test_load_settings_rejects_non_integer_port(
    clean_env: pytest.MonkeyPatch,
) -> None:
    clean_env.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_settings()


def test_load_settings_rejects_bad_log_json(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("LOG_JSON", "maybe")
    with pytest.raises(ValueError, match="LOG_JSON must be true|false"):
        load_settings()


@pytest.mark.parametrize("raw", ["0", "-2", "ten"])
def test_load_settings_rejects_bad_hash_cost(
    clean_env: pytest.MonkeyPatch, raw: str
) -> None:
    clean_env.setenv("PASSWORD_HASH_COST", raw)
    with pytest.raises(ValueError, match="PASSWORD_HASH_COST"):
        load_settings()


# ---- Settings properties ----


def _make_settings(app_env: AppEnv = "dev") -> Settings:
    return Settings(
        app_env=app_env,
        log_level="info",
        log_json=False,
        port=3000,
        database_url=None,
    )


@pytest.mark.parametrize(
    ("app_env", "name"),
    [("dev", "development"), ("test", "test"), ("prod", "production")],
)
def test_environment_name(app_env: AppEnv, name: str) -> None:
    assert _make_settings(app_env).environment_name == name


def test_settings_flags() -> None:
    s = _make_settings("prod")
    assert (s.is_dev, s.is_test, s.is_prod) == (False, False, True)
    s = _make_settings("dev")
    assert (s.is_dev, s.is_test, s.is_prod) == (True, False, False)


def test_settings_is_frozen() -> None:
    s = _make_settings()
    with pytest.raises(AttributeError):
        s.app_env = "prod"  # type: ignore[misc]
