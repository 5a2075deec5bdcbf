from __future__ import annotations

import pytest

from signlearn.core.config import AppEnv, Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "API_PORT",
    "DATABASE_URL",
    "SEED_CATALOG",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults() -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.port == 4000
    assert settings.database_url is None
    assert settings.seed_catalog is True
    assert settings.cors_origins == ("*",)


@pytest.mark.parametrize(
    ("raw_env", "raw_level", "env", "level"),
    [
        ("prod", "error", "prod", "error"),
        ("PROD", "DEBUG", "prod", "debug"),
        ("  test  ", "  warning  ", "test", "warning"),
    ],
)
def test_env_and_level_are_normalized(
    clean_env: pytest.MonkeyPatch, raw_env: str, raw_level: str, env: str, level: str
) -> None:
    clean_env.setenv("APP_ENV", raw_env)
    clean_env.setenv("LOG_LEVEL", raw_level)
    settings = load_settings()
    assert (settings.app_env, settings.log_level) == (env, level)


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("APP_ENV", "staging", "APP_ENV must be dev|test|prod"),
        ("APP_ENV", "", "APP_ENV must be dev|test|prod"),
        ("LOG_LEVEL", "verbose", "LOG_LEVEL must be debug|info|warning|error"),
        ("LOG_JSON", "maybe", "LOG_JSON must be a boolean"),
        ("SEED_CATALOG", "2", "SEED_CATALOG must be a boolean"),
        ("PORT", "http", "PORT must be an integer"),
    ],
)
def test_invalid_values_raise(
    clean_env: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    clean_env.setenv(name, value)
    with pytest.raises(ValueError, match=message.replace("|", r"\|")):
        load_settings()


def test_api_port_wins_over_port(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PORT", "5000")
    clean_env.setenv("API_PORT", "6000")
    assert load_settings().port == 6000

    clean_env.delenv("API_PORT")
    assert load_settings().port == 5000


def test_database_url_turns_off_seeding(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://db/signlearn")
    settings = load_settings()
    assert settings.database_url == "postgresql+asyncpg://db/signlearn"
    assert settings.seed_catalog is False

    clean_env.setenv("SEED_CATALOG", "yes")
    assert load_settings().seed_catalog is True


def test_blank_flag_uses_default(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("LOG_JSON", "  ")
    assert load_settings().log_json is False


def test_cors_origins_split(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("CORS_ORIGINS", "http://a.test, http://b.test,,")
    assert load_settings().cors_origins == ("http://a.test", "http://b.test")


@pytest.mark.parametrize("app_env", ["dev", "test", "prod"])
def test_environment_flags(app_env: AppEnv) -> None:
    settings = Settings(
        app_env=app_env,
        log_level="info",
        log_json=False,
        port=4000,
        database_url=None,
        seed_catalog=True,
        cors_origins=("*",),
    )
    flags = {"dev": settings.is_dev, "test": settings.is_test, "prod": settings.is_prod}
    assert [env for env, on in flags.items() if on] == [app_env]

    with pytest.raises(AttributeError):
        settings.port = 1  # type: ignore[misc]
