from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, get_args

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_BOOLS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = _env(name, default).lower()
    if value not in choices:
        raise ValueError(f"{name} must be {'|'.join(choices)} (got {value!r})")
    return value


def _env_flag(name: str, default: bool) -> bool:
    value = _env(name).lower()
    if not value:
        return default
    if value not in _BOOLS:
        raise ValueError(f"{name} must be a boolean (got {value!r})")
    return _BOOLS[value]


def _env_port() -> int:
    value = _env("API_PORT") or _env("PORT", "4000")
    if not value.isdigit():
        raise ValueError(f"PORT must be an integer (got {value!r})")
    return int(value)


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    seed_catalog: bool
    cors_origins: tuple[str, ...]

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    """Read settings from the environment; raise ValueError on bad input.

    SEED_CATALOG defaults to on only when no DATABASE_URL is set, so the
    in-memory store starts with the development catalog.
    """
    app_env = _env_choice("APP_ENV", get_args(AppEnv), "dev")
    log_level = _env_choice("LOG_LEVEL", get_args(LogLevel), "info")
    database_url = _env("DATABASE_URL") or None
    origins = tuple(
        p.strip() for p in _env("CORS_ORIGINS", "*").split(",") if p.strip()
    )
    return Settings(  # type: ignore[arg-type]
        app_env=app_env,
        log_level=log_level,
        log_json=_env_flag("LOG_JSON", False),
        port=_env_port(),
        database_url=database_url,
        seed_catalog=_env_flag("SEED_CATALOG", database_url is None),
        cors_origins=origins,
    )


SETTINGS = load_settings()
