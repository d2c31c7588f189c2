"""XDG config loading/saving."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from gitauth.constants import (
    CREDENTIAL_CACHE_TIMEOUT_SECONDS,
    DEFAULT_GIT_HOST,
    GIT_COMMAND_TIMEOUT_SECONDS,
    GITHUB_API_TIMEOUT_SECONDS,
    GITHUB_API_URL,
)
from gitauth.logging import LOG_LEVELS

DEFAULT_CONFIG_PATH = Path("~/.config/gitauth/config.toml").expanduser()
GITHUB_TOKEN_ENV_KEYS = ("GITAUTH_GH_TOKEN", "GH_TOKEN", "GITHUB_TOKEN")

_MIN_TIMEOUT = 1
_MAX_TIMEOUT = 300
_MAX_CACHE_TIMEOUT = 7 * 24 * 3600


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    github_token: str = ""
    github_host: str = DEFAULT_GIT_HOST
    github_api_url: str = GITHUB_API_URL
    git_timeout_seconds: int = Field(default=GIT_COMMAND_TIMEOUT_SECONDS, ge=_MIN_TIMEOUT, le=_MAX_TIMEOUT)
    http_timeout_seconds: int = Field(default=GITHUB_API_TIMEOUT_SECONDS, ge=_MIN_TIMEOUT, le=_MAX_TIMEOUT)
    credential_cache_timeout_seconds: int = Field(
        default=CREDENTIAL_CACHE_TIMEOUT_SECONDS,
        ge=1,
        le=_MAX_CACHE_TIMEOUT,
    )
    git_user_name: str = ""
    git_user_email: str = ""
    log_level: str = "INFO"

    @field_validator("github_api_url")
    @classmethod
    def _validate_api_url(cls, value: str) -> str:
        if not value.startswith("https://"):
            raise ValueError(f"Invalid GitHub API URL: {value}")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def token_from_env(env: Mapping[str, str] | None = None) -> str:
    source = os.environ if env is None else env
    for key in GITHUB_TOKEN_ENV_KEYS:
        value = source.get(key, "").strip()
        if value:
            return value
    return ""


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _int_in_range(value: object, low: int, high: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    github_token = raw.get("github_token", cfg.github_token)
    if isinstance(github_token, str):
        cfg.github_token = github_token.strip()

    github_host = raw.get("github_host", cfg.github_host)
    if isinstance(github_host, str) and github_host.strip():
        cfg.github_host = github_host.strip()

    github_api_url = raw.get("github_api_url", cfg.github_api_url)
    if isinstance(github_api_url, str) and github_api_url.startswith("https://"):
        cfg.github_api_url = github_api_url

    git_timeout = raw.get("git_timeout_seconds", cfg.git_timeout_seconds)
    if _int_in_range(git_timeout, _MIN_TIMEOUT, _MAX_TIMEOUT):
        cfg.git_timeout_seconds = git_timeout

    http_timeout = raw.get("http_timeout_seconds", cfg.http_timeout_seconds)
    if _int_in_range(http_timeout, _MIN_TIMEOUT, _MAX_TIMEOUT):
        cfg.http_timeout_seconds = http_timeout

    cache_timeout = raw.get("credential_cache_timeout_seconds", cfg.credential_cache_timeout_seconds)
    if _int_in_range(cache_timeout, 1, _MAX_CACHE_TIMEOUT):
        cfg.credential_cache_timeout_seconds = cache_timeout

    git_user_name = raw.get("git_user_name", cfg.git_user_name)
    if isinstance(git_user_name, str):
        cfg.git_user_name = git_user_name

    git_user_email = raw.get("git_user_email", cfg.git_user_email)
    if isinstance(git_user_email, str):
        cfg.git_user_email = git_user_email

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str) and log_level.upper() in LOG_LEVELS:
        cfg.log_level = log_level

    return cfg


def _with_env_token(config: AppConfig) -> AppConfig:
    env_token = token_from_env()
    if env_token:
        config.github_token = env_token
    return config


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _with_env_token(AppConfig())
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _with_env_token(AppConfig())
    if not isinstance(raw, dict):
        return _with_env_token(AppConfig())
    return _with_env_token(_sanitize(raw))


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)

    # Tokens are never persisted.
    lines = [
        f"github_host = {_toml_scalar(config.github_host)}",
        f"github_api_url = {_toml_scalar(config.github_api_url)}",
        f"git_timeout_seconds = {_toml_scalar(config.git_timeout_seconds)}",
        f"http_timeout_seconds = {_toml_scalar(config.http_timeout_seconds)}",
        f"credential_cache_timeout_seconds = {_toml_scalar(config.credential_cache_timeout_seconds)}",
        f"git_user_name = {_toml_scalar(config.git_user_name)}",
        f"git_user_email = {_toml_scalar(config.git_user_email)}",
        f"log_level = {_toml_scalar(config.log_level)}",
    ]

    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
