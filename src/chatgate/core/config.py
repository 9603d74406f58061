"""chatgate gateway configuration: Pydantic model and TOML/env loading.

This is configuration of the gateway itself (timeouts, logging). The
per-call ``Settings`` (model, keys, base URL) is owned by the host
application and lives in :mod:`chatgate.core.settings`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chatgate.core.constants import (
    CONFIG_FILENAME,
    DEFAULT_PROBE_TIMEOUT_S,
    DEFAULT_REQUEST_TIMEOUT_S,
    DEFAULT_STATUS_TIMEOUT_S,
    DEFAULT_TEST_MAX_TOKENS,
    DEFAULT_TEST_PROMPT,
    _default_config_dir,
)
from chatgate.core.exceptions import ConfigError, ConfigNotFoundError


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v


class GatewayConfig(BaseModel):
    """Root chatgate configuration model."""

    model_config = {"extra": "forbid"}

    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    probe_timeout_s: float = DEFAULT_PROBE_TIMEOUT_S
    status_timeout_s: float = DEFAULT_STATUS_TIMEOUT_S
    test_max_tokens: int = DEFAULT_TEST_MAX_TOKENS
    test_prompt: str = DEFAULT_TEST_PROMPT
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("request_timeout_s")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if not (1.0 <= v <= 600.0):
            raise ValueError("request_timeout_s must be between 1 and 600")
        return v

    @field_validator("probe_timeout_s", "status_timeout_s")
    @classmethod
    def validate_probe_timeout(cls, v: float) -> float:
        if not (0.1 <= v <= 60.0):
            raise ValueError("probe timeouts must be between 0.1 and 60")
        return v

    @field_validator("test_max_tokens")
    @classmethod
    def validate_test_max_tokens(cls, v: int) -> int:
        if not (1 <= v <= 1024):
            raise ValueError("test_max_tokens must be between 1 and 1024")
        return v


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _config_file_path() -> Path:
    if env_path := os.environ.get("CHATGATE_CONFIG"):
        return Path(env_path)
    return _default_config_dir() / CONFIG_FILENAME


def load_config(path: Path | str | None = None) -> GatewayConfig:
    """
    Load GatewayConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (CHATGATE_*)
      2. Config file (``$CHATGATE_CONFIG`` or platform config dir / config.toml)
      3. Built-in defaults

    A missing default config file is not an error. A missing file that was
    asked for explicitly (argument or ``CHATGATE_CONFIG``) raises
    :class:`ConfigNotFoundError`.
    """
    import tomllib

    explicit = path is not None or bool(os.environ.get("CHATGATE_CONFIG"))
    cfg_path = Path(path) if path is not None else _config_file_path()

    data: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            with open(cfg_path, "rb") as f:
                data = tomllib.load(f)
        except Exception as exc:
            raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc
    elif explicit:
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    _apply_env_overrides(data)

    try:
        return GatewayConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay CHATGATE_* environment variables onto parsed TOML."""
    if level := os.environ.get("CHATGATE_LOG_LEVEL", ""):
        data.setdefault("logging", {})["level"] = level
    if log_format := os.environ.get("CHATGATE_LOG_FORMAT", ""):
        data.setdefault("logging", {})["format"] = log_format
    if timeout := os.environ.get("CHATGATE_REQUEST_TIMEOUT", ""):
        try:
            data["request_timeout_s"] = float(timeout)
        except ValueError as exc:
            raise ConfigError(
                f"CHATGATE_REQUEST_TIMEOUT must be a number, got {timeout!r}"
            ) from exc
