"""
Settings — the per-call value the host application hands to the gateway.

The host owns persistence and lifetime; chatgate only reads a Settings value
(and returns new ones from :func:`chatgate.core.credentials.switch_model`).
Instances are frozen so a value captured at the start of a call cannot change
underneath it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    active_api_key: str = Field(default="", repr=False)
    model_id: str = "claude-sonnet-4-5-20250929"
    base_url: str = "https://api.anthropic.com"
    max_tokens: int = 4096
    temperature: float | None = 0.7
    # One key per provider id; never logged.
    provider_keys: dict[str, str] = Field(default_factory=dict, repr=False)
    organization_id: str | None = None
    project_id: str | None = None

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_tokens must not be negative")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float | None) -> float | None:
        if v is not None and not (0.0 <= v <= 2.0):
            raise ValueError("temperature must be between 0 and 2")
        return v
