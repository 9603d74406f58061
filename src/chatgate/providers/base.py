"""
Provider data model shared by every dialect.

A *dialect* is one vendor wire protocol for chat completion. Each dialect
module (anthropic, openai, google, minimax, compatible) exposes three pure
functions:

  build_request(messages, settings, wants_stream) -> HttpRequest
  fold_event(event, text) -> text        # one decoded SSE JSON event
  extract_text(data) -> str              # one non-streaming JSON body

and :mod:`chatgate.providers.dialects` packs them into a ``DialectSpec``.
Dialects are a closed set: there is no base class to subclass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chatgate.core.settings import Settings


class Dialect(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI_CHAT = "openai-chat"
    OPENAI_RESPONSES = "openai-responses"
    GOOGLE = "google"
    MINIMAX = "minimax"
    OPENAI_COMPATIBLE = "openai-compatible"


class AuthType(str, Enum):
    NONE = "none"
    BEARER = "bearer"
    API_KEY = "api-key"
    QUERY_PARAM = "query-param"


_VALID_ROLES = frozenset({"user", "assistant", "system"})


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderConfig:
    """A provider preset: default endpoint, dialect and auth scheme."""

    id: str
    display_name: str
    default_base_url: str
    dialect: Dialect
    auth_type: AuthType
    description: str = ""


@dataclass(frozen=True)
class ModelDescriptor:
    """A catalogued model and the provider that serves it."""

    id: str
    provider_id: str
    default_base_url: str
    display_name: str = ""
    description: str = ""
    dialect_override: Dialect | None = None


@dataclass(frozen=True)
class NormalizedMessage:
    """One chat turn in the gateway's vendor-neutral shape."""

    role: str  # "user" | "assistant" | "system"
    content: str

    def __post_init__(self) -> None:
        if self.role not in _VALID_ROLES:
            raise ValueError(
                f"Invalid message role {self.role!r}. Must be one of: {sorted(_VALID_ROLES)}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NormalizedMessage:
        return cls(role=str(data.get("role", "")), content=str(data.get("content", "")))

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class HttpRequest:
    """A fully built provider call: where to POST, with which headers and JSON body."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    method: str = "POST"


BuildFn = Callable[[list[NormalizedMessage], "Settings", bool], HttpRequest]
FoldFn = Callable[[dict[str, Any], str], str]
ExtractFn = Callable[[Any], str]


@dataclass(frozen=True)
class DialectSpec:
    """The three pure functions that make up one dialect."""

    dialect: Dialect
    build: BuildFn
    fold_event: FoldFn
    extract_text: ExtractFn


# ---------------------------------------------------------------------------
# Helpers shared by the dialect modules
# ---------------------------------------------------------------------------


def chat_messages(messages: Iterable[NormalizedMessage]) -> list[dict[str, str]]:
    """Chat-completions style ``[{"role", "content"}]`` list."""
    return [m.to_dict() for m in messages]


def dig(data: Any, *path: str | int) -> Any:
    """Walk *path* through nested dicts/lists; None on any missing or mistyped step."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def text_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def json_headers(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if extra:
        headers.update(extra)
    return headers
