"""
LLM provider dialects — request builders, SSE decoding, and the static catalog.

Each dialect module talks to one vendor protocol via plain JSON over httpx
(no vendor SDKs). :mod:`chatgate.providers.dialects` holds the closed table
of dialects; :mod:`chatgate.providers.registry` holds provider presets and
the model catalog.
"""

from chatgate.providers.base import (  # noqa: F401
    AuthType,
    Dialect,
    DialectSpec,
    HttpRequest,
    ModelDescriptor,
    NormalizedMessage,
    ProviderConfig,
)
from chatgate.providers.dialects import DIALECTS, compatible_dialect  # noqa: F401
from chatgate.providers.sse import CancellationToken, decode_stream  # noqa: F401
