"""
Structured logging configuration for chatgate.

Uses structlog so gateway events are key-value records rather than format
strings. Every module does::

    import structlog
    logger = structlog.get_logger()

and logs with snake_case event names::

    logger.info("gateway_request_started", dialect="anthropic", model="claude-...")

Bound context (a request id) flows through a whole call::

    log = logger.bind(request_id="3f2a91c0")
    log.debug("gateway_stream_chunk", chars=42)

API keys are never passed to a logger, and any field that looks like a
credential is replaced with ``[REDACTED]`` before rendering.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

_SECRET_FIELDS = frozenset(
    {"api_key", "active_api_key", "provider_keys", "authorization", "x-api-key", "key"}
)


def scrub_secret_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: blank out credential-named fields."""
    for name in _SECRET_FIELDS.intersection(event_dict):
        event_dict[name] = "[REDACTED]"
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure structlog + stdlib logging for the process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, emit JSON lines. If False, emit coloured
                     human-readable output on stderr.

    Safe to call more than once; the stderr handler is only installed once.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        scrub_secret_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    if not any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), structlog.stdlib.ProcessorFormatter)
        for h in root.handlers
    ):
        root.addHandler(handler)

    root.setLevel(log_level)

    # httpx logs every request line at INFO, including query strings that
    # carry Gemini API keys.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
