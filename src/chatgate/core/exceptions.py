"""chatgate exception hierarchy."""

from __future__ import annotations


class ChatGateError(Exception):
    """Base exception for all chatgate errors."""


class ConfigError(ChatGateError):
    """Raised when the gateway configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""


class ConfigurationError(ChatGateError):
    """Raised when the active provider needs an API key and none is set."""


class NetworkError(ChatGateError):
    """Raised on transport failure: DNS, connection refused, timeout."""


class ProviderHTTPError(ChatGateError):
    """Raised when a provider answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ProtocolError(ChatGateError):
    """A malformed SSE data line.

    The stream decoder recovers from these locally (the line is skipped), so
    this is never raised out of ``send_message``.
    """


class RequestCancelledError(ChatGateError):
    """Raised when a streaming call is abandoned through its cancellation token."""
