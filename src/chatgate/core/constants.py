"""chatgate constants: filesystem layout, timeouts, and wire defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Platform-specific config directory
# ---------------------------------------------------------------------------


def _default_config_dir() -> Path:
    """
    Return the platform-appropriate chatgate config directory.

    macOS : ~/Library/Application Support/chatgate
    Linux : ~/.config/chatgate
    Other : ~/.chatgate
    """
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "chatgate"
    if sys.platform.startswith("linux"):
        xdg = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
        return xdg / "chatgate"
    return Path.home() / ".chatgate"


CONFIG_FILENAME = "config.toml"

# ---------------------------------------------------------------------------
# Timeouts and limits
# ---------------------------------------------------------------------------

DEFAULT_REQUEST_TIMEOUT_S = 120.0  # chat completion, including streaming
DEFAULT_PROBE_TIMEOUT_S = 5.0  # reachability check before test_connection
DEFAULT_STATUS_TIMEOUT_S = 3.0  # check_local_service_status fallback
DEFAULT_TEST_MAX_TOKENS = 10
DEFAULT_TEST_PROMPT = "Hi"

# ---------------------------------------------------------------------------
# Wire defaults
# ---------------------------------------------------------------------------

ANTHROPIC_API_VERSION = "2023-06-01"
FALLBACK_PROVIDER_ID = "anthropic"
FALLBACK_BASE_URL = "https://api.anthropic.com"
COMPATIBLE_DEFAULT_TEMPERATURE = 0.7
