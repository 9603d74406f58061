"""
chatgate — unified chat-completion gateway for heterogeneous LLM vendors.

chatgate normalises vendor chat protocols (Anthropic Messages, OpenAI Chat
Completions and Responses, Google Gemini, Minimax, and OpenAI-compatible
local/aggregator services) into one call contract:

    text = await send_message(messages, settings, on_stream=print)

Package layout (src/chatgate/):
  core/       — settings, credentials, config, logging, exceptions
  providers/  — registry, per-dialect request builders, SSE decoder
  gateway.py  — dialect selection, send_message, test_connection
  probe.py    — local inference service discovery
  cli/        — Click CLI entry point
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
