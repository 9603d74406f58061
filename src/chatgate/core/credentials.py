"""
Credential resolution — which key goes with which model.

The host keeps one API key per provider in ``Settings.provider_keys`` and
shows the active one in ``Settings.active_api_key``. Switching models swaps
the active key for the new provider's key so a user never sends an OpenAI key
to Anthropic.

Keys are never logged. These functions are pure: they take a Settings value
and return a new one, and two concurrent switches simply race (last write
wins in whatever the host stores).
"""

from __future__ import annotations

import structlog

from chatgate.core.exceptions import ConfigurationError
from chatgate.core.settings import Settings
from chatgate.providers.base import AuthType
from chatgate.providers.registry import get_model_info, provider_of, resolve

logger = structlog.get_logger()


def switch_model(settings: Settings, new_model_id: str) -> Settings:
    """Return *settings* switched to *new_model_id*.

    1. A non-empty active key is saved under the old model's provider.
    2. The active key becomes the new provider's stored key, or ``""``.
    3. ``base_url`` follows the new model's default only if it still equals
       the old model's default; any other value is treated as a user override.
    """
    old_provider = provider_of(settings.model_id)
    new_provider = provider_of(new_model_id)

    provider_keys = dict(settings.provider_keys)
    if settings.active_api_key:
        provider_keys[old_provider] = settings.active_api_key

    base_url = settings.base_url
    old_model = get_model_info(settings.model_id)
    new_model = get_model_info(new_model_id)
    if old_model and new_model and settings.base_url == old_model.default_base_url:
        base_url = new_model.default_base_url

    logger.debug(
        "model_switched",
        old_model=settings.model_id,
        new_model=new_model_id,
        old_provider=old_provider,
        new_provider=new_provider,
        base_url_rewritten=base_url != settings.base_url,
    )

    return settings.model_copy(
        update={
            "model_id": new_model_id,
            "provider_keys": provider_keys,
            "active_api_key": provider_keys.get(new_provider, ""),
            "base_url": base_url,
        }
    )


def commit_active_key(settings: Settings) -> Settings:
    """Store a non-empty active key under the current provider, without switching."""
    if not settings.active_api_key:
        return settings
    provider_keys = dict(settings.provider_keys)
    provider_keys[provider_of(settings.model_id)] = settings.active_api_key
    return settings.model_copy(update={"provider_keys": provider_keys})


def is_configured(settings: Settings) -> bool:
    """True when the model's provider needs no key, or a key is set."""
    provider = resolve(provider_of(settings.model_id))
    if provider.auth_type is AuthType.NONE:
        return True
    return len(settings.active_api_key) > 0


def ensure_configured(settings: Settings) -> None:
    """Raise :class:`ConfigurationError` if the call would go out without a key."""
    if not is_configured(settings):
        provider = resolve(provider_of(settings.model_id))
        raise ConfigurationError(
            f"No API key configured for {provider.display_name}. "
            f"Add a key for provider {provider.id!r} before sending."
        )
