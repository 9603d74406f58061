"""Unit tests for chatgate.providers.registry — presets, catalog, lookups."""

from __future__ import annotations

import pytest

from chatgate.gateway import select_dialect
from chatgate.providers.base import AuthType, Dialect
from chatgate.providers.registry import (
    AVAILABLE_MODELS,
    COMPATIBLE_PROVIDERS,
    PROVIDER_PRESETS,
    default_base_url,
    get_model_info,
    list_models,
    list_providers,
    provider_of,
    requires_api_key,
    resolve,
    uses_responses_api,
)

# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class TestPresets:
    def test_official_dialects(self) -> None:
        assert PROVIDER_PRESETS["anthropic"].dialect is Dialect.ANTHROPIC
        assert PROVIDER_PRESETS["openai"].dialect is Dialect.OPENAI_CHAT
        assert PROVIDER_PRESETS["google"].dialect is Dialect.GOOGLE
        assert PROVIDER_PRESETS["minimax"].dialect is Dialect.MINIMAX

    def test_local_presets_need_no_auth(self) -> None:
        for provider_id in ("ollama", "lmstudio", "localai", "vllm", "tgi", "sglang"):
            assert PROVIDER_PRESETS[provider_id].auth_type is AuthType.NONE

    def test_ollama_default_url(self) -> None:
        assert PROVIDER_PRESETS["ollama"].default_base_url == "http://localhost:11434"

    def test_compatible_set(self) -> None:
        assert "ollama" in COMPATIBLE_PROVIDERS
        assert "openrouter" in COMPATIBLE_PROVIDERS
        assert "custom" in COMPATIBLE_PROVIDERS
        assert "openai" not in COMPATIBLE_PROVIDERS
        assert "anthropic" not in COMPATIBLE_PROVIDERS

    def test_presets_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            PROVIDER_PRESETS["evil"] = PROVIDER_PRESETS["openai"]  # type: ignore[index]

    def test_list_providers_matches_table(self) -> None:
        assert {p.id for p in list_providers()} == set(PROVIDER_PRESETS)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestCatalog:
    def test_model_urls_follow_their_preset(self) -> None:
        for model in AVAILABLE_MODELS.values():
            preset = PROVIDER_PRESETS[model.provider_id]
            assert model.default_base_url == preset.default_base_url

    def test_gpt5_series_flagged_for_responses(self) -> None:
        for model_id in ("gpt-5", "gpt-5-mini", "gpt-5-nano"):
            assert AVAILABLE_MODELS[model_id].dialect_override is Dialect.OPENAI_RESPONSES

    def test_list_models_filters_by_provider(self) -> None:
        ollama = list_models("ollama")
        assert ollama
        assert all(m.provider_id == "ollama" for m in ollama)

    def test_list_models_unfiltered(self) -> None:
        assert len(list_models()) == len(AVAILABLE_MODELS)

    def test_get_model_info_unknown(self) -> None:
        assert get_model_info("no-such-model") is None


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class TestLookups:
    def test_resolve_known(self) -> None:
        assert resolve("groq").display_name == "Groq"

    def test_resolve_unknown_falls_back_to_anthropic(self) -> None:
        assert resolve("brand-new-vendor").id == "anthropic"

    def test_provider_of_catalogued(self) -> None:
        assert provider_of("gpt-4o") == "openai"
        assert provider_of("llama3.3:latest") == "ollama"

    def test_provider_of_uncatalogued_is_anthropic(self) -> None:
        assert provider_of("my-finetune") == "anthropic"

    def test_default_base_url(self) -> None:
        assert default_base_url("gemini-3-pro") == "https://generativelanguage.googleapis.com"
        assert default_base_url("my-finetune") == "https://api.anthropic.com"

    @pytest.mark.parametrize(
        "model_id,expected",
        [
            ("gpt-5", True),
            ("gpt-5-mini", True),
            ("GPT-5-preview", True),
            ("gpt-5.1-experimental", True),
            ("gpt-4o", False),
            ("o3-mini", False),
            ("claude-sonnet-4-5-20250929", False),
        ],
    )
    def test_uses_responses_api(self, model_id: str, expected: bool) -> None:
        assert uses_responses_api(model_id) is expected

    def test_requires_api_key(self) -> None:
        assert requires_api_key("openai") is True
        assert requires_api_key("ollama") is False
        assert requires_api_key("lmstudio") is False
        assert requires_api_key("unknown-provider") is True


# ---------------------------------------------------------------------------
# Dialect selection
# ---------------------------------------------------------------------------


class TestSelectDialect:
    @pytest.mark.parametrize(
        "model_id,dialect",
        [
            ("claude-opus-4-5-20251101", Dialect.ANTHROPIC),
            ("gpt-4o", Dialect.OPENAI_CHAT),
            ("gpt-5", Dialect.OPENAI_RESPONSES),
            ("gemini-3-pro", Dialect.GOOGLE),
            ("minimax-m2.1", Dialect.MINIMAX),
            ("llama3.3:latest", Dialect.OPENAI_COMPATIBLE),
            ("deepseek-chat", Dialect.OPENAI_COMPATIBLE),
            ("custom-model", Dialect.OPENAI_COMPATIBLE),
            ("totally-unknown", Dialect.ANTHROPIC),
        ],
    )
    def test_dialect_for_model(self, model_id: str, dialect: Dialect) -> None:
        assert select_dialect(model_id).dialect is dialect

    def test_uncatalogued_gpt5_routes_to_responses(self) -> None:
        assert select_dialect("gpt-5-2026-preview").dialect is Dialect.OPENAI_RESPONSES
