"""
Provider registry — the static catalog of provider presets and models.

Everything here is immutable and built at import time. Lookups never raise:
an unknown provider id resolves to the ``anthropic`` preset so that provider
strings written by a newer host version still produce a usable request.
"""

from __future__ import annotations

from types import MappingProxyType

from chatgate.core.constants import FALLBACK_BASE_URL, FALLBACK_PROVIDER_ID
from chatgate.providers.base import AuthType, Dialect, ModelDescriptor, ProviderConfig

_C = Dialect.OPENAI_COMPATIBLE

_PRESETS: tuple[ProviderConfig, ...] = (
    # Official APIs
    ProviderConfig(
        "anthropic", "Anthropic", "https://api.anthropic.com",
        Dialect.ANTHROPIC, AuthType.API_KEY, "Claude official API",
    ),
    ProviderConfig(
        "openai", "OpenAI", "https://api.openai.com",
        Dialect.OPENAI_CHAT, AuthType.BEARER, "GPT official API",
    ),
    ProviderConfig(
        "google", "Google", "https://generativelanguage.googleapis.com",
        Dialect.GOOGLE, AuthType.QUERY_PARAM, "Gemini official API",
    ),
    ProviderConfig(
        "minimax", "Minimax", "https://api.minimax.chat",
        Dialect.MINIMAX, AuthType.BEARER, "Minimax official API",
    ),
    # Local inference
    ProviderConfig(
        "ollama", "Ollama (Local)", "http://localhost:11434",
        _C, AuthType.NONE, "Local, free and private",
    ),
    ProviderConfig(
        "lmstudio", "LM Studio", "http://localhost:1234",
        _C, AuthType.NONE, "Local desktop inference",
    ),
    ProviderConfig(
        "localai", "LocalAI", "http://localhost:8080",
        _C, AuthType.NONE, "Local, multi-model support",
    ),
    # Self-hosted inference servers
    ProviderConfig(
        "vllm", "vLLM Server", "http://localhost:8000",
        _C, AuthType.NONE, "High-performance inference engine",
    ),
    ProviderConfig(
        "tgi", "Text Generation Inference", "http://localhost:8080",
        _C, AuthType.NONE, "HuggingFace inference service",
    ),
    ProviderConfig(
        "sglang", "SGLang", "http://localhost:30000",
        _C, AuthType.NONE, "Structured generation language",
    ),
    # Aggregators
    ProviderConfig(
        "openrouter", "OpenRouter", "https://openrouter.ai/api/v1",
        _C, AuthType.BEARER, "Multi-model aggregation, pay-as-you-go",
    ),
    ProviderConfig(
        "together", "Together AI", "https://api.together.xyz/v1",
        _C, AuthType.BEARER, "Open source model cloud service",
    ),
    ProviderConfig(
        "groq", "Groq", "https://api.groq.com/openai/v1",
        _C, AuthType.BEARER, "Ultra-fast inference",
    ),
    ProviderConfig(
        "deepseek", "DeepSeek", "https://api.deepseek.com",
        _C, AuthType.BEARER, "DeepSeek official API",
    ),
    ProviderConfig(
        "siliconflow", "SiliconFlow", "https://api.siliconflow.cn/v1",
        _C, AuthType.BEARER, "Cloud inference service",
    ),
    ProviderConfig(
        "custom", "Custom Service", "http://localhost:8000",
        _C, AuthType.BEARER, "Custom OpenAI-compatible service",
    ),
)

PROVIDER_PRESETS: MappingProxyType[str, ProviderConfig] = MappingProxyType(
    {p.id: p for p in _PRESETS}
)

#: Providers served by the generic OpenAI-compatible dialect.
COMPATIBLE_PROVIDERS: frozenset[str] = frozenset(
    p.id for p in _PRESETS if p.dialect is Dialect.OPENAI_COMPATIBLE
)


def _m(
    model_id: str,
    name: str,
    description: str,
    provider_id: str,
    dialect_override: Dialect | None = None,
) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        provider_id=provider_id,
        default_base_url=PROVIDER_PRESETS[provider_id].default_base_url,
        display_name=name,
        description=description,
        dialect_override=dialect_override,
    )


_R = Dialect.OPENAI_RESPONSES

_MODELS: tuple[ModelDescriptor, ...] = (
    # Anthropic
    _m("claude-opus-4-5-20251101", "Claude Opus 4.5", "Most capable", "anthropic"),
    _m("claude-sonnet-4-5-20250929", "Claude Sonnet 4.5", "Balanced", "anthropic"),
    # OpenAI: GPT-5 series speaks the Responses API
    _m("gpt-5", "GPT-5", "Latest flagship model", "openai", _R),
    _m("gpt-5-mini", "GPT-5 Mini", "Fast and efficient", "openai", _R),
    _m("gpt-5-nano", "GPT-5 Nano", "Ultra-fast, lightweight", "openai", _R),
    _m("gpt-4o", "GPT-4o", "Multimodal model", "openai"),
    _m("gpt-4-turbo", "GPT-4 Turbo", "Fast GPT-4", "openai"),
    # Google
    _m("gemini-3-pro", "Gemini 3 Pro", "Google's latest model", "google"),
    # Minimax
    _m("minimax-m2.1", "Minimax M2.1", "Advanced Chinese model", "minimax"),
    # Ollama
    _m("llama3.3:latest", "Llama 3.3 8B", "Meta's open model", "ollama"),
    _m("llama3.3:70b", "Llama 3.3 70B", "Large model, needs 32GB+ RAM", "ollama"),
    _m("qwen2.5:latest", "Qwen 2.5 7B", "Alibaba's model", "ollama"),
    _m("qwen2.5:32b", "Qwen 2.5 32B", "Large Qwen model", "ollama"),
    _m("deepseek-r1:latest", "DeepSeek R1", "Strong reasoning", "ollama"),
    _m("codellama:latest", "Code Llama", "Code-specialised model", "ollama"),
    _m("mistral:latest", "Mistral 7B", "Efficient European model", "ollama"),
    _m("phi3:latest", "Phi-3", "Microsoft small model", "ollama"),
    # OpenRouter
    _m("anthropic/claude-3.5-sonnet", "Claude 3.5 Sonnet", "via OpenRouter", "openrouter"),
    _m("openai/gpt-4o", "GPT-4o", "via OpenRouter", "openrouter"),
    _m("meta-llama/llama-3.3-70b-instruct", "Llama 3.3 70B", "via OpenRouter", "openrouter"),
    _m("deepseek/deepseek-r1", "DeepSeek R1", "via OpenRouter", "openrouter"),
    # Together
    _m(
        "meta-llama/Llama-3.3-70B-Instruct-Turbo",
        "Llama 3.3 70B Turbo",
        "via Together",
        "together",
    ),
    _m("Qwen/Qwen2.5-72B-Instruct-Turbo", "Qwen 2.5 72B Turbo", "via Together", "together"),
    # Groq
    _m("llama-3.3-70b-versatile", "Llama 3.3 70B", "via Groq", "groq"),
    _m("mixtral-8x7b-32768", "Mixtral 8x7B", "via Groq", "groq"),
    # DeepSeek
    _m("deepseek-chat", "DeepSeek Chat", "DeepSeek official", "deepseek"),
    _m("deepseek-reasoner", "DeepSeek Reasoner", "Reasoning enhanced", "deepseek"),
    # SiliconFlow
    _m("Qwen/Qwen2.5-72B-Instruct", "Qwen 2.5 72B", "via SiliconFlow", "siliconflow"),
    _m("deepseek-ai/DeepSeek-V3", "DeepSeek V3", "via SiliconFlow", "siliconflow"),
    # Custom
    _m("custom-model", "Custom Model", "Enter your model ID", "custom"),
)

AVAILABLE_MODELS: MappingProxyType[str, ModelDescriptor] = MappingProxyType(
    {m.id: m for m in _MODELS}
)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def resolve(provider_id: str) -> ProviderConfig:
    """Return the preset for *provider_id*, or the anthropic preset if unknown."""
    return PROVIDER_PRESETS.get(provider_id) or PROVIDER_PRESETS[FALLBACK_PROVIDER_ID]


def get_model_info(model_id: str) -> ModelDescriptor | None:
    return AVAILABLE_MODELS.get(model_id)


def provider_of(model_id: str) -> str:
    """Provider id serving *model_id*; uncatalogued models belong to anthropic."""
    info = AVAILABLE_MODELS.get(model_id)
    return info.provider_id if info else FALLBACK_PROVIDER_ID


def default_base_url(model_id: str) -> str:
    info = AVAILABLE_MODELS.get(model_id)
    return info.default_base_url if info else FALLBACK_BASE_URL


def uses_responses_api(model_id: str) -> bool:
    """True for models flagged as Responses-dialect, or any ``gpt-5*`` id."""
    info = AVAILABLE_MODELS.get(model_id)
    if info is not None and info.dialect_override is Dialect.OPENAI_RESPONSES:
        return True
    return model_id.lower().startswith("gpt-5")


def requires_api_key(provider_id: str) -> bool:
    """False only for known presets with ``auth_type == none``."""
    preset = PROVIDER_PRESETS.get(provider_id)
    if preset is None:
        return True
    return preset.auth_type is not AuthType.NONE


def list_providers() -> list[ProviderConfig]:
    return list(_PRESETS)


def list_models(provider_id: str | None = None) -> list[ModelDescriptor]:
    if provider_id is None:
        return list(_MODELS)
    return [m for m in _MODELS if m.provider_id == provider_id]
