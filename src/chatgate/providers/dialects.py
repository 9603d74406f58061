"""Dialect table — the closed set of wire protocols chatgate speaks."""

from __future__ import annotations

import functools
from types import MappingProxyType

from chatgate.providers import anthropic, compatible, google, minimax, openai
from chatgate.providers.base import AuthType, Dialect, DialectSpec

DIALECTS: MappingProxyType[Dialect, DialectSpec] = MappingProxyType(
    {
        Dialect.ANTHROPIC: DialectSpec(
            Dialect.ANTHROPIC,
            anthropic.build_request,
            anthropic.fold_event,
            anthropic.extract_text,
        ),
        Dialect.OPENAI_CHAT: DialectSpec(
            Dialect.OPENAI_CHAT,
            openai.build_chat_request,
            openai.fold_chat_event,
            openai.extract_chat_text,
        ),
        Dialect.OPENAI_RESPONSES: DialectSpec(
            Dialect.OPENAI_RESPONSES,
            openai.build_responses_request,
            openai.fold_responses_event,
            openai.extract_responses_text,
        ),
        Dialect.GOOGLE: DialectSpec(
            Dialect.GOOGLE,
            google.build_request,
            google.fold_event,
            google.extract_text,
        ),
        Dialect.MINIMAX: DialectSpec(
            Dialect.MINIMAX,
            minimax.build_request,
            minimax.fold_event,
            minimax.extract_text,
        ),
        Dialect.OPENAI_COMPATIBLE: DialectSpec(
            Dialect.OPENAI_COMPATIBLE,
            compatible.build_request,
            compatible.fold_event,
            compatible.extract_text,
        ),
    }
)


def compatible_dialect(auth_type: AuthType) -> DialectSpec:
    """The generic compatible dialect bound to one provider's auth rule."""
    return DialectSpec(
        Dialect.OPENAI_COMPATIBLE,
        functools.partial(compatible.build_request, auth_type=auth_type),
        compatible.fold_event,
        compatible.extract_text,
    )
