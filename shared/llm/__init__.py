"""
LLM Provider Module
===================

Abstraction layer for generative-model providers used by the optional
AI-assisted cost extraction.

Supported providers:
- OpenAI GPT (default)
- Anthropic Claude

Usage:
    from shared.llm import get_llm_provider, LLMMessage

    provider = get_llm_provider()

    response = await provider.complete(
        messages=[
            LLMMessage(role="system", content="You are a compliance cost analyst."),
            LLMMessage(role="user", content="List the cost drivers of GDPR Art. 37."),
        ]
    )
    print(response.content)
"""

from shared.llm.provider import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    LLMUsage,
    MessageRole,
    get_llm_provider,
    reset_llm_provider,
    set_llm_provider,
    strip_code_fences,
)

__all__ = [
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "LLMUsage",
    "MessageRole",
    "get_llm_provider",
    "set_llm_provider",
    "reset_llm_provider",
    "strip_code_fences",
]
