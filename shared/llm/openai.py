"""
OpenAI Provider
===============

OpenAI chat completions implementation (default provider for cost
driver extraction).

Version: 0.1.0
"""

import time
from typing import Any

import openai

from shared.config import settings
from shared.llm.provider import LLMMessage, LLMProvider, LLMResponse, LLMUsage
from shared.logging import get_logger


logger = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider implementation."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (default from settings)
            model: Model to use (default from settings)
            client: Pre-built SDK client, mainly for tests
        """
        self._api_key = api_key or settings.llm.openai.api_key.get_secret_value()
        self._model = model or settings.llm.openai.model
        self._max_tokens = settings.llm.openai.max_tokens

        if client is None and not self._api_key:
            raise ValueError("OpenAI API key not configured")

        self._client = client or openai.AsyncOpenAI(api_key=self._api_key)

        logger.debug("openai_provider_initialized", model=self._model)

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a chat completion using OpenAI."""
        start_time = time.perf_counter()

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [msg.to_dict() for msg in messages],
            "temperature": temperature if temperature is not None else settings.llm.temperature,
            "max_tokens": max_tokens or self._max_tokens,
        }

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.AuthenticationError as e:
            logger.error("openai_auth_error", error=str(e))
            raise
        except openai.OpenAIError as e:
            logger.warning("openai_request_failed", error=str(e), error_type=type(e).__name__)
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000

        choice = response.choices[0] if response.choices else None
        content = (choice.message.content if choice else None) or ""

        usage = LLMUsage()
        if response.usage:
            usage = LLMUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        logger.debug(
            "openai_completion",
            model=self._model,
            tokens=usage.total_tokens,
            latency_ms=round(latency_ms, 2),
        )

        return LLMResponse(
            content=content,
            model=response.model,
            provider=self.name,
            usage=usage,
            finish_reason=choice.finish_reason if choice else None,
            latency_ms=latency_ms,
        )

    async def health_check(self) -> dict[str, Any]:
        """Check OpenAI API health by listing models."""
        try:
            start = time.perf_counter()
            await self._client.models.list()
            latency_ms = (time.perf_counter() - start) * 1000
            return {
                "status": "healthy",
                "provider": self.name,
                "model": self._model,
                "latency_ms": round(latency_ms, 2),
            }
        except openai.OpenAIError as e:
            logger.error("openai_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "provider": self.name,
                "model": self._model,
                "error": str(e),
            }
