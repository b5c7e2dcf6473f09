"""
Generative Model Client
=======================

Single request/response calls to the configured LLM provider with a
bounded exponential-backoff retry. Failures come back as ``Err`` so the
estimation pipeline can degrade to its deterministic path.

Version: 0.1.0
"""

from collections.abc import Callable

import anthropic
import openai
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from services.cost_estimation.parsing import Err, Ok, Result
from shared.config import settings
from shared.llm import LLMMessage, LLMProvider, get_llm_provider
from shared.logging import get_logger


logger = get_logger(__name__)

# SDK timeout errors subclass APIConnectionError.
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    openai.RateLimitError,
    openai.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    ConnectionError,
    TimeoutError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    logger.warning(
        "llm_retry",
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(outcome.exception()) if outcome else None,
    )


class GenerativeClient:
    """
    Bounded-retry wrapper around an LLM provider.

    The provider is resolved lazily so that a missing API key surfaces as
    an ``Err`` on first use instead of an exception at construction.
    """

    def __init__(
        self,
        provider: LLMProvider | None = None,
        provider_factory: Callable[[], LLMProvider] = get_llm_provider,
        max_attempts: int | None = None,
        wait: wait_base | None = None,
    ) -> None:
        """
        Args:
            provider: Explicit provider (tests, custom backends)
            provider_factory: Used when no provider is given
            max_attempts: Attempt cap (default settings.llm.max_retries)
            wait: Backoff strategy (default 1s doubling from settings)
        """
        self._provider = provider
        self._provider_factory = provider_factory
        self.max_attempts = max_attempts or settings.llm.max_retries
        self._wait = wait or wait_exponential(multiplier=settings.llm.retry_base_seconds)

    def _resolve_provider(self) -> Result[LLMProvider]:
        if self._provider is None:
            try:
                self._provider = self._provider_factory()
            except ValueError as e:
                logger.warning("llm_provider_unavailable", error=str(e))
                return Err(f"provider unavailable: {e}")
        return Ok(self._provider)

    async def request(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> Result[str]:
        """
        Send one system + user prompt pair and return the raw text.

        Rate-limit and connection errors are retried up to
        ``max_attempts`` times. Any other provider error is not retried.
        Either way the failure is logged and returned as ``Err``.
        """
        resolved = self._resolve_provider()
        if isinstance(resolved, Err):
            return resolved
        provider = resolved.value

        messages = [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=user_prompt),
        ]

        attempts = 0
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                stop=stop_after_attempt(self.max_attempts),
                wait=self._wait,
                before_sleep=_log_retry,
            ):
                with attempt:
                    attempts += 1
                    response = await provider.complete(
                        messages,
                        temperature=temperature,
                        max_tokens=max_tokens,
                    )
        except RetryError as e:
            return self._failed(provider, e.last_attempt.exception(), attempts)
        except Exception as e:
            return self._failed(provider, e, attempts)

        return Ok(response.content)

    @staticmethod
    def _failed(provider: LLMProvider, cause: BaseException | None, attempts: int) -> Err:
        logger.error(
            "llm_request_failed",
            provider=provider.name,
            attempts=attempts,
            error=str(cause),
            error_type=type(cause).__name__,
        )
        return Err(f"{type(cause).__name__}: {cause}")
