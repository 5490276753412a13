"""OpenAI LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
Same shape as the Anthropic adapter; only the SDK call and the text
extraction differ:

    - Uses the Chat Completions API
    - The text lives in ``choices[0].message.content``; a missing choice or
      a ``None``/empty content is an INVALID_RESPONSE, never an empty string
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# The official OpenAI Python SDK (async version).
import openai
import structlog

from llm_gateway.interfaces.llm_provider import ILLMProvider
from llm_gateway.models.generation import (
    DEFAULT_TIMEOUT_MS,
    GenerationOptions,
    GenerationRequest,
)
from llm_gateway.utils.errors import AIInvalidResponseError, AIProviderError, classify_error
from llm_gateway.utils.retry import RetryConfig, RetryConfigs, retry_with_backoff
from llm_gateway.utils.timeouts import attempt_deadline

logger = structlog.get_logger(logger_name=__name__)

# Fast and cheap, the OpenAI counterpart of Claude Haiku.
DEFAULT_MODEL = "gpt-4o-mini"

_VALIDATION_TIMEOUT_MS = 10000


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by the OpenAI API.

    The rest of the library never imports or calls ``openai`` directly;
    every SDK failure leaves this class as a normalized AIProviderError.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        *,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        generate_retry: RetryConfig = RetryConfigs.AI_API,
        validate_retry: RetryConfig = RetryConfigs.FAST_OPERATION,
    ) -> None:
        self._api_key = api_key
        self._model = model or DEFAULT_MODEL
        self._default_timeout_ms = default_timeout_ms
        self._generate_retry = generate_retry
        self._validate_retry = validate_retry
        self._client = openai.AsyncOpenAI(api_key=self._api_key, max_retries=0)

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def generate(
        self,
        request: GenerationRequest | str,
        options: GenerationOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Generate text via the Chat Completions API, retried with the AI_API profile."""
        if not isinstance(request, GenerationRequest):
            request = GenerationRequest.from_options(
                request, options, default_timeout_ms=self._default_timeout_ms
            )
        return await retry_with_backoff(lambda: self._complete(request), self._generate_retry)

    async def validate_credentials(self) -> bool:
        """Send a tiny completion request to confirm the key and connection work.

        Retried with the FAST_OPERATION profile; any failure that survives
        the retries is logged and reported as ``False``.
        """
        if not self.is_available():
            return False
        probe = GenerationRequest(
            prompt="Test",
            max_tokens=5,
            timeout_ms=_VALIDATION_TIMEOUT_MS,
        )
        try:
            await retry_with_backoff(lambda: self._create(probe), self._validate_retry)
        except AIProviderError as exc:
            logger.error(
                "openai_validation_failed",
                model=self._model,
                kind=exc.kind.value,
                error=str(exc),
            )
            return False
        return True

    def get_provider_name(self) -> str:
        return "openai"

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    async def _complete(self, request: GenerationRequest) -> str:
        response = await self._create(request)
        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not content:
            raise AIInvalidResponseError(
                self.get_provider_name(),
                reason="No valid text content in response",
            )
        usage = getattr(response, "usage", None)
        logger.info(
            "openai_completion",
            model=self._model,
            tokens=getattr(usage, "total_tokens", None),
        )
        return content

    async def _create(self, request: GenerationRequest) -> Any:
        """Issue one Chat Completions call bounded by the request's deadline."""
        try:
            async with attempt_deadline(request.timeout_ms):
                return await self._client.chat.completions.create(
                    model=self._model,
                    messages=[{"role": "user", "content": request.prompt}],
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                )
        except Exception as exc:
            error = classify_error(self.get_provider_name(), exc)
            if error is exc:
                raise
            raise error from exc
