"""Anthropic LLM provider adapter.

Wraps the ``anthropic`` async client to implement :class:`ILLMProvider`.

Key differences from the OpenAI adapter:
    - Uses Anthropic's Messages API (not chat.completions)
    - Response content is a list of blocks (may include text + tool_use),
      so we filter for text blocks and join them
    - Anthropic only accepts temperatures in [0, 1]; higher values are
      clamped here rather than rejected by the API
    - Anthropic signals overload with HTTP 529, which the classifier maps
      to PROVIDER_UNAVAILABLE like any other 5xx
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# The official Anthropic Python SDK (async version).
import anthropic
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

DEFAULT_MODEL = "claude-3-haiku-20240307"

_MAX_TEMPERATURE = 1.0
_VALIDATION_TIMEOUT_MS = 10000


class AnthropicLLMProvider(ILLMProvider):
    """LLM provider backed by the Anthropic Claude API.

    Uses Claude Haiku by default: the fastest and cheapest model, which is
    what chat and analysis endpoints need for interactive latency.
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
        # max_retries=0: retry_with_backoff is the only retry layer.
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key, max_retries=0)

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
        """Generate text via the Anthropic Messages API, retried with the AI_API profile."""
        if not isinstance(request, GenerationRequest):
            request = GenerationRequest.from_options(
                request, options, default_timeout_ms=self._default_timeout_ms
            )
        return await retry_with_backoff(lambda: self._complete(request), self._generate_retry)

    async def validate_credentials(self) -> bool:
        """Send a tiny prompt to confirm the key and connection work."""
        if not self.is_available():
            return False
        probe = GenerationRequest(
            prompt="Test",
            max_tokens=10,
            timeout_ms=_VALIDATION_TIMEOUT_MS,
        )
        try:
            await retry_with_backoff(lambda: self._create(probe), self._validate_retry)
        except AIProviderError as exc:
            logger.error(
                "anthropic_validation_failed",
                model=self._model,
                kind=exc.kind.value,
                error=str(exc),
            )
            return False
        return True

    def get_provider_name(self) -> str:
        return "anthropic"

    def is_available(self) -> bool:
        """Return ``True`` if an Anthropic API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    async def _complete(self, request: GenerationRequest) -> str:
        response = await self._create(request)
        # Anthropic responses contain a list of content blocks (text,
        # tool_use, etc.). Only non-empty text blocks count as output.
        text_blocks: list[str] = []
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", None) != "text":
                continue
            text = getattr(block, "text", None)
            if text:
                text_blocks.append(text)
        if not text_blocks:
            raise AIInvalidResponseError(
                self.get_provider_name(),
                reason="No valid text content in response",
            )
        usage = getattr(response, "usage", None)
        logger.info(
            "anthropic_completion",
            model=self._model,
            input_tokens=getattr(usage, "input_tokens", None),
            output_tokens=getattr(usage, "output_tokens", None),
        )
        return "\n".join(text_blocks)

    async def _create(self, request: GenerationRequest) -> Any:
        """Issue one Messages API call bounded by the request's deadline."""
        try:
            async with attempt_deadline(request.timeout_ms):
                return await self._client.messages.create(
                    model=self._model,
                    max_tokens=request.max_tokens,
                    messages=[{"role": "user", "content": request.prompt}],
                    temperature=min(request.temperature, _MAX_TEMPERATURE),
                )
        except Exception as exc:
            error = classify_error(self.get_provider_name(), exc)
            if error is exc:
                raise
            raise error from exc
