"""Unit tests for the error taxonomy and classifier in llm_gateway.utils.errors."""

from __future__ import annotations

import anthropic
import httpx
import openai
import pytest

from llm_gateway.utils.errors import (
    AIInvalidResponseError,
    AIProviderError,
    AIProviderUnavailableError,
    AIRateLimitError,
    AITimeoutError,
    AIUnauthorizedError,
    AIUnknownError,
    ConfigurationError,
    ErrorKind,
    LLMGatewayError,
    classify_error,
    get_retry_after,
    is_authentication_error,
    is_retryable_error,
)
from llm_gateway.utils.timeouts import DeadlineExceeded


# ======================================================================
# Shared helpers
# ======================================================================

_ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
_OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _response(status: int, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status, headers=headers, request=httpx.Request("POST", url))


def _anthropic_error(status: int, error_type: str, message: str = "error", **kw) -> anthropic.APIStatusError:
    return anthropic.APIStatusError(
        message,
        response=_response(status, _ANTHROPIC_URL, kw.get("headers")),
        body={"type": "error", "error": {"type": error_type, "message": message}},
    )


def _openai_error(status: int, code: str | None, message: str = "error", **kw) -> openai.APIStatusError:
    return openai.APIStatusError(
        message,
        response=_response(status, _OPENAI_URL, kw.get("headers")),
        body={"message": message, "type": code, "code": code},
    )


# ======================================================================
# Exception hierarchy
# ======================================================================


class TestHierarchy:
    def test_provider_prefix_in_str(self) -> None:
        err = AIRateLimitError("openai")
        assert str(err) == "[openai] AI provider rate limit exceeded"
        assert err.message == "AI provider rate limit exceeded"

    def test_configuration_error_without_provider(self) -> None:
        err = ConfigurationError("missing key")
        assert str(err) == "missing key"
        assert err.provider_name is None
        assert isinstance(err, LLMGatewayError)
        assert not isinstance(err, AIProviderError)

    @pytest.mark.parametrize(
        ("error", "kind", "status", "retryable"),
        [
            (AITimeoutError("anthropic", 10), ErrorKind.TIMEOUT, 504, True),
            (AIRateLimitError("anthropic"), ErrorKind.RATE_LIMITED, 429, True),
            (AIInvalidResponseError("anthropic"), ErrorKind.INVALID_RESPONSE, 502, False),
            (AIUnauthorizedError("anthropic"), ErrorKind.UNAUTHORIZED, 502, False),
            (AIProviderUnavailableError("anthropic"), ErrorKind.PROVIDER_UNAVAILABLE, 503, True),
            (AIUnknownError("anthropic"), ErrorKind.UNKNOWN, 500, False),
        ],
    )
    def test_kind_status_and_retryability(
        self, error: AIProviderError, kind: ErrorKind, status: int, retryable: bool
    ) -> None:
        assert error.kind is kind
        assert error.http_status == status
        assert error.retryable is retryable
        assert is_retryable_error(error) is retryable

    def test_timeout_message_carries_timeout(self) -> None:
        err = AITimeoutError("openai", 2500)
        assert err.timeout_ms == 2500
        assert "2500ms" in err.message

    def test_invalid_response_message(self) -> None:
        err = AIInvalidResponseError("openai", reason="empty choices")
        assert err.message == "Invalid response from AI provider: empty choices"

    def test_unknown_message_preserves_raw_text(self) -> None:
        err = AIUnknownError("openai", message="boom")
        assert err.message == "AI generation failed: boom"

    def test_plain_exceptions_are_not_retryable(self) -> None:
        assert is_retryable_error(RuntimeError("x")) is False


# ======================================================================
# classify_error
# ======================================================================


class TestClassifyError:
    def test_own_deadline_is_timeout(self) -> None:
        err = classify_error("anthropic", DeadlineExceeded(10))
        assert isinstance(err, AITimeoutError)
        assert err.timeout_ms == 10
        assert err.provider_name == "anthropic"

    def test_already_normalized_is_returned_unchanged(self) -> None:
        original = AIRateLimitError("openai", retry_after=3.0)
        assert classify_error("anthropic", original) is original

    def test_classification_is_idempotent(self) -> None:
        once = classify_error("openai", _openai_error(503, "server_error"))
        assert classify_error("openai", once) is once

    @pytest.mark.parametrize("provider", ["anthropic", "openai"])
    def test_429_is_rate_limited_for_every_provider(self, provider: str) -> None:
        raw = (
            _anthropic_error(429, "rate_limit_error", "Number of requests exceeded")
            if provider == "anthropic"
            else _openai_error(429, "rate_limit_exceeded", "Rate limit reached")
        )
        err = classify_error(provider, raw)
        assert isinstance(err, AIRateLimitError)
        assert err.kind is ErrorKind.RATE_LIMITED
        assert err.provider_name == provider
        assert err.original_error is raw

    def test_sdk_rate_limit_subclass(self) -> None:
        raw = anthropic.RateLimitError(
            "slow down",
            response=_response(429, _ANTHROPIC_URL),
            body=None,
        )
        assert isinstance(classify_error("anthropic", raw), AIRateLimitError)

    def test_openai_insufficient_quota(self) -> None:
        raw = _openai_error(429, "insufficient_quota", "You exceeded your current quota")
        err = classify_error("openai", raw)
        assert isinstance(err, AIRateLimitError)
        assert err.message == "AI provider quota exceeded"

    def test_rate_limit_wording_without_status(self) -> None:
        err = classify_error("openai", RuntimeError("Too Many Requests"))
        assert isinstance(err, AIRateLimitError)
        assert err.message == "AI provider rate limit exceeded"

    def test_retry_after_header_is_read(self) -> None:
        raw = _anthropic_error(429, "rate_limit_error", headers={"retry-after": "7"})
        err = classify_error("anthropic", raw)
        assert get_retry_after(err) == 7.0

    def test_retry_after_absent(self) -> None:
        err = classify_error("anthropic", _anthropic_error(429, "rate_limit_error"))
        assert get_retry_after(err) is None
        assert get_retry_after(AIUnknownError("anthropic")) is None

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_are_unauthorized(self, status: int) -> None:
        err = classify_error("anthropic", _anthropic_error(status, "authentication_error"))
        assert isinstance(err, AIUnauthorizedError)
        assert is_authentication_error(err)

    def test_openai_invalid_api_key_code(self) -> None:
        err = classify_error("openai", _openai_error(401, "invalid_api_key", "Incorrect API key"))
        assert isinstance(err, AIUnauthorizedError)
        assert err.http_status == 502

    def test_auth_wins_over_quota_wording(self) -> None:
        raw = _openai_error(403, None, "billing account disabled")
        assert isinstance(classify_error("openai", raw), AIUnauthorizedError)

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_5xx_is_unavailable(self, status: int) -> None:
        err = classify_error("openai", _openai_error(status, None, "upstream failure"))
        assert isinstance(err, AIProviderUnavailableError)

    def test_anthropic_overloaded_529(self) -> None:
        err = classify_error("anthropic", _anthropic_error(529, "overloaded_error", "Overloaded"))
        assert isinstance(err, AIProviderUnavailableError)
        assert err.retryable is True

    def test_connection_error_is_unavailable(self) -> None:
        raw = anthropic.APIConnectionError(request=httpx.Request("POST", _ANTHROPIC_URL))
        assert isinstance(classify_error("anthropic", raw), AIProviderUnavailableError)

    def test_sdk_timeout_is_unavailable_not_timeout(self) -> None:
        raw = openai.APITimeoutError(request=httpx.Request("POST", _OPENAI_URL))
        err = classify_error("openai", raw)
        assert isinstance(err, AIProviderUnavailableError)

    def test_builtin_connection_error(self) -> None:
        err = classify_error("openai", ConnectionResetError("reset by peer"))
        assert isinstance(err, AIProviderUnavailableError)

    def test_400_is_unknown_with_raw_message(self) -> None:
        raw = _openai_error(400, "context_length_exceeded", "maximum context length is 128000 tokens")
        err = classify_error("openai", raw)
        assert isinstance(err, AIUnknownError)
        assert "maximum context length" in err.message

    def test_arbitrary_exception_is_unknown(self) -> None:
        err = classify_error("anthropic", ValueError("boom"))
        assert isinstance(err, AIUnknownError)
        assert err.message == "AI generation failed: boom"
        assert err.retryable is False

    def test_empty_message_falls_back_to_class_name(self) -> None:
        err = classify_error("anthropic", KeyError())
        assert err.message == "AI generation failed: KeyError"
