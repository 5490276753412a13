"""Custom exception hierarchy and error classifier for llm_gateway.

All library exceptions inherit from :class:`LLMGatewayError`, which carries
an optional ``provider_name`` so error handlers can identify which AI
backend (e.g. "anthropic", "openai") caused the failure.

The hierarchy:

    LLMGatewayError  (base -- catch-all for any llm_gateway error)
    +-- ConfigurationError            (startup / missing API key)
    +-- AIProviderError               (normalized provider failure, has ``kind``)
        +-- AITimeoutError            (our own per-attempt deadline fired)
        +-- AIRateLimitError          (429, quota exhausted)
        +-- AIInvalidResponseError    (response arrived without usable text)
        +-- AIUnauthorizedError       (401/403, bad API key)
        +-- AIProviderUnavailableError (5xx, overloaded, connection failure)
        +-- AIUnknownError            (anything else, raw message preserved)

The ``AIProviderError`` family is CLOSED: :func:`classify_error` maps every
SDK exception into exactly one of the six kinds above, so callers never
need to import ``anthropic`` or ``openai`` to handle failures.

# ─── HOW CLASSIFICATION WORKS (Junior Developer Guide) ─────────────────
#
# Each adapter wraps its SDK call like this:
#
#     try:
#         response = await client.messages.create(...)
#     except Exception as exc:
#         raise classify_error("anthropic", exc) from exc
#
# classify_error() inspects the raw exception (status code, SDK error
# type, message text, exception class) and returns one of the normalized
# error classes.  "from exc" keeps the original SDK traceback attached as
# __cause__ for debugging, while the caller only ever sees our types.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

import anthropic
import httpx
import openai

from llm_gateway.utils.timeouts import DeadlineExceeded


class LLMGatewayError(Exception):
    """Base exception for all llm_gateway errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which AI backend triggered the error.
    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[openai] AI provider rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(LLMGatewayError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Normalized provider errors
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    """The closed set of normalized failure kinds."""

    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    INVALID_RESPONSE = "invalid_response"
    UNAUTHORIZED = "unauthorized"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    UNKNOWN = "unknown"


# Status codes the HTTP layer should answer with for each kind.  The core
# never formats responses itself; it only exposes this mapping.
_HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.TIMEOUT: 504,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.INVALID_RESPONSE: 502,
    ErrorKind.UNAUTHORIZED: 502,
    ErrorKind.PROVIDER_UNAVAILABLE: 503,
    ErrorKind.UNKNOWN: 500,
}

_RETRYABLE_KINDS = frozenset(
    {ErrorKind.TIMEOUT, ErrorKind.RATE_LIMITED, ErrorKind.PROVIDER_UNAVAILABLE}
)


class AIProviderError(LLMGatewayError):
    """Base class for normalized AI provider failures.

    Unlike :class:`LLMGatewayError`, ``provider_name`` is mandatory here:
    a normalized error is always attributable to exactly one provider.
    Subclasses pin the ``kind`` class attribute.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        provider_name: str,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._original_error = original_error

    @property
    def provider_name(self) -> str:
        return self._provider_name or ""

    @property
    def original_error(self) -> BaseException | None:
        return self._original_error

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS_BY_KIND[self.kind]

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE_KINDS


class AITimeoutError(AIProviderError):
    """Raised when the adapter's own per-attempt deadline fires."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, provider_name: str, timeout_ms: int) -> None:
        super().__init__(
            message=f"AI request timed out after {timeout_ms}ms",
            provider_name=provider_name,
        )
        self.timeout_ms = timeout_ms


class AIRateLimitError(AIProviderError):
    """Raised when the provider throttles us (429) or the quota is exhausted.

    ``retry_after`` holds the provider's ``retry-after`` hint in seconds
    when one was sent.
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        provider_name: str,
        message: str = "AI provider rate limit exceeded",
        retry_after: float | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message=message,
            provider_name=provider_name,
            original_error=original_error,
        )
        self.retry_after = retry_after


class AIInvalidResponseError(AIProviderError):
    """Raised when a response arrived but carried no usable text content."""

    kind = ErrorKind.INVALID_RESPONSE

    def __init__(
        self,
        provider_name: str,
        reason: str = "No valid text content in response",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message=f"Invalid response from AI provider: {reason}",
            provider_name=provider_name,
            original_error=original_error,
        )
        self.reason = reason


class AIUnauthorizedError(AIProviderError):
    """Raised when the provider rejects the API key (401/403)."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(
        self,
        provider_name: str,
        message: str = "Invalid API key for AI provider",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message=message,
            provider_name=provider_name,
            original_error=original_error,
        )


class AIProviderUnavailableError(AIProviderError):
    """Raised on 5xx responses, overload, or connection-level failures."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(
        self,
        provider_name: str,
        message: str = "AI provider service temporarily unavailable",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message=message,
            provider_name=provider_name,
            original_error=original_error,
        )


class AIUnknownError(AIProviderError):
    """Fallback for failures that fit no other kind."""

    kind = ErrorKind.UNKNOWN

    def __init__(
        self,
        provider_name: str,
        message: str = "Unknown error",
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message=f"AI generation failed: {message}",
            provider_name=provider_name,
            original_error=original_error,
        )


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

# SDK-side timeouts (APITimeoutError) subclass APIConnectionError in both
# SDKs, so they land here as connection-level failures -- only our own
# deadline produces a TIMEOUT.
_CONNECTION_ERRORS: tuple[type[BaseException], ...] = (
    anthropic.APIConnectionError,
    openai.APIConnectionError,
    httpx.TransportError,
    ConnectionError,
    TimeoutError,
)

_RESPONSE_VALIDATION_ERRORS: tuple[type[BaseException], ...] = (
    anthropic.APIResponseValidationError,
    openai.APIResponseValidationError,
)

_AUTH_ERROR_TYPES = {"authentication_error", "permission_error", "invalid_api_key"}
_RATE_LIMIT_ERROR_TYPES = {"rate_limit_error", "rate_limit_exceeded"}
_QUOTA_ERROR_TYPES = {"insufficient_quota", "billing_hard_limit_reached"}
_OVERLOADED_ERROR_TYPES = {"overloaded_error", "api_error", "server_error"}

_RATE_LIMIT_PATTERN = re.compile(r"rate[\s_-]?limit|too many requests", re.IGNORECASE)
_QUOTA_PATTERN = re.compile(r"\bquota\b|\bbilling\b", re.IGNORECASE)


def classify_error(provider_name: str, raw_error: BaseException) -> AIProviderError:
    """Map an arbitrary exception raised while calling a provider to the taxonomy.

    Rules are applied in priority order (first match wins):

    1. Our own attempt deadline fired -> :class:`AITimeoutError`.
    2. Already normalized -> returned unchanged (idempotent).
    3. 401/403 or an auth error type -> :class:`AIUnauthorizedError`.
    4. 429, rate-limit/quota wording -> :class:`AIRateLimitError`.
    5. 5xx or connection-level failure -> :class:`AIProviderUnavailableError`.
    6. Response arrived but failed validation -> :class:`AIInvalidResponseError`.
    7. Anything else -> :class:`AIUnknownError` with the raw message.

    Parameters
    ----------
    provider_name:
        The provider the failing call was made against.
    raw_error:
        Whatever the SDK (or our own code) raised.

    Returns
    -------
    AIProviderError
        The normalized error.  Pure: nothing is logged or raised here.
    """
    if isinstance(raw_error, DeadlineExceeded):
        return AITimeoutError(provider_name, raw_error.timeout_ms)

    if isinstance(raw_error, AIProviderError):
        return raw_error

    status = _read_status_code(raw_error)
    error_types = _read_error_types(raw_error)
    detail = _exception_detail(raw_error)

    if status in (401, 403) or error_types & _AUTH_ERROR_TYPES:
        return AIUnauthorizedError(provider_name, original_error=raw_error)

    # OpenAI reports an exhausted quota as a 429 with code
    # "insufficient_quota", so quota is checked together with throttling.
    quota_exceeded = bool(
        status == 402 or error_types & _QUOTA_ERROR_TYPES or _QUOTA_PATTERN.search(detail)
    )
    if (
        quota_exceeded
        or status == 429
        or error_types & _RATE_LIMIT_ERROR_TYPES
        or _RATE_LIMIT_PATTERN.search(detail)
    ):
        return AIRateLimitError(
            provider_name,
            message=(
                "AI provider quota exceeded"
                if quota_exceeded
                else "AI provider rate limit exceeded"
            ),
            retry_after=_read_retry_after(raw_error),
            original_error=raw_error,
        )

    if (
        (status is not None and status >= 500)
        or error_types & _OVERLOADED_ERROR_TYPES
        or isinstance(raw_error, _CONNECTION_ERRORS)
    ):
        return AIProviderUnavailableError(provider_name, original_error=raw_error)

    if isinstance(raw_error, _RESPONSE_VALIDATION_ERRORS):
        return AIInvalidResponseError(provider_name, reason=detail, original_error=raw_error)

    return AIUnknownError(provider_name, message=detail, original_error=raw_error)


def is_retryable_error(error: BaseException) -> bool:
    """Return ``True`` for failures likely to clear on retry.

    Only TIMEOUT, RATE_LIMITED and PROVIDER_UNAVAILABLE qualify; a bad key
    or an empty response will fail the same way again.
    """
    return isinstance(error, AIProviderError) and error.retryable


def is_authentication_error(error: BaseException) -> bool:
    return isinstance(error, AIUnauthorizedError)


def get_retry_after(error: BaseException) -> float | None:
    """Return the provider's retry-after hint (seconds), if any."""
    if isinstance(error, AIRateLimitError):
        return error.retry_after
    return None


# ---------------------------------------------------------------------------
# Private helpers -- duck-typed readers so both SDKs (and plain test doubles)
# are handled without isinstance checks against every SDK class.
# ---------------------------------------------------------------------------


def _exception_detail(exc: BaseException) -> str:
    text = str(exc).strip()
    if text:
        return " ".join(text.split())
    return exc.__class__.__name__


def _read_status_code(exc: BaseException) -> int | None:
    for key in ("status_code", "status", "http_status"):
        value = getattr(exc, key, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    if response is not None:
        nested = getattr(response, "status_code", None)
        if isinstance(nested, int):
            return nested
    return None


def _read_error_types(exc: BaseException) -> set[str]:
    """Collect SDK error ``type`` / ``code`` strings from the exception.

    OpenAI exposes them as attributes; Anthropic nests them in the body as
    ``{"type": "error", "error": {"type": "rate_limit_error", ...}}``.
    """
    found: set[str] = set()
    for key in ("type", "code"):
        value = getattr(exc, key, None)
        if isinstance(value, str):
            found.add(value.lower())
    body = getattr(exc, "body", None)
    if isinstance(body, Mapping):
        nested = body.get("error")
        for source in (body, nested):
            if isinstance(source, Mapping):
                for key in ("type", "code"):
                    value = source.get(key)
                    if isinstance(value, str):
                        found.add(value.lower())
    # "error" is the envelope type of every Anthropic error body.
    found.discard("error")
    return found


def _read_retry_after(exc: BaseException) -> float | None:
    headers: Any = getattr(exc, "headers", None)
    if headers is None:
        response = getattr(exc, "response", None)
        headers = getattr(response, "headers", None)
    if headers is None:
        return None
    try:
        value = headers.get("retry-after")
    except AttributeError:
        return None
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
