"""Utility modules for llm_gateway.

Available utility modules (all re-exported here for convenience):

- **errors** -- Exception hierarchy rooted at LLMGatewayError, plus the
  pure classifier that maps raw SDK failures onto the six normalized kinds.
- **retry** -- Named retry profiles and the backoff executor that every
  provider call runs through.
- **timeouts** -- Per-attempt deadline that tells our own timeout apart
  from caller cancellation.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Exception hierarchy and classifier ------------------------------------
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

# -- Structured logging setup ----------------------------------------------
from llm_gateway.utils.logging import configure_logging, get_logger

# -- Retry engine ----------------------------------------------------------
from llm_gateway.utils.retry import (
    RetryConfig,
    RetryConfigs,
    compute_backoff_delay,
    retry_with_backoff,
    with_retry,
)

# -- Attempt deadlines -----------------------------------------------------
from llm_gateway.utils.timeouts import DeadlineExceeded, attempt_deadline

__all__ = [
    "AIInvalidResponseError",
    "AIProviderError",
    "AIProviderUnavailableError",
    "AIRateLimitError",
    "AITimeoutError",
    "AIUnauthorizedError",
    "AIUnknownError",
    "ConfigurationError",
    "DeadlineExceeded",
    "ErrorKind",
    "LLMGatewayError",
    "RetryConfig",
    "RetryConfigs",
    "attempt_deadline",
    "classify_error",
    "compute_backoff_delay",
    "configure_logging",
    "get_logger",
    "get_retry_after",
    "is_authentication_error",
    "is_retryable_error",
    "retry_with_backoff",
    "with_retry",
]
