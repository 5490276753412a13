"""llm_gateway request models, re-exported for ``from llm_gateway.models import ...``."""

from __future__ import annotations

from llm_gateway.models.generation import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_MS,
    GenerationOptions,
    GenerationRequest,
)

__all__ = [
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TIMEOUT_MS",
    "GenerationOptions",
    "GenerationRequest",
]
