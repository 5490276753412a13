"""Request models for text generation.

Defines Pydantic v2 models for a single generation call.  All models use
frozen config to enforce immutability: a request is built once per call
and never mutated while it moves through retries.

    Caller options  {maxTokens?, temperature?, timeout?}  → GenerationOptions
    Adapter input   prompt + defaults applied             → GenerationRequest

The result of a generation is a plain ``str``; no model is needed for it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Defaults applied at the adapter boundary when the caller leaves an
# option unspecified.
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT_MS = 30000


class GenerationOptions(BaseModel):
    """Optional per-call knobs as sent by the HTTP layer.

    Accepts both the camelCase keys used by the web client (``maxTokens``,
    ``timeout``) and snake_case field names.  ``timeout`` is in
    milliseconds.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    max_tokens: int | None = Field(default=None, gt=0, alias="maxTokens")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    timeout: int | None = Field(default=None, gt=0, alias="timeoutMs")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> GenerationOptions:
        """Build options from a loose dict, tolerating ``timeout`` as the key."""
        if not options:
            return cls()
        data = dict(options)
        if "timeout" in data and "timeoutMs" not in data:
            data["timeoutMs"] = data.pop("timeout")
        return cls.model_validate(data)


class GenerationRequest(BaseModel):
    """One text-generation call, with every default already resolved.

    ``timeout_ms`` bounds a *single attempt*; the retry engine may run
    several attempts, each with a fresh deadline of this length.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt cannot be empty")
        return value

    @classmethod
    def from_options(
        cls,
        prompt: str,
        options: GenerationOptions | Mapping[str, Any] | None = None,
        *,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> GenerationRequest:
        """Resolve caller options against the defaults.

        An explicit ``temperature=0`` is honoured (it is not treated as
        "unspecified").
        """
        if not isinstance(options, GenerationOptions):
            options = GenerationOptions.from_mapping(options)
        return cls(
            prompt=prompt,
            max_tokens=options.max_tokens if options.max_tokens is not None else DEFAULT_MAX_TOKENS,
            temperature=(
                options.temperature if options.temperature is not None else DEFAULT_TEMPERATURE
            ),
            timeout_ms=options.timeout if options.timeout is not None else default_timeout_ms,
        )
