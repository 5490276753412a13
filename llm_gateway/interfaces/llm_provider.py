"""Abstract base class for AI text-generation providers.

Defines the contract every backend adapter implements.  Callers (the
facade in ``llm_gateway/services/llm_service.py`` and, through it, the
chat/analysis endpoints) depend only on this interface, never on the
``anthropic`` or ``openai`` SDKs directly.
"""

from __future__ import annotations

# An adapter missing any abstractmethod below fails with TypeError when
# main.py instantiates it, i.e. at startup rather than on the first request.
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from llm_gateway.models.generation import GenerationOptions, GenerationRequest


# Concrete implementations: AnthropicLLMProvider, OpenAILLMProvider
# Located in: llm_gateway/providers/llm/
class ILLMProvider(ABC):
    """Contract for AI text-generation backends.

    Each instance owns exactly one SDK client, built once from an API key
    and never mutated, so one instance may serve any number of concurrent
    calls.
    """

    @abstractmethod
    async def generate(
        self,
        request: GenerationRequest | str,
        options: GenerationOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Generate text for a single prompt.

        Parameters
        ----------
        request:
            A fully built :class:`GenerationRequest`, or a bare prompt
            string; in the latter case ``options`` are resolved against the
            defaults (1024 tokens, temperature 0.7) at this boundary.
        options:
            Caller options (``maxTokens``, ``temperature``, ``timeout`` in
            ms).  Ignored when ``request`` is already a GenerationRequest.

        Returns
        -------
        str
            The provider's text output.  Never empty: a response with no
            usable text raises instead.

        Raises
        ------
        llm_gateway.utils.errors.AIProviderError
            The normalized error of the final failed attempt.
        """

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a minimal generation call to confirm the connection works.

        Returns
        -------
        bool
            ``True`` if the provider answered; ``False`` once every attempt
            failed.  Never raises for provider failures; this is a
            health/readiness signal, not a hard failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the stable provider identifier, e.g. ``"anthropic"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured.

        Unlike :meth:`validate_credentials`, this makes no network call.
        """
