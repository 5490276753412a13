"""Provider facade: the single entry point callers depend on.

:class:`LLMService` holds one adapter per configured backend and routes
every call to the *active* one.  It exposes the same ``generate`` /
``validate_credentials`` contract as a single adapter, so chat and analysis
endpoints never know how many providers exist.

Selection is static: the active provider is fixed at construction from
configuration.  A failing active provider does not fall back to another
one; :meth:`switch_provider` is an explicit operator action.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import structlog

from llm_gateway.interfaces.llm_provider import ILLMProvider
from llm_gateway.models.generation import GenerationOptions, GenerationRequest
from llm_gateway.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


class LLMService:
    """Route generation and validation to the configured provider.

    Parameters
    ----------
    providers:
        Adapter per provider name, e.g. ``{"anthropic": AnthropicLLMProvider(...)}``.
    active:
        Name of the provider that serves calls.

    Raises
    ------
    ConfigurationError
        If ``providers`` is empty or ``active`` is not one of its keys.
    """

    def __init__(self, providers: Mapping[str, ILLMProvider], active: str) -> None:
        if not providers:
            raise ConfigurationError("No AI providers configured")
        self._providers: dict[str, ILLMProvider] = dict(providers)
        self._active = self._require(active)

    async def generate(
        self,
        request: GenerationRequest | str,
        options: GenerationOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Generate text with the active provider.

        Raises the active provider's normalized ``AIProviderError`` unchanged.
        """
        return await self._providers[self._active].generate(request, options)

    async def validate_credentials(self) -> bool:
        """Validate the active provider; never raises for provider failures."""
        return await self._providers[self._active].validate_credentials()

    async def validate_all(self) -> dict[str, bool]:
        """Validate every configured provider concurrently (readiness checks)."""
        names = list(self._providers)
        results = await asyncio.gather(
            *(self._providers[name].validate_credentials() for name in names)
        )
        return dict(zip(names, results))

    def get_provider_name(self) -> str:
        return self._active

    def available_providers(self) -> list[str]:
        return sorted(self._providers)

    def switch_provider(self, name: str) -> None:
        """Point the facade at another configured provider."""
        new_active = self._require(name)
        logger.info("llm_provider_switched", previous=self._active, current=new_active)
        self._active = new_active

    def _require(self, name: str) -> str:
        if name not in self._providers:
            raise ConfigurationError(
                f"AI provider '{name}' is not configured "
                f"(configured: {', '.join(sorted(self._providers))})",
                provider_name=name,
            )
        return name
