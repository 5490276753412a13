"""llm_gateway composition root.

Wires settings, retry profiles, provider adapters, and the facade together.
The host application (HTTP layer, CLI, workers) calls
:func:`build_llm_service` once at startup and keeps the returned
:class:`LLMService` for the lifetime of the process.

Missing or inconsistent configuration raises :class:`ConfigurationError`
here, at startup, so no request ever discovers a missing API key.
"""

from __future__ import annotations

import structlog

from llm_gateway.config.loader import load_config, retry_configs_from_config
from llm_gateway.config.settings import SUPPORTED_PROVIDERS, Settings
from llm_gateway.interfaces.llm_provider import ILLMProvider
from llm_gateway.providers.llm.anthropic_provider import AnthropicLLMProvider
from llm_gateway.providers.llm.openai_provider import OpenAILLMProvider
from llm_gateway.services.llm_service import LLMService
from llm_gateway.utils.errors import ConfigurationError
from llm_gateway.utils.retry import RetryConfig, RetryConfigs

_logger: structlog.BoundLogger = structlog.get_logger(logger_name=__name__)

_API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


# ---------------------------------------------------------------------------
# Provider construction
# ---------------------------------------------------------------------------


def build_llm_providers(
    app_settings: Settings,
    retry_configs: dict[str, RetryConfig] | None = None,
) -> dict[str, ILLMProvider]:
    """Build one adapter per provider that has an API key.

    Order is the selection priority: Anthropic, then OpenAI.
    """
    profiles = retry_configs or RetryConfigs.by_name()
    generate_retry = profiles.get(RetryConfigs.AI_API.name, RetryConfigs.AI_API)
    validate_retry = profiles.get(RetryConfigs.FAST_OPERATION.name, RetryConfigs.FAST_OPERATION)

    providers: dict[str, ILLMProvider] = {}
    if app_settings.anthropic_api_key:
        providers["anthropic"] = AnthropicLLMProvider(
            app_settings.anthropic_api_key,
            app_settings.anthropic_model,
            default_timeout_ms=app_settings.ai_default_timeout_ms,
            generate_retry=generate_retry,
            validate_retry=validate_retry,
        )
    if app_settings.openai_api_key:
        providers["openai"] = OpenAILLMProvider(
            app_settings.openai_api_key,
            app_settings.openai_model,
            default_timeout_ms=app_settings.ai_default_timeout_ms,
            generate_retry=generate_retry,
            validate_retry=validate_retry,
        )
    return providers


def _select_active_provider(
    requested: str,
    providers: dict[str, ILLMProvider],
) -> str:
    """Resolve the provider that will serve calls.

    An explicit choice must be supported and have a key; with no explicit
    choice the first configured provider wins.
    """
    if requested:
        if requested not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unknown AI provider '{requested}' "
                f"(supported: {', '.join(SUPPORTED_PROVIDERS)})"
            )
        if requested not in providers:
            raise ConfigurationError(
                f"AI provider '{requested}' selected but {_API_KEY_ENV[requested]} is not set",
                provider_name=requested,
            )
        return requested

    if not providers:
        raise ConfigurationError(
            "AI configuration error: Neither ANTHROPIC_API_KEY nor OPENAI_API_KEY is set"
        )
    return next(iter(providers))


# ---------------------------------------------------------------------------
# Facade construction
# ---------------------------------------------------------------------------


def build_llm_service(
    custom_settings: Settings | None = None,
    config_path: str = "config/config.yaml",
) -> LLMService:
    """Build the provider facade from settings and the YAML config.

    Raises:
        ConfigurationError: If no usable provider is configured, the selected
            provider has no key, or a retry override is invalid.
    """
    s = custom_settings or Settings()
    config = load_config(config_path, settings=s)
    retry_configs = retry_configs_from_config(config)

    providers = build_llm_providers(s, retry_configs)
    requested = str((config.get("ai") or {}).get("provider") or "").strip().lower()
    active = _select_active_provider(requested, providers)

    _logger.info(
        "llm_service_ready",
        active_provider=active,
        configured=sorted(providers),
        generate_attempts=retry_configs[RetryConfigs.AI_API.name].max_attempts,
    )
    return LLMService(providers, active)
