"""Shared pytest fixtures for the llm_gateway test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from llm_gateway.interfaces.llm_provider import ILLMProvider
from llm_gateway.utils.retry import RetryConfig, RetryConfigs

# Environment variables Settings reads; cleared so a developer's shell or
# CI secrets never leak into unit tests.
_SETTINGS_ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "AI_PROVIDER",
    "ANTHROPIC_MODEL",
    "OPENAI_MODEL",
    "AI_DEFAULT_TIMEOUT_MS",
    "APP_ENV",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Retry profiles without real sleeping
# ---------------------------------------------------------------------------


def zero_delay(config: RetryConfig) -> RetryConfig:
    """Copy a profile keeping its attempt budget but with no backoff delay."""
    return config.model_copy(update={"base_delay_ms": 0, "max_delay_ms": 0, "jitter": False})


@pytest.fixture
def fast_ai_api() -> RetryConfig:
    return zero_delay(RetryConfigs.AI_API)


@pytest.fixture
def fast_validate() -> RetryConfig:
    return zero_delay(RetryConfigs.FAST_OPERATION)


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


# ---------------------------------------------------------------------------
# Mock provider fixtures
# ---------------------------------------------------------------------------


def make_mock_provider(name: str, text: str = "generated text", valid: bool = True) -> Any:
    """Mock ILLMProvider with configurable generate()/validate_credentials()."""
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = name
    mock.is_available.return_value = True
    mock.generate = AsyncMock(return_value=text)
    mock.validate_credentials = AsyncMock(return_value=valid)
    return mock


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """Mock ILLMProvider named "mock-llm".

    Override with ``mock_llm_provider.generate.side_effect = ...`` for
    failure scenarios.
    """
    return make_mock_provider("mock-llm")


@pytest.fixture
def provider_factory() -> Any:
    """Return :func:`make_mock_provider` for tests that need several providers."""
    return make_mock_provider
