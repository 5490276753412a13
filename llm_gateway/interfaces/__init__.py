"""Public interface definitions for AI text-generation backends.

Every backend is reached exclusively through :class:`ILLMProvider`.
Concrete adapters implement it and are wired up in ``llm_gateway/main.py``,
so swapping Anthropic for OpenAI never touches calling code, and unit tests
can inject a mock provider without real API calls.

CONCRETE PROVIDER MAP:
    Interface       →  Concrete implementations (in llm_gateway/providers/llm/)
    ──────────────────────────────────────────────────────────────────────
    ILLMProvider    →  AnthropicLLMProvider, OpenAILLMProvider
"""

from llm_gateway.interfaces.llm_provider import ILLMProvider

__all__ = ["ILLMProvider"]
