"""LLM provider adapters.

Two concrete implementations of ILLMProvider (llm_gateway/interfaces/llm_provider.py):
    - AnthropicLLMProvider -- Claude Haiku via the Messages API
    - OpenAILLMProvider    -- gpt-4o-mini via Chat Completions

At startup, main.py creates one adapter per configured API key
(ANTHROPIC_API_KEY, OPENAI_API_KEY) and hands them to LLMService.
"""

from llm_gateway.providers.llm.anthropic_provider import AnthropicLLMProvider
from llm_gateway.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OpenAILLMProvider"]
