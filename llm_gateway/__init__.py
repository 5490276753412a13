"""llm_gateway -- provider-agnostic text generation for chat and analysis endpoints.

The public surface is small: build an :class:`~llm_gateway.services.llm_service.LLMService`
with :func:`llm_gateway.main.build_llm_service`, call ``generate`` /
``validate_credentials`` on it, and handle the normalized
:class:`~llm_gateway.utils.errors.AIProviderError` family.
"""

__version__ = "0.1.0"
