"""Library settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK (Junior Developer Guide) ───────────────────────
#
# pydantic-settings reads configuration from TWO sources (in priority order):
#
#   1. **Environment variables** -- e.g., ANTHROPIC_API_KEY=sk-ant-abc123
#      (highest priority -- always wins)
#   2. **.env file** -- key=value lines in the project root .env file
#      (lower priority -- used for local development)
#
# The mapping is automatic: field name `anthropic_api_key` maps to env var
# `ANTHROPIC_API_KEY`.
#
# An empty API key means "provider not configured".  Whether that is fatal
# is decided at startup by llm_gateway.main, never per call.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS = ("anthropic", "openai")


class Settings(BaseSettings):
    """llm_gateway settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === AI Providers ===
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    # Empty = pick the first configured provider (anthropic, then openai).
    ai_provider: str = ""
    anthropic_model: str = "claude-3-haiku-20240307"
    openai_model: str = "gpt-4o-mini"

    # Per-attempt timeout used when the caller does not pass one.
    ai_default_timeout_ms: int = Field(default=30000, gt=0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return the provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        return providers
