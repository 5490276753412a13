"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY (Junior Developer Guide) ──────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  -- Static defaults checked into the repo
#   2. .env file           -- Local developer overrides (not committed)
#   3. Environment vars    -- Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the
# environment-based values on top.  Retry profiles can only be tuned from
# YAML (ai.retry.<profile>); everything else about the providers comes from
# the environment through Settings.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from llm_gateway.config.settings import Settings
from llm_gateway.utils.errors import ConfigurationError
from llm_gateway.utils.retry import RetryConfig, RetryConfigs


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read otherwise.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "ai": {
            "available_providers": settings.get_available_llm_providers(),
            "default_timeout_ms": settings.ai_default_timeout_ms,
        },
        "app": {
            "env": settings.app_env,
        },
        "logging": {
            "level": settings.log_level,
        },
    }
    # An explicit AI_PROVIDER wins over the YAML default; an empty one
    # leaves the YAML value (if any) in place.
    if settings.ai_provider:
        env_overrides["ai"]["provider"] = settings.ai_provider

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def retry_configs_from_config(config: dict) -> dict[str, RetryConfig]:
    """Return the canonical retry profiles with ``ai.retry`` overrides applied.

    Example YAML::

        ai:
          retry:
            ai_api:
              max_attempts: 5
              max_delay_ms: 12000

    Raises:
        ConfigurationError: If a profile name is unknown or an override
            produces an invalid profile.
    """
    profiles = RetryConfigs.by_name()
    overrides = (config.get("ai") or {}).get("retry") or {}
    for name, values in overrides.items():
        if name not in profiles:
            raise ConfigurationError(
                f"Unknown retry profile '{name}' (known: {', '.join(sorted(profiles))})"
            )
        merged: dict[str, Any] = {**profiles[name].model_dump(), **(values or {}), "name": name}
        try:
            profiles[name] = RetryConfig.model_validate(merged)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid retry profile '{name}': {exc}") from exc
    return profiles


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
