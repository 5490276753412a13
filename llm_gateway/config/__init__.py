"""Configuration module -- exports Settings and the YAML config helpers."""

from llm_gateway.config.loader import load_config, retry_configs_from_config
from llm_gateway.config.settings import SUPPORTED_PROVIDERS, Settings

__all__ = ["SUPPORTED_PROVIDERS", "Settings", "load_config", "retry_configs_from_config"]
