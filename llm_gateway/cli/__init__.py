# =============================================================================
# llm_gateway/cli/__init__.py -- CLI Module Overview
# =============================================================================
#
# Operator tooling for the gateway, run via `python -m llm_gateway.cli`.
#
#   1. GENERATE (ai.py generate)
#      Sends one prompt through the configured provider, with the same
#      retries, deadlines and error normalization the web endpoints get.
#
#   2. VALIDATE (ai.py validate)
#      Readiness check: confirms the configured API key(s) work. Exits
#      non-zero when a provider cannot be reached, so it can gate deploys.
#
# Architecture Notes:
#   - argparse, not Click/Typer, to keep the dependency set small.
#   - llm_gateway.main is imported inside the command functions so that
#     logging is configured before any module-level logger is cached.
# =============================================================================

"""CLI tools for llm_gateway."""
