# =============================================================================
# llm_gateway/cli/ai.py -- Generate / Validate Commands
# =============================================================================
#
# Typical usage:
#   python -m llm_gateway.cli generate "Summarise this set list"
#   python -m llm_gateway.cli generate "Hi" --provider openai --max-tokens 64
#   python -m llm_gateway.cli validate --all --json
#
# Generated text goes to stdout; logs and progress go to stderr, so the
# output can be piped. On a provider failure the normalized error kind is
# printed and the exit code is 1.
# =============================================================================

"""Command-line front end for the provider facade.

Usage::

    python -m llm_gateway.cli generate "prompt" [--max-tokens N] [--temperature T]
                                                [--timeout MS] [--provider NAME]
    python -m llm_gateway.cli validate [--all]

Both commands accept ``--json`` for machine-readable output and ``--quiet``
to drop log output below WARNING.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from typing import Any

from llm_gateway.config.settings import SUPPORTED_PROVIDERS, Settings
from llm_gateway.utils.errors import AIProviderError, ConfigurationError
from llm_gateway.utils.logging import configure_logging


def _error_payload(exc: Exception) -> dict[str, Any]:
    if isinstance(exc, AIProviderError):
        return {
            "kind": exc.kind.value,
            "message": exc.message,
            "provider": exc.provider_name,
            "status": exc.http_status,
        }
    return {"kind": "configuration", "message": str(exc)}


def _report_error(exc: Exception, json_output: bool) -> int:
    """Print a failure to the right stream and return the exit code."""
    if json_output:
        print(json.dumps({"error": _error_payload(exc)}, indent=2))
    elif isinstance(exc, AIProviderError):
        print(f"Error [{exc.kind.value}]: {exc}", file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)
    return 1


def _settings_for(provider: str | None) -> Settings:
    # Init kwargs beat environment variables in pydantic-settings.
    if provider:
        return Settings(ai_provider=provider)
    return Settings()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _run_generate(args: argparse.Namespace) -> int:
    """Build the service and generate text for ``args.prompt``.

    Returns 0 on success, 1 on configuration or provider failure.
    """
    # Deferred import: see the note in llm_gateway/cli/__init__.py.
    from llm_gateway.main import build_llm_service
    from llm_gateway.models.generation import GenerationOptions

    try:
        service = build_llm_service(_settings_for(args.provider), config_path=args.config)
        options = GenerationOptions(
            max_tokens=args.max_tokens,
            temperature=args.temperature,
            timeout=args.timeout,
        )
    except (ConfigurationError, ValueError) as exc:
        return _report_error(exc, args.json_output)

    provider = service.get_provider_name()
    print(f"Generating with: {provider}", file=sys.stderr)
    start = time.monotonic()

    try:
        text = await service.generate(args.prompt, options)
    except (AIProviderError, ValueError) as exc:
        return _report_error(exc, args.json_output)

    elapsed = time.monotonic() - start
    print(f"Done in {elapsed:.1f}s", file=sys.stderr)

    if args.json_output:
        print(json.dumps({"provider": provider, "text": text}, indent=2))
    else:
        print(text)
    return 0


async def _run_validate(args: argparse.Namespace) -> int:
    """Validate the active provider (or every configured one with ``--all``).

    Returns 0 when every checked provider answered, 1 otherwise.
    """
    from llm_gateway.main import build_llm_service

    try:
        service = build_llm_service(_settings_for(args.provider), config_path=args.config)
    except ConfigurationError as exc:
        return _report_error(exc, args.json_output)

    if args.all:
        results = await service.validate_all()
    else:
        results = {service.get_provider_name(): await service.validate_credentials()}

    if args.json_output:
        print(json.dumps({"providers": results}, indent=2))
    else:
        for name, ok in results.items():
            print(f"{name}: {'ok' if ok else 'FAILED'}")
    return 0 if all(results.values()) else 1


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with ``generate`` and ``validate`` subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--provider",
        choices=SUPPORTED_PROVIDERS,
        default=None,
        help="Provider to use instead of AI_PROVIDER / the first configured one.",
    )
    common.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="Path to the YAML config file.",
    )
    common.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    common.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors (to stderr).",
    )

    parser = argparse.ArgumentParser(
        prog="python -m llm_gateway.cli",
        description="Generate text or validate credentials through the AI provider gateway.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate", parents=[common], help="Generate text for a prompt."
    )
    generate.add_argument("prompt", type=str, help="Prompt text.")
    generate.add_argument("--max-tokens", type=int, default=None, help="Default: 1024.")
    generate.add_argument("--temperature", type=float, default=None, help="Default: 0.7.")
    generate.add_argument(
        "--timeout", type=int, default=None, help="Per-attempt timeout in ms."
    )

    validate = subparsers.add_parser(
        "validate", parents=[common], help="Check that provider credentials work."
    )
    validate.add_argument(
        "--all",
        action="store_true",
        help="Validate every configured provider, not just the active one.",
    )
    return parser


async def _run(args: argparse.Namespace) -> int:
    if args.command == "generate":
        return await _run_generate(args)
    return await _run_validate(args)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Logs always go to stderr; ``--quiet`` and ``--json`` raise the level to
    WARNING. Exits with the command's return code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    quiet = args.quiet or args.json_output
    configure_logging(
        log_level="WARNING" if quiet else Settings().log_level,
        stream=sys.stderr,
    )

    exit_code = asyncio.run(_run(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
