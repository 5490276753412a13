"""Unit tests for the llm_gateway.cli.ai command-line front end."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from llm_gateway.cli.ai import _build_parser, _run, main
from llm_gateway.utils.errors import AIRateLimitError, ConfigurationError

_BUILD = "llm_gateway.main.build_llm_service"


def _service(name: str = "anthropic", text: str = "generated", valid: dict | None = None) -> MagicMock:
    service = MagicMock()
    service.get_provider_name.return_value = name
    service.generate = AsyncMock(return_value=text)
    service.validate_credentials = AsyncMock(return_value=True)
    service.validate_all = AsyncMock(return_value=valid or {name: True})
    return service


def _args(*argv: str):
    return _build_parser().parse_args(list(argv))


# ======================================================================
# Argument parsing
# ======================================================================


class TestParser:
    def test_generate_options(self) -> None:
        args = _args("generate", "hi", "--max-tokens", "64", "--temperature", "0", "--timeout", "500")
        assert args.command == "generate"
        assert args.prompt == "hi"
        assert (args.max_tokens, args.temperature, args.timeout) == (64, 0.0, 500)
        assert args.provider is None

    def test_validate_all_json(self) -> None:
        args = _args("validate", "--all", "--json", "--provider", "openai")
        assert args.all is True
        assert args.json_output is True
        assert args.provider == "openai"

    def test_unknown_provider_rejected(self) -> None:
        with pytest.raises(SystemExit):
            _args("generate", "hi", "--provider", "mistral")

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            _args()


# ======================================================================
# generate
# ======================================================================


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success_prints_text(self, capsys) -> None:
        service = _service(text="Hello there")
        with patch(_BUILD, return_value=service):
            code = await _run(_args("generate", "hi", "--max-tokens", "32"))

        assert code == 0
        out = capsys.readouterr()
        assert out.out.strip() == "Hello there"
        assert "Generating with: anthropic" in out.err
        prompt, options = service.generate.await_args.args
        assert prompt == "hi"
        assert options.max_tokens == 32
        assert options.temperature is None

    @pytest.mark.asyncio
    async def test_success_json(self, capsys) -> None:
        with patch(_BUILD, return_value=_service(name="openai", text="x")):
            code = await _run(_args("generate", "hi", "--json"))

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"provider": "openai", "text": "x"}

    @pytest.mark.asyncio
    async def test_provider_flag_reaches_settings(self) -> None:
        with patch(_BUILD, return_value=_service()) as build:
            await _run(_args("generate", "hi", "--provider", "openai"))

        settings = build.call_args.args[0]
        assert settings.ai_provider == "openai"

    @pytest.mark.asyncio
    async def test_provider_error_reports_kind(self, capsys) -> None:
        service = _service()
        service.generate.side_effect = AIRateLimitError("anthropic")
        with patch(_BUILD, return_value=service):
            code = await _run(_args("generate", "hi"))

        assert code == 1
        assert "Error [rate_limited]: [anthropic] AI provider rate limit exceeded" in (
            capsys.readouterr().err
        )

    @pytest.mark.asyncio
    async def test_provider_error_json(self, capsys) -> None:
        service = _service()
        service.generate.side_effect = AIRateLimitError("anthropic")
        with patch(_BUILD, return_value=service):
            code = await _run(_args("generate", "hi", "--json"))

        assert code == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["error"]["kind"] == "rate_limited"
        assert payload["error"]["status"] == 429
        assert payload["error"]["provider"] == "anthropic"

    @pytest.mark.asyncio
    async def test_configuration_error(self, capsys) -> None:
        with patch(_BUILD, side_effect=ConfigurationError("no keys")):
            code = await _run(_args("generate", "hi"))

        assert code == 1
        assert "Error: no keys" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_invalid_temperature(self, capsys) -> None:
        service = _service()
        with patch(_BUILD, return_value=service):
            code = await _run(_args("generate", "hi", "--temperature", "5"))

        assert code == 1
        service.generate.assert_not_awaited()


# ======================================================================
# validate
# ======================================================================


class TestValidate:
    @pytest.mark.asyncio
    async def test_active_provider_ok(self, capsys) -> None:
        with patch(_BUILD, return_value=_service()):
            code = await _run(_args("validate"))

        assert code == 0
        assert capsys.readouterr().out.strip() == "anthropic: ok"

    @pytest.mark.asyncio
    async def test_all_with_failure(self, capsys) -> None:
        service = _service(valid={"anthropic": True, "openai": False})
        with patch(_BUILD, return_value=service):
            code = await _run(_args("validate", "--all", "--json"))

        assert code == 1
        assert json.loads(capsys.readouterr().out) == {
            "providers": {"anthropic": True, "openai": False}
        }


class TestMain:
    def test_main_exits_with_run_code(self) -> None:
        with (
            patch("llm_gateway.cli.ai.configure_logging") as configure,
            patch("llm_gateway.cli.ai._run", AsyncMock(return_value=1)),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["validate", "--quiet"])

        assert exc_info.value.code == 1
        assert configure.call_args.kwargs["log_level"] == "WARNING"
