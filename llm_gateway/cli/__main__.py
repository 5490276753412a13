"""Allow ``python -m llm_gateway.cli`` execution."""

from llm_gateway.cli.ai import main

main()
