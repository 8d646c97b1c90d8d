"""CLI command modules."""

from codemate.cli.commands import chat, config, parse

__all__ = ["chat", "config", "parse"]
