"""Lazy-loading Click group for fast CLI startup."""

from __future__ import annotations

import importlib
from typing import Any

import click


class LazyGroup(click.Group):
    """A Click group that imports a subcommand's module on first use.

    Tree-sitter grammars and Jinja2 only load when a command needs them,
    so ``testgen --help`` stays fast.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, tuple[str, str]] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize lazy group.

        Args:
            lazy_subcommands: Dict mapping command name to (module_path, attr_name)
                Example: {'generate': ('testgen.commands.generate', 'generate')}
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands: dict[str, tuple[str, str]] = lazy_subcommands or {}
        self._loaded_commands: dict[str, click.Command] = {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        base = super().list_commands(ctx)
        return sorted(set(base) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self._loaded_commands:
            return self._loaded_commands[cmd_name]

        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd

        if cmd_name not in self._lazy_subcommands:
            return None

        module_path, attr_name = self._lazy_subcommands[cmd_name]
        try:
            module = importlib.import_module(module_path)
            loaded: click.Command = getattr(module, attr_name)
        except (ImportError, AttributeError) as e:
            raise click.ClickException(f"Failed to load command '{cmd_name}': {e}") from None
        self._loaded_commands[cmd_name] = loaded
        return loaded


__all__ = ["LazyGroup"]
