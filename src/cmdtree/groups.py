"""Group class that also resolves command aliases."""

from __future__ import annotations

import click
from typer.core import TyperGroup


def command_aliases(command: click.Command) -> tuple[str, ...]:
    return tuple(getattr(command, "aliases", ()) or ())


def lookup_command(
    group: click.Group,
    ctx: click.Context,
    name: str,
) -> click.Command | None:
    command = click.Group.get_command(group, ctx, name)
    if command is not None:
        return command
    for candidate in group.commands.values():
        if name in command_aliases(candidate):
            return candidate
    return None


class AliasGroup(TyperGroup):
    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return lookup_command(self, ctx, cmd_name)

    def resolve_command(
        self,
        ctx: click.Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # report the canonical name so usage lines never show the alias
        _name, command, rest = super().resolve_command(ctx, args)
        return (command.name if command is not None else None), command, rest
