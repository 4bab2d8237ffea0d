"""The ``help`` subcommand and the logic deciding what it documents.

The lineage runs from the executing command to the root, e.g.
``[help, doctor, app]`` for ``app doctor help`` or ``[doctor, app]`` when
``app doctor`` has no handler of its own. When the executing command is
``help`` the command to document is its parent (index 1), otherwise the
executing command itself (index 0). If that command has a parent of its own
its detailed help is shown; if it is the root the application help is shown.
"""

from __future__ import annotations

from typing import Sequence

import click

from cmdtree.groups import lookup_command
from cmdtree.invariants import never
from cmdtree.lineage import lineage
from cmdtree.settings import Settings, settings_from_context

HELP_COMMAND_NAME = "help"
HELP_ALIASES = ("h",)

_CONFIGURATION_FOOTER = """
DEFAULT CONFIGURATION:
   AppPath:    {app_path}
   WorkPath:   {work_path}
   CustomPath: {custom_path}
   ConfigFile: {custom_conf}
"""


class HelpCommand(click.Command):
    aliases = HELP_ALIASES


def help_target_index(ctx: click.Context) -> int:
    return 1 if ctx.command.name == HELP_COMMAND_NAME else 0


def _descend(ctx: click.Context, names: Sequence[str]) -> click.Context:
    current = ctx
    for name in names:
        command = current.command
        child = None
        if isinstance(command, click.Group):
            child = lookup_command(command, current, name)
        if child is None:
            raise click.UsageError(f"No such command '{name}'.", ctx=current)
        current = click.Context(child, info_name=child.name, parent=current)
    return current


def _render(ctx: click.Context) -> None:
    # typer renders rich help straight to the console and returns no text
    text = ctx.get_help()
    if text:
        click.echo(text, color=ctx.color)


def show_help(
    ctx: click.Context,
    *,
    settings: Settings,
    names: Sequence[str] = (),
) -> None:
    chain = lineage(ctx)
    index = help_target_index(ctx)
    if index >= len(chain):
        never(
            "help invoked without a command to document",
            command=ctx.command.name,
            depth=len(chain),
        )
    try:
        if index + 1 < len(chain):
            target = chain[index]
        else:
            target = ctx.find_root()
        _render(_descend(target, names))
    finally:
        paths = settings.paths
        click.echo(
            _CONFIGURATION_FOOTER.format(
                app_path=paths.app_path,
                work_path=paths.work_path,
                custom_path=paths.custom_path,
                custom_conf=paths.custom_conf,
            )
        )


def _help_action(command: tuple[str, ...] = ()) -> None:
    ctx = click.get_current_context()
    show_help(ctx, settings=settings_from_context(ctx), names=command)


def help_command() -> click.Command:
    """Build a fresh ``help`` node; one is attached to every group."""
    return HelpCommand(
        HELP_COMMAND_NAME,
        callback=_help_action,
        params=[click.Argument(["command"], nargs=-1, metavar="[command]...")],
        help="Shows a list of commands or help for one command",
        short_help="Shows a list of commands or help for one command",
    )
