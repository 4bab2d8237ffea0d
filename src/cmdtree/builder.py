"""Prepare a command tree: global flags, wrapped callbacks and help nodes."""

from __future__ import annotations

import os
from typing import Any, Callable

import click

from cmdtree.flags import HELP_FLAG, GlobalFlag, OptionCallback
from cmdtree.help import HELP_ALIASES, HELP_COMMAND_NAME, help_command, show_help
from cmdtree.invariants import never
from cmdtree.resolver import init_settings, wrap_action
from cmdtree.settings import EnvLookup, Settings

HELP_TOKENS = frozenset((HELP_COMMAND_NAME, *HELP_ALIASES))


def _help_and_exit(ctx: click.Context, *, settings: Settings, getenv: EnvLookup) -> None:
    init_settings(ctx, settings=settings, getenv=getenv)
    show_help(ctx, settings=settings)
    ctx.exit()


def help_flag_callback(*, settings: Settings, getenv: EnvLookup) -> OptionCallback:
    """Callback for the eager ``--help`` flag: document the command and stop."""

    def on_help(ctx: click.Context, _param: click.Parameter, value: Any) -> Any:
        if not value or ctx.resilient_parsing:
            return value
        _help_and_exit(ctx, settings=settings, getenv=getenv)

    return on_help


def accept_help_token(
    command: click.Command,
    *,
    settings: Settings,
    getenv: EnvLookup,
) -> None:
    """Let ``app web help`` document ``web`` although ``web`` has no children.

    Arguments after the token are parsed leniently, so missing required
    options do not prevent the help from being shown.
    """
    parse_args: Callable[[click.Context, list[str]], list[str]] = command.parse_args

    def parse_help_token(ctx: click.Context, args: list[str]) -> list[str]:
        if not args or args[0] not in HELP_TOKENS:
            return parse_args(ctx, args)
        ctx.resilient_parsing = True
        parse_args(ctx, args[1:])
        _help_and_exit(ctx, settings=settings, getenv=getenv)
        return []

    command.parse_args = parse_help_token  # type: ignore[method-assign]


def prepare_command(
    command: click.Command,
    global_flags: tuple[GlobalFlag, ...],
    *,
    settings: Settings,
    version: str | None = None,
    getenv: EnvLookup = os.environ.get,
) -> None:
    """Prepare *command* and everything below it, in place.

    Must run exactly once per tree: running it again would add the global
    flags and the help nodes a second time.
    """
    for flag in global_flags:
        if not isinstance(flag, GlobalFlag):
            never("global flags must be flag declarations", flag=type(flag).__name__)

    on_help = help_flag_callback(settings=settings, getenv=getenv)
    # global flags first so they lead the generated help
    command.params = [
        flag.to_option(on_help if flag.name() == HELP_FLAG else None)
        for flag in global_flags
    ] + list(command.params)
    command.callback = wrap_action(
        command.callback,
        settings=settings,
        global_flags=global_flags,
        version=version,
        getenv=getenv,
    )
    # the injected help command replaces click's own --help option
    command.add_help_option = False

    if not isinstance(command, click.Group):
        if command.name != HELP_COMMAND_NAME:
            accept_help_token(command, settings=settings, getenv=getenv)
        return
    # a group without a subcommand still reaches its (wrapped) callback
    command.invoke_without_command = True
    command.no_args_is_help = False
    if command.name != HELP_COMMAND_NAME and HELP_COMMAND_NAME not in command.commands:
        command.add_command(help_command())
    for child in list(command.commands.values()):
        prepare_command(
            child,
            global_flags,
            settings=settings,
            version=version,
            getenv=getenv,
        )
