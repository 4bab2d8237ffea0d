"""Build-time check of every flag declared in a command tree.

click does not complain about a ``,`` inside an option name, it just
registers an option nobody can type. Flags with such names, and flags
declared twice on one command, are logged and fail the check.
"""

from __future__ import annotations

import logging

import click

from cmdtree.flags import ALIAS_SEPARATOR, command_flags

_LOGGER = logging.getLogger(__name__)


def _command_label(command: click.Command, parents: tuple[str, ...]) -> str:
    return " ".join((*parents, command.name or "<root>"))


def _check_node(command: click.Command, label: str) -> bool:
    ok = True
    names: set[str] = set()
    option_strings: set[str] = set()
    for flag in command_flags(command):
        name = flag.name()
        if ALIAS_SEPARATOR in name:
            ok = False
            _LOGGER.error(
                "flag can't have %r in its name: %r (command %r), use aliases instead",
                ALIAS_SEPARATOR,
                name,
                label,
            )
        if name in names:
            ok = False
            _LOGGER.error("flag %r is declared twice (command %r)", name, label)
            continue
        names.add(name)
        for opt in flag.option_strings():
            if opt in option_strings:
                ok = False
                _LOGGER.error(
                    "option %r of flag %r is already taken (command %r)",
                    opt,
                    name,
                    label,
                )
            option_strings.add(opt)
    return ok


def check_command_flags(
    command: click.Command,
    *,
    parents: tuple[str, ...] = (),
) -> bool:
    """Check *command* and all its descendants; report every problem found."""
    label = _command_label(command, parents)
    ok = _check_node(command, label)
    if isinstance(command, click.Group):
        for child in command.commands.values():
            if not check_command_flags(child, parents=(*parents, command.name or "<root>")):
                ok = False
    return ok
