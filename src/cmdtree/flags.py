"""Global flag declarations and typed flag descriptors.

Every command in a prepared tree accepts the flags returned by
:func:`app_global_flags`. Keep in mind that their short forms (``-C``,
``-c``, ``-w``, ``-h``, ``-v``) are taken everywhere, so no subcommand can
reuse them for anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Callable, Literal, Protocol, runtime_checkable

import click

ALIAS_SEPARATOR = ","

HELP_FLAG = "help"
VERSION_FLAG = "version"
CUSTOM_PATH_FLAG = "custom-path"
CONFIG_FLAG = "config"
WORK_PATH_FLAG = "work-path"

FlagKind = Literal["string", "bool"]
OptionCallback = Callable[[click.Context, click.Parameter, Any], Any]

_NON_IDENTIFIER_RE = re.compile(r"\W")


@runtime_checkable
class FlagDescriptor(Protocol):
    def name(self) -> str: ...

    def aliases(self) -> tuple[str, ...]: ...


def param_name(flag_name: str) -> str:
    """Return the keyword name click uses for *flag_name*."""
    return _NON_IDENTIFIER_RE.sub("_", flag_name).lower()


def _option_string(name: str) -> str:
    return f"-{name}" if len(name) == 1 else f"--{name}"


def _strip_prefix(opt: str) -> str:
    return opt.lstrip("-")


@dataclass(frozen=True)
class GlobalFlag:
    canonical: str
    alias_names: tuple[str, ...] = ()
    help: str = ""
    kind: FlagKind = "string"
    default: str | None = None
    metavar: str | None = field(default=None, compare=False)
    eager: bool = False

    def name(self) -> str:
        return self.canonical

    def aliases(self) -> tuple[str, ...]:
        return self.alias_names

    @property
    def param_name(self) -> str:
        return param_name(self.canonical)

    def option_strings(self) -> list[str]:
        return [_option_string(self.canonical), *map(_option_string, self.alias_names)]

    def to_option(self, callback: OptionCallback | None = None) -> click.Option:
        """Build a new option object; callers never share one between commands.

        An eager flag is processed before the other parameters of its
        command, so *callback* runs before required options are checked.
        """
        decls = [*self.option_strings(), self.param_name]
        if self.kind == "bool":
            return click.Option(
                decls,
                is_flag=True,
                default=False,
                help=self.help,
                is_eager=self.eager,
                callback=callback,
            )
        return click.Option(
            decls,
            default=self.default,
            help=self.help,
            metavar=self.metavar,
            is_eager=self.eager,
            callback=callback,
        )


@dataclass(frozen=True)
class ParameterFlag:
    """Descriptor view over a parameter already attached to a command."""

    param: click.Parameter

    def name(self) -> str:
        if isinstance(self.param, click.Option):
            opts = list(self.param.opts)
            long_opts = [opt for opt in opts if opt.startswith("--")]
            if long_opts:
                return _strip_prefix(long_opts[0])
            if opts:
                return _strip_prefix(opts[0])
        return str(self.param.name or "")

    def aliases(self) -> tuple[str, ...]:
        if not isinstance(self.param, click.Option):
            return ()
        primary = self.name()
        names = [
            _strip_prefix(opt)
            for opt in (*self.param.opts, *self.param.secondary_opts)
        ]
        return tuple(name for name in names if name != primary)

    def option_strings(self) -> tuple[str, ...]:
        if not isinstance(self.param, click.Option):
            return ()
        return (*self.param.opts, *self.param.secondary_opts)


def command_flags(command: click.Command) -> list[ParameterFlag]:
    return [ParameterFlag(param) for param in command.params]


def app_global_flags() -> tuple[GlobalFlag, ...]:
    return (
        # built-in flags first so they lead the generated help
        GlobalFlag(HELP_FLAG, ("h",), help="Show help", kind="bool", eager=True),
        GlobalFlag(VERSION_FLAG, ("v",), help="Print the version", kind="bool"),
        # shared configuration flags, valid on the root and on every subcommand:
        # "app --config /tmp/app.ini web --config /tmp/app.ini" is accepted,
        # the value nearest to the invoked command wins
        GlobalFlag(
            CUSTOM_PATH_FLAG,
            ("C",),
            help="Set custom path (defaults to '{WorkPath}/custom')",
            metavar="PATH",
        ),
        GlobalFlag(
            CONFIG_FLAG,
            ("c",),
            help="Set custom config file (defaults to '{WorkPath}/custom/conf/app.ini')",
            metavar="FILE",
        ),
        GlobalFlag(
            WORK_PATH_FLAG,
            ("w",),
            help="Set the working path (defaults to the application binary's directory)",
            metavar="PATH",
        ),
    )


def global_param_names(global_flags: tuple[GlobalFlag, ...]) -> frozenset[str]:
    return frozenset(flag.param_name for flag in global_flags)
