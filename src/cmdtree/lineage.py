"""Invocation lineage and flag-value queries over click contexts."""

from __future__ import annotations

from typing import TypeAlias

import click
from click.core import ParameterSource

from cmdtree.flags import param_name

Lineage: TypeAlias = tuple[click.Context, ...]

_EXPLICIT_SOURCES = frozenset(
    {
        ParameterSource.COMMANDLINE,
        ParameterSource.ENVIRONMENT,
        ParameterSource.PROMPT,
    }
)


def lineage(ctx: click.Context) -> Lineage:
    """Return the active chain, from *ctx* (the running command) to the root."""
    chain: list[click.Context] = []
    current: click.Context | None = ctx
    while current is not None:
        chain.append(current)
        current = current.parent
    return tuple(chain)


def is_set(ctx: click.Context, flag_name: str) -> bool:
    # a value click filled in from a default does not count
    return ctx.get_parameter_source(param_name(flag_name)) in _EXPLICIT_SOURCES


def string_value(ctx: click.Context, flag_name: str) -> str | None:
    value = ctx.params.get(param_name(flag_name))
    if value is None:
        return None
    return str(value)


def bool_value(ctx: click.Context, flag_name: str) -> bool:
    return bool(ctx.params.get(param_name(flag_name), False))


def flag_enabled(chain: Lineage, flag_name: str) -> bool:
    return any(bool_value(ctx, flag_name) for ctx in chain)
