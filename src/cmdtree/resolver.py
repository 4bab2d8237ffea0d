"""Startup configuration resolved from the invoked command chain.

The global path flags may be given at any level, e.g.
``app --config /tmp/a.ini web --config /tmp/b.ini``. Each field is taken
from the context closest to the invoked command that set it explicitly.

Resolution runs inside the callback of the command that was finally
invoked, never in the callbacks click runs for the groups above it, so the
settings are initialised once per run. A help request (``-h`` or a leading
``help`` token) resolves the same way while arguments are still being
parsed, then exits.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import Any, Callable

import click

from cmdtree.actions import ShowHelp, action_for
from cmdtree.flags import (
    CONFIG_FLAG,
    CUSTOM_PATH_FLAG,
    VERSION_FLAG,
    WORK_PATH_FLAG,
    GlobalFlag,
    global_param_names,
)
from cmdtree.help import show_help
from cmdtree.lineage import Lineage, flag_enabled, is_set, lineage, string_value
from cmdtree.settings import SETTINGS_META_KEY, EnvLookup, Settings, StartupArgs

_LOGGER = logging.getLogger(__name__)

_PATH_FIELDS: tuple[tuple[str, str], ...] = (
    (WORK_PATH_FLAG, "work_path"),
    (CUSTOM_PATH_FLAG, "custom_path"),
    (CONFIG_FLAG, "custom_conf"),
)


def resolve_startup_args(chain: Lineage) -> StartupArgs:
    resolved: dict[str, str] = {}
    for ctx in chain:
        for flag_name, field_name in _PATH_FIELDS:
            if field_name in resolved or not is_set(ctx, flag_name):
                continue
            value = string_value(ctx, flag_name)
            if value:
                resolved[field_name] = value
    return StartupArgs(**resolved)


def init_settings(
    ctx: click.Context,
    *,
    settings: Settings,
    getenv: EnvLookup = os.environ.get,
) -> Lineage:
    """Resolve the startup args for *ctx*, initialise *settings*, publish them."""
    chain = lineage(ctx)
    args = resolve_startup_args(chain)
    _LOGGER.debug("resolved %r for %s", args, ctx.command_path)
    ctx.meta[SETTINGS_META_KEY] = settings
    settings.init_work_path_and_common_config(getenv, args)
    return chain


def wrap_action(
    callback: Callable[..., Any] | None,
    *,
    settings: Settings,
    global_flags: tuple[GlobalFlag, ...],
    version: str | None = None,
    getenv: EnvLookup = os.environ.get,
) -> Callable[..., Any]:
    action = action_for(callback)
    global_params = global_param_names(global_flags)

    def run(**kwargs: Any) -> Any:
        ctx = click.get_current_context()
        if ctx.invoked_subcommand is not None:
            return None
        chain = init_settings(ctx, settings=settings, getenv=getenv)
        if version is not None and flag_enabled(chain, VERSION_FLAG):
            click.echo(f"{ctx.find_root().info_name} version {version}")
            return None
        if isinstance(action, ShowHelp):
            return show_help(ctx, settings=settings)
        handler_kwargs = {
            key: value for key, value in kwargs.items() if key not in global_params
        }
        return action.handler(**handler_kwargs)

    if callback is not None:
        functools.update_wrapper(run, callback)
    return run
