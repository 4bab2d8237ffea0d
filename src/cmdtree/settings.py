"""Startup paths: work path, custom path and config file.

``Settings`` is the one place that turns the values picked from the command
line into absolute paths. It is handed to the command tree when the tree is
built and published on the click context for handlers to read.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import sys
from typing import Callable, TypeAlias

import click

from cmdtree.invariants import never

EnvLookup: TypeAlias = Callable[[str], "str | None"]

DEFAULT_ENV_PREFIX = "CMDTREE"
DEFAULT_CUSTOM_DIR = "custom"
DEFAULT_CONF_REL_PATH = Path("conf") / "app.ini"
SETTINGS_META_KEY = "cmdtree.settings"

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartupArgs:
    work_path: str | None = None
    custom_path: str | None = None
    custom_conf: str | None = None


@dataclass(frozen=True)
class ResolvedPaths:
    app_path: str
    work_path: str
    custom_path: str
    custom_conf: str


def _no_env(_name: str) -> str | None:
    return None


def _env_text(getenv: EnvLookup, name: str) -> str | None:
    value = getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _absolute(path: Path | str) -> Path:
    return Path(os.path.abspath(path))


def default_app_path() -> str:
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return str(_absolute(argv0))


class Settings:
    def __init__(
        self,
        *,
        app_path: str | None = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
    ) -> None:
        self.app_path = app_path or default_app_path()
        self.env_prefix = env_prefix
        self._paths: ResolvedPaths | None = None

    @property
    def work_dir_env(self) -> str:
        return f"{self.env_prefix}_WORK_DIR"

    @property
    def custom_env(self) -> str:
        return f"{self.env_prefix}_CUSTOM"

    @property
    def initialized(self) -> bool:
        return self._paths is not None

    @property
    def paths(self) -> ResolvedPaths:
        """Resolved paths, or the built-in defaults before initialisation."""
        if self._paths is not None:
            return self._paths
        return self.compute_paths(_no_env, StartupArgs())

    def compute_paths(self, getenv: EnvLookup, args: StartupArgs) -> ResolvedPaths:
        work_text = (
            args.work_path
            or _env_text(getenv, self.work_dir_env)
            or str(Path(self.app_path).parent)
        )
        work_path = _absolute(work_text)

        custom_path = Path(
            args.custom_path or _env_text(getenv, self.custom_env) or DEFAULT_CUSTOM_DIR
        )
        if not custom_path.is_absolute():
            custom_path = work_path / custom_path
        custom_path = _absolute(custom_path)

        if args.custom_conf:
            # a relative config path is relative to the process working directory
            custom_conf = _absolute(args.custom_conf)
        else:
            custom_conf = custom_path / DEFAULT_CONF_REL_PATH

        return ResolvedPaths(
            app_path=self.app_path,
            work_path=str(work_path),
            custom_path=str(custom_path),
            custom_conf=str(custom_conf),
        )

    def init_work_path_and_common_config(
        self,
        getenv: EnvLookup,
        args: StartupArgs,
    ) -> ResolvedPaths:
        if self._paths is not None:
            _LOGGER.debug("startup paths already initialised, ignoring %r", args)
            return self._paths
        self._paths = self.compute_paths(getenv, args)
        _LOGGER.debug("startup paths: %r", self._paths)
        return self._paths


def settings_from_context(ctx: click.Context) -> Settings:
    settings = ctx.meta.get(SETTINGS_META_KEY)
    if not isinstance(settings, Settings):
        never("settings are not published on this context", command=ctx.command.name)
    return settings
