from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

import click
import typer

from cmdtree import __version__
from cmdtree.builder import prepare_command
from cmdtree.exceptions import CmdTreeError, FlagIntegrityError
from cmdtree.flags import GlobalFlag, app_global_flags
from cmdtree.groups import AliasGroup
from cmdtree.invariants import never
from cmdtree.logging_config import setup_logging
from cmdtree.settings import EnvLookup, Settings, settings_from_context
from cmdtree.validate import check_command_flags

PROG_NAME = "cmdtree"
DEFAULT_COMMAND = "web"
STARTUP_ERROR_EXIT_CODE = 3

app = typer.Typer(cls=AliasGroup)
doctor_app = typer.Typer(cls=AliasGroup, help="Diagnose and optionally fix problems")
admin_app = typer.Typer(cls=AliasGroup, help="Perform common administrative operations")
admin_user_app = typer.Typer(cls=AliasGroup, help="Modify users")

app.add_typer(doctor_app, name="doctor")
app.add_typer(admin_app, name="admin")
admin_app.add_typer(admin_user_app, name="user")


@app.callback()
def root(ctx: typer.Context) -> None:
    """Self-hosted service: runs `web` when no command is given."""
    command = ctx.command
    if not isinstance(command, click.Group):
        never("application root is not a group", command=command.name)
    default = command.get_command(ctx, DEFAULT_COMMAND)
    if default is None:
        never("default command is not registered", command=DEFAULT_COMMAND)
    ctx.invoke(default)


@app.command("web")
def web(
    ctx: typer.Context,
    port: int = typer.Option(3000, "--port", "-p", help="Listen port"),
    pid: Optional[Path] = typer.Option(None, "--pid", "-P", help="Write the process id to this file"),
) -> None:
    """Start the web server"""
    paths = settings_from_context(ctx).paths
    typer.echo(f"web: listening on port {port}, config {paths.custom_conf}")
    if pid is not None:
        typer.echo(f"web: pid file {pid}")


@app.command("dump")
def dump(
    ctx: typer.Context,
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Name of the dump file"),
    skip_repository: bool = typer.Option(False, "--skip-repository", "-R"),
) -> None:
    """Dump application files and database"""
    paths = settings_from_context(ctx).paths
    target = file if file is not None else Path(paths.work_path) / "dump.zip"
    typer.echo(f"dump: writing {target}")
    if skip_repository:
        typer.echo("dump: skipping repositories")


@doctor_app.command("check")
def doctor_check(
    ctx: typer.Context,
    fix: bool = typer.Option(False, "--fix", help="Automatically fix what we can"),
) -> None:
    """Diagnose and optionally fix problems"""
    paths = settings_from_context(ctx).paths
    typer.echo(f"doctor: checking {paths.custom_conf}")
    if fix:
        typer.echo("doctor: fixing")


@doctor_app.command("recreate-table")
def doctor_recreate_table(
    tables: Optional[List[str]] = typer.Argument(None, help="Tables to recreate"),
) -> None:
    """Recreate tables from the model definitions"""
    names = ", ".join(tables or []) or "all tables"
    typer.echo(f"doctor: recreating {names}")


@admin_user_app.command("create")
def admin_user_create(
    username: str = typer.Option(..., "--username", help="Username"),
    email: str = typer.Option(..., "--email", help="User email address"),
    admin: bool = typer.Option(False, "--admin", help="User is an admin"),
) -> None:
    """Create a new user in database"""
    role = "admin" if admin else "user"
    typer.echo(f"admin: created {role} {username} <{email}>")


@admin_user_app.command("list")
def admin_user_list(
    admin: bool = typer.Option(False, "--admin", help="List only admin users"),
) -> None:
    """List users"""
    typer.echo("admin: listing admin users" if admin else "admin: listing users")


def new_main_app(
    *,
    settings: Settings | None = None,
    global_flags: tuple[GlobalFlag, ...] | None = None,
    getenv: EnvLookup = os.environ.get,
) -> click.Group:
    """Return the prepared and checked command tree."""
    command = typer.main.get_command(app)
    if not isinstance(command, click.Group):
        never("application root is not a group", command=command.name)
    prepare_command(
        command,
        global_flags if global_flags is not None else app_global_flags(),
        settings=settings if settings is not None else Settings(),
        version=__version__,
        getenv=getenv,
    )
    if not check_command_flags(command):
        raise FlagIntegrityError("some flags are incorrect")
    return command


def main(argv: list[str] | None = None) -> None:
    setup_logging(logging.INFO)
    try:
        command = new_main_app()
    except CmdTreeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise SystemExit(STARTUP_ERROR_EXIT_CODE) from exc
    command.main(args=argv, prog_name=PROG_NAME)
