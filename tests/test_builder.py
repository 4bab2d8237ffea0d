from __future__ import annotations

import click
import pytest

from cmdtree.builder import prepare_command
from cmdtree.exceptions import NeverThrown
from cmdtree.flags import ParameterFlag, app_global_flags
from cmdtree.help import HELP_COMMAND_NAME, HelpCommand
from cmdtree.settings import Settings
from tests.trees import prepared_tree, sample_tree, walk


def _flag_names(command: click.Command) -> list[str]:
    return [ParameterFlag(param).name() for param in command.params]


def _structure(command: click.Command) -> tuple[object, ...]:
    children: tuple[object, ...] = ()
    if isinstance(command, click.Group):
        children = tuple(_structure(child) for child in command.commands.values())
    return (command.name, tuple(_flag_names(command)), children)


def test_every_node_carries_global_flags_once(recorder, settings: Settings) -> None:
    root = prepared_tree(recorder, settings)
    global_names = [flag.name() for flag in app_global_flags()]
    for command in walk(root):
        names = _flag_names(command)
        assert set(global_names) <= set(names), command.name
        assert len(names) == len(set(names)), command.name


def test_global_flags_lead_the_flag_list(recorder, settings: Settings) -> None:
    root = prepared_tree(recorder, settings)
    leaf = root.commands["mid"].commands["inner"].commands["leaf"]
    global_names = [flag.name() for flag in app_global_flags()]
    assert _flag_names(leaf) == [*global_names, "name"]


def test_every_group_gets_one_help_node(recorder, settings: Settings) -> None:
    root = prepared_tree(recorder, settings)
    groups = [command for command in walk(root) if isinstance(command, click.Group)]
    assert [group.name for group in groups] == ["app", "mid", "inner"]
    for group in groups:
        assert isinstance(group.commands[HELP_COMMAND_NAME], HelpCommand)
        assert list(group.commands)[-1] == HELP_COMMAND_NAME
        assert group.invoke_without_command is True
        assert group.no_args_is_help is False


def test_builtin_help_option_disabled_everywhere(recorder, settings: Settings) -> None:
    root = prepared_tree(recorder, settings)
    for command in walk(root):
        assert command.add_help_option is False
        assert command.callback is not None


def test_options_are_not_shared_between_commands(recorder, settings: Settings) -> None:
    root = prepared_tree(recorder, settings)
    mid = root.commands["mid"]
    solo = root.commands["solo"]
    for index in range(len(app_global_flags())):
        assert root.params[index] is not mid.params[index]
        assert mid.params[index] is not solo.params[index]


def test_building_twice_gives_identical_structure(recorder) -> None:
    first = prepared_tree(recorder, Settings(app_path="/a/app"))
    second = prepared_tree(recorder, Settings(app_path="/b/app"))
    assert _structure(first) == _structure(second)


def test_existing_help_child_is_not_duplicated(settings: Settings) -> None:
    root = click.Group("app", commands=[click.Command(HELP_COMMAND_NAME)])
    prepare_command(root, app_global_flags(), settings=settings)
    assert list(root.commands) == [HELP_COMMAND_NAME]


def test_rejects_non_flag_entries(recorder, settings: Settings) -> None:
    root = sample_tree(recorder)
    bogus = (*app_global_flags(), click.Group("nested"))
    with pytest.raises(NeverThrown):
        prepare_command(root, bogus, settings=settings)  # type: ignore[arg-type]


def test_help_flag_runs_before_required_options(recorder, runner, settings: Settings) -> None:
    create = click.Command(
        "create",
        callback=recorder("create"),
        params=[click.Option(["--username"], required=True)],
        help="Create a user",
    )
    root = click.Group("app", commands=[create])
    prepare_command(root, app_global_flags(), settings=settings)
    result = runner.invoke(root, ["create", "-h"], prog_name="app")
    assert result.exit_code == 0, result.output
    assert "Usage: app create [OPTIONS]" in result.output
    assert "Create a user" in result.output
    assert "DEFAULT CONFIGURATION:" in result.output
    assert recorder.calls == []


def test_missing_required_option_still_fails_without_help(recorder, runner, settings: Settings) -> None:
    create = click.Command(
        "create",
        callback=recorder("create"),
        params=[click.Option(["--username"], required=True)],
    )
    root = click.Group("app", commands=[create])
    prepare_command(root, app_global_flags(), settings=settings)
    result = runner.invoke(root, ["create"], prog_name="app")
    assert result.exit_code == 2
    assert "Missing option '--username'" in result.output
