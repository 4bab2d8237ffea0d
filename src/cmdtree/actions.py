"""What a command does when it is the one finally invoked."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeAlias


@dataclass(frozen=True)
class Runnable:
    handler: Callable[..., Any]


@dataclass(frozen=True)
class ShowHelp:
    pass


CommandAction: TypeAlias = Runnable | ShowHelp


def action_for(callback: Callable[..., Any] | None) -> CommandAction:
    """A command without a callback shows its help instead."""
    if callback is None:
        return ShowHelp()
    return Runnable(callback)
