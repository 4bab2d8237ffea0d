"""Invariant markers."""

from __future__ import annotations

from typing import NoReturn

from cmdtree.exceptions import NeverThrown


def _format_env(env: dict[str, object]) -> str:
    if not env:
        return ""
    details = ", ".join(f"{key}={value!r}" for key, value in sorted(env.items()))
    return f" ({details})"


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is diagnostic context only; it ends up in the message and
    on the raised exception.
    """
    message = (reason or "never() marker reached") + _format_env(env)
    raise NeverThrown(message, env=env)
