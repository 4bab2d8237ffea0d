"""Exception types raised by cmdtree."""

from __future__ import annotations


class CmdTreeError(Exception):
    """Base class for errors that abort application startup."""


class FlagIntegrityError(CmdTreeError):
    """The command tree declares flags the parser would mishandle."""


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable.

    Reaching one means the command tree was assembled incorrectly; it is a
    programming error, not a user error.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env: dict[str, object] = dict(env or {})


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
