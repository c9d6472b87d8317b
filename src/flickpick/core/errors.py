from __future__ import annotations


class FlickpickError(Exception):
    """Base class for errors raised by the session engine."""


class EmptyPoolError(FlickpickError):
    """Neither the content supplier nor the static fallback produced any titles."""


class SessionInvariantError(FlickpickError):
    """Internal state no longer satisfies the session's structural invariants."""
