"""Exception types raised by the compilation core."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """An input value is outside what the core accepts."""


class UninitializedStateError(RuntimeError):
    """A grid was used before its cells were allocated."""
