"""Error taxonomy for the layout pipeline."""

from __future__ import annotations

from collections.abc import Hashable


class LayoutError(Exception):
    """Base class for every error raised by the layout pipeline."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StructuralError(LayoutError):
    """The input graph cannot be layered (it contains a directed cycle).

    ``cycle`` holds the (source, target) pairs of one offending cycle.
    """

    def __init__(self, message: str, cycle: list[tuple[Hashable, Hashable]] | None = None) -> None:
        self.cycle = list(cycle or [])
        super().__init__(message)


class InvariantViolation(LayoutError):
    """A phase found that an upstream invariant does not hold.

    This signals a programming error (phases run out of order, or a phase
    produced an inconsistent graph), never bad user input.
    """


class ConfigurationError(LayoutError, ValueError):
    """Raised when a ``LayoutConfig`` value is out of range."""
