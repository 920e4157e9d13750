"""Exceptions raised by the tilecollapse engine."""

from __future__ import annotations

from .types import Position


class TileCollapseError(Exception):
    """Base class for all tilecollapse errors."""


class Contradiction(TileCollapseError):
    """A cell's domain was emptied by propagation.

    Recoverable: the solver catches it and backtracks one choice. Pinning
    calls (add_tile, surround_border) raise it to their caller instead.
    """

    def __init__(self, position: Position, message: str | None = None):
        self.position = position
        super().__init__(message or f"Domain at {tuple(position)} reduced to zero candidates")


class UnsolvableError(TileCollapseError):
    """No alternative remains for a cell with the current seed.

    Fatal to the current attempt only; run_until_success reseeds and retries.
    """

    def __init__(
        self,
        message: str,
        position: Position | None = None,
        seed: int | None = None,
    ):
        self.position = position
        self.seed = seed
        super().__init__(message)


class SolveCancelled(TileCollapseError):
    """The outer retry loop was cancelled by its caller."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Solve cancelled after {attempts} attempt(s)")


class CatalogError(TileCollapseError, ValueError):
    """A tile or catalog description is malformed."""
