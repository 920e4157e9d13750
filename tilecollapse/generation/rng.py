"""Deterministic random source for the solver.

Each solver owns one SeededRandom. Every draw that decides cell content goes
through it, so a run is fully reproducible from its seed, and reseeding for
a restart never touches the global `random` module.
"""

from __future__ import annotations

from collections.abc import Sequence
from random import Random
from typing import TypeVar

T = TypeVar("T")


class SeededRandom:
    """A private Random instance that remembers its seed."""

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed
        self._rng = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reseed(self, seed: int) -> None:
        """Restart the stream from a new seed."""
        self._seed = seed
        self._rng = Random(seed)

    def randrange(self, stop: int) -> int:
        """Return a random int in [0, stop)."""
        return self._rng.randrange(stop)

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        return seq[self._rng.randrange(len(seq))]

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self._seed})"
