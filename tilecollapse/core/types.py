"""Foundational types for tilecollapse.

This module defines the core types used throughout the system:
- Direction: the six grid directions with offsets and label slots
- Position: Grid coordinates (x, y, z)
- Label: a connection label carried on a tile face
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Grid directions for adjacency rules.

    The value is the slot this direction occupies in a tile's label tuple.
    The first four are the horizontal (planar) directions, ordered clockwise,
    which is what makes rotation a plain cyclic shift of the first four slots.
    """

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3
    UP = 4
    DOWN = 5

    @property
    def index(self) -> int:
        """Slot of this direction in a tile's label tuple."""
        return self.value

    @property
    def offset(self) -> tuple[int, int, int]:
        """Get the (dx, dy, dz) offset for this direction.

        Coordinate system: x increases east, y increases south, z increases up.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @classmethod
    def horizontal(cls) -> tuple[Direction, ...]:
        """The four planar directions, in label-slot order."""
        return _HORIZONTAL

    @classmethod
    def for_arity(cls, arity: int) -> tuple[Direction, ...]:
        """Directions carried by a tile with the given number of labels."""
        if arity == 4:
            return _HORIZONTAL
        if arity == 6:
            return tuple(cls)
        raise ValueError(f"Tiles carry 4 or 6 labels, got {arity}")


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int, int]] = {
    Direction.NORTH: (0, -1, 0),
    Direction.EAST: (1, 0, 0),
    Direction.SOUTH: (0, 1, 0),
    Direction.WEST: (-1, 0, 0),
    Direction.UP: (0, 0, 1),
    Direction.DOWN: (0, 0, -1),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}

_HORIZONTAL: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.EAST,
    Direction.SOUTH,
    Direction.WEST,
)


class Position(NamedTuple):
    """A cell coordinate in the worldmap.

    Planar maps simply leave z at 0.
    """

    x: int
    y: int = 0
    z: int = 0

    def __add__(self, other: object) -> Position:
        """Shift this position by a direction's unit vector."""
        if isinstance(other, Direction):
            dx, dy, dz = other.offset
            return Position(self.x + dx, self.y + dy, self.z + dz)
        return NotImplemented

    def neighbors(self) -> dict[Direction, Position]:
        """Get all adjacent positions keyed by direction, ignoring bounds."""
        return {d: self + d for d in Direction}


class Label(NamedTuple):
    """A connection label on one face of a tile.

    Two faces fit together only when their labels are equal on every field.

    Attributes:
        value: The label number. Author labels are small non-negative ints,
               synthetic seam labels are allocated above
               SYNTHETIC_LABEL_THRESHOLD.
        synthetic: True for seams generated to bind a multi-cell tile.
        epoch: Rotation (in quarter turns) a synthetic seam was emitted at.
               Always 0 for author labels.
    """

    value: int
    synthetic: bool = False
    epoch: int = 0

    @classmethod
    def of(cls, value: int | Label) -> Label:
        """Coerce an author-supplied int into a Label."""
        if isinstance(value, Label):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Connection labels must be ints, got {value!r}")
        return cls(value)

    @classmethod
    def seam(cls, seam_id: int) -> Label:
        return cls(seam_id, synthetic=True)

    def at_epoch(self, epoch: int) -> Label:
        """Return this label tagged with a rotation epoch (synthetic labels only)."""
        if not self.synthetic:
            return self
        return self._replace(epoch=epoch % 4)

    def __str__(self) -> str:
        if self.synthetic:
            return f"s{self.value}@{self.epoch}"
        return str(self.value)


# Synthetic seam ids start above this value so they never collide with
# author-chosen labels in logs or catalog files.
SYNTHETIC_LABEL_THRESHOLD = 1000
