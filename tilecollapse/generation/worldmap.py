"""
Worldmap: the "wave function" of tile-collapse.

A flat, linearly addressed grid of 1 to 3 axes. Every cell holds a Domain,
the ordered list of tile variants it could still become. A cell with one
candidate is decided, more than one is undecided, zero is a contradiction.

Addressing: index = x + y*width + z*width*height.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from ..core.tile import Tile
from ..core.types import Direction, Position

if TYPE_CHECKING:
    from ..catalog.catalog import TileCatalog

Domain = list[Tile]


class Worldmap:
    """
    The grid of domains.

    Owned exclusively by the solver driving it. clone() gives an independent
    copy for checkpoints and restarts; tiles are immutable so only the
    per-cell lists are copied.
    """

    def __init__(self, *dimensions: int):
        """
        Create a worldmap with one empty domain per cell.

        Args:
            dimensions: Size of each axis (x, then y, then z). One to three
                        positive ints; missing axes have size 1.
        """
        if len(dimensions) == 1 and isinstance(dimensions[0], (tuple, list)):
            dimensions = tuple(dimensions[0])
        if not 1 <= len(dimensions) <= 3:
            raise ValueError(f"Worldmap needs 1 to 3 axes, got {len(dimensions)}")
        if any(not isinstance(size, int) or size <= 0 for size in dimensions):
            raise ValueError(f"Worldmap axes must be positive ints, got {dimensions}")

        self.axes = len(dimensions)
        self.size: tuple[int, int, int] = tuple(dimensions) + (1,) * (3 - len(dimensions))
        self.width, self.height, self.depth = self.size
        self.cells: list[Domain] = [[] for _ in range(self.width * self.height * self.depth)]

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def in_bounds(self, position: Position) -> bool:
        x, y, z = position
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def index(self, position: Position | tuple[int, ...]) -> int:
        """Flat offset of a position. Raises IndexError when out of bounds."""
        position = as_position(position)
        if not self.in_bounds(position):
            raise IndexError(f"Position {tuple(position)} outside worldmap of size {self.size}")
        x, y, z = position
        return x + y * self.width + z * self.width * self.height

    def position(self, index: int) -> Position:
        """Inverse of index()."""
        if not 0 <= index < len(self.cells):
            raise IndexError(f"Index {index} outside worldmap of {len(self.cells)} cells")
        plane = self.width * self.height
        z, rest = divmod(index, plane)
        y, x = divmod(rest, self.width)
        return Position(x, y, z)

    def neighbor(self, position: Position, direction: Direction) -> Position | None:
        """
        The position one step away in direction, or None past the edge.

        The edge of the grid is "no constraint", not an error.
        """
        moved = as_position(position) + direction
        if not self.in_bounds(moved):
            return None
        return moved

    def neighbors(self, position: Position) -> Iterator[tuple[Position, Direction]]:
        """Yield every in-bounds neighbour with the direction leading to it."""
        for direction in Direction:
            neighbor = self.neighbor(position, direction)
            if neighbor is not None:
                yield neighbor, direction

    def positions(self) -> Iterator[Position]:
        """All positions in flat-index (row-major) order."""
        for index in range(len(self.cells)):
            yield self.position(index)

    def is_boundary(self, position: Position) -> bool:
        """
        True if the position touches the edge of the grid.

        Axes of size 1 are ignored, otherwise every cell of a planar map
        would count as boundary along z.
        """
        for coord, size in zip(as_position(position), self.size):
            if size > 1 and coord in (0, size - 1):
                return True
        return False

    def boundary_positions(self) -> list[Position]:
        return [pos for pos in self.positions() if self.is_boundary(pos)]

    # -------------------------------------------------------------------------
    # Domains
    # -------------------------------------------------------------------------

    def __getitem__(self, position: Position | tuple[int, ...]) -> Domain:
        return self.cells[self.index(position)]

    def __setitem__(self, position: Position | tuple[int, ...], domain: Iterable[Tile]) -> None:
        self.cells[self.index(position)] = list(domain)

    def __len__(self) -> int:
        return len(self.cells)

    def is_decided(self, position: Position) -> bool:
        return len(self[position]) == 1

    def decided_tile(self, position: Position) -> Tile | None:
        """The chosen tile, or None if the cell is not decided yet."""
        domain = self[position]
        return domain[0] if len(domain) == 1 else None

    def is_solved(self) -> bool:
        """Check if every cell is decided."""
        return all(len(domain) == 1 for domain in self.cells)

    def domain_sizes(self) -> list[int]:
        return [len(domain) for domain in self.cells]

    def total_candidates(self) -> int:
        return sum(len(domain) for domain in self.cells)

    def reset_all(self, catalog: TileCatalog | Iterable[Tile]) -> None:
        """Replace every cell's domain with the catalog's full variant list."""
        variants = list(catalog.variants if hasattr(catalog, "variants") else catalog)
        for index in range(len(self.cells)):
            self.cells[index] = list(variants)

    def clone(self) -> Worldmap:
        """Independent copy: new per-cell lists, shared immutable tiles."""
        copy = Worldmap.__new__(Worldmap)
        copy.axes = self.axes
        copy.size = self.size
        copy.width, copy.height, copy.depth = self.size
        copy.cells = [list(domain) for domain in self.cells]
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Worldmap):
            return NotImplemented
        return self.size == other.size and self.cells == other.cells

    def __repr__(self) -> str:
        decided = sum(1 for domain in self.cells if len(domain) == 1)
        return f"Worldmap(size={self.size}, decided={decided}/{len(self.cells)})"


def as_position(position: Position | tuple[int, ...]) -> Position:
    """Accept plain tuples of 1 to 3 ints wherever a Position is expected."""
    if isinstance(position, Position):
        return position
    return Position(*position)
