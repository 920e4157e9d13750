"""
Constraint propagation (arc consistency) for tile-collapse.

After a cell's domain shrinks, each neighbour may only keep the tiles whose
facing label is still offered by some candidate of that cell. Neighbours
that lose candidates are re-checked in turn, until nothing changes or a
domain runs empty (a Contradiction).

Propagation uses an explicit worklist rather than recursion, so stack depth
does not grow with the grid.
"""

from __future__ import annotations

from collections import deque

from ..core.errors import Contradiction
from ..core.types import Direction, Label, Position
from ..logging_config import get_logger
from .worldmap import Worldmap

logger = get_logger(__name__)


def available_labels(worldmap: Worldmap, position: Position) -> list[set[Label]]:
    """
    For each direction, the labels some candidate of the cell exposes there.

    Returns a list indexed by Direction.index.
    """
    labels: list[set[Label]] = [set() for _ in Direction]
    for tile in worldmap[position]:
        for slot, label in enumerate(tile.labels):
            labels[slot].add(label)
    return labels


def filter_neighbor(
    worldmap: Worldmap,
    position: Position,
    direction: Direction,
    labels: set[Label] | None = None,
) -> bool:
    """
    Drop neighbour candidates that cannot face this cell.

    Args:
        worldmap: The grid being solved (mutated in place)
        position: The cell whose domain changed
        direction: Which neighbour to filter
        labels: Labels the cell offers toward direction. Computed from the
                cell's domain when not given.

    Returns:
        True if the neighbour lost candidates, False if it is unchanged or
        lies past the edge of the grid.

    Raises:
        Contradiction: If the neighbour would be left with no candidates.
    """
    neighbor = worldmap.neighbor(position, direction)
    if neighbor is None:
        return False

    if labels is None:
        labels = available_labels(worldmap, position)[direction.index]

    facing = direction.opposite.index
    domain = worldmap[neighbor]
    kept = [tile for tile in domain if tile.labels[facing] in labels]

    if len(kept) == len(domain):
        return False
    if not kept:
        raise Contradiction(neighbor)

    worldmap[neighbor] = kept
    return True


def propagate(worldmap: Worldmap, origin: Position) -> int:
    """
    Restore arc consistency after the domain at origin changed.

    Depth-first over an explicit stack. A cell is only queued when its
    domain strictly shrank, and domains never grow, so the loop ends after
    at most (total candidates) re-checks.

    Returns:
        Number of cells re-checked (including origin).

    Raises:
        Contradiction: If any domain runs empty. The worldmap is left
        partially filtered; callers restore from a checkpoint.
    """
    stack: deque[Position] = deque([origin])
    pending: set[Position] = {origin}
    visited = 0

    while stack:
        position = stack.pop()
        pending.discard(position)
        visited += 1

        labels = available_labels(worldmap, position)
        for direction in Direction:
            changed = filter_neighbor(worldmap, position, direction, labels[direction.index])
            if not changed:
                continue
            neighbor = worldmap.neighbor(position, direction)
            if neighbor not in pending:
                stack.append(neighbor)
                pending.add(neighbor)

    return visited


def find_conflicts(worldmap: Worldmap) -> list[tuple[Position, Direction]]:
    """
    Every adjacent pair of decided cells whose touching labels disagree.

    Each conflicting edge is reported once, from the cell with the lower
    flat index. An empty list means the decided part of the grid is locally
    consistent.
    """
    conflicts: list[tuple[Position, Direction]] = []
    for position in worldmap.positions():
        tile = worldmap.decided_tile(position)
        if tile is None:
            continue
        for direction in (Direction.EAST, Direction.SOUTH, Direction.UP):
            neighbor = worldmap.neighbor(position, direction)
            if neighbor is None:
                continue
            other = worldmap.decided_tile(neighbor)
            if other is not None and not tile.fits(direction, other):
                conflicts.append((position, direction))
    return conflicts


def is_consistent(worldmap: Worldmap) -> bool:
    """True if no two adjacent decided cells disagree and no domain is empty."""
    if any(len(domain) == 0 for domain in worldmap.cells):
        return False
    return not find_conflicts(worldmap)
