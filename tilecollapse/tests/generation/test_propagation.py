"""Tests for arc-consistency propagation."""

import pytest

from tilecollapse.catalog import TileCatalog
from tilecollapse.core import Contradiction, Direction, Label, Position, Tile
from tilecollapse.generation import (
    Worldmap,
    available_labels,
    filter_neighbor,
    find_conflicts,
    is_consistent,
    propagate,
)

LINE = Tile(index=10, labels=(0, 1, 0, 1), rotatable=False)
EMPTY = Tile(index=11, labels=(0, 0, 0, 0), rotatable=False)

# Alternating chain: A must be followed east by B and B by A
CHAIN_A = Tile(index=0, labels=(0, 1, 0, 2), rotatable=False)
CHAIN_B = Tile(index=1, labels=(0, 2, 0, 1), rotatable=False)


def filled(catalog_tiles, *dims) -> Worldmap:
    worldmap = Worldmap(*dims)
    worldmap.reset_all(TileCatalog(catalog_tiles))
    return worldmap


class TestAvailableLabels:
    """Test per-direction label unions."""

    def test_union_over_domain(self):
        worldmap = filled([LINE, EMPTY], 2)
        labels = available_labels(worldmap, Position(0))
        assert labels[Direction.EAST.index] == {Label(0), Label(1)}
        assert labels[Direction.NORTH.index] == {Label(0)}

    def test_single_tile(self):
        worldmap = filled([LINE, EMPTY], 2)
        worldmap[(0,)] = [LINE]
        labels = available_labels(worldmap, Position(0))
        assert labels[Direction.EAST.index] == {Label(1)}


class TestFilterNeighbor:
    """Test filtering one neighbour."""

    def test_removes_incompatible(self):
        worldmap = filled([LINE, EMPTY], 2)
        worldmap[(0,)] = [LINE]
        assert filter_neighbor(worldmap, Position(0), Direction.EAST) is True
        assert worldmap[(1,)] == [LINE]

    def test_unchanged(self):
        worldmap = filled([LINE, EMPTY], 2)
        assert filter_neighbor(worldmap, Position(0), Direction.EAST) is False
        assert len(worldmap[(1,)]) == 2

    def test_edge_of_grid_is_noop(self):
        worldmap = filled([LINE, EMPTY], 2)
        worldmap[(0,)] = [LINE]
        assert filter_neighbor(worldmap, Position(0), Direction.WEST) is False
        assert filter_neighbor(worldmap, Position(0), Direction.NORTH) is False

    def test_contradiction_names_neighbor(self):
        worldmap = filled([LINE, EMPTY], 2)
        worldmap[(0,)] = [LINE]
        worldmap[(1,)] = [EMPTY]
        with pytest.raises(Contradiction) as info:
            filter_neighbor(worldmap, Position(0), Direction.EAST)
        assert info.value.position == Position(1)


class TestPropagate:
    """Test full propagation."""

    def test_forces_whole_chain(self):
        worldmap = filled([CHAIN_A, CHAIN_B], 6)
        worldmap[(0,)] = [CHAIN_A]
        propagate(worldmap, Position(0))
        assert [worldmap[(x,)][0].index for x in range(6)] == [0, 1, 0, 1, 0, 1]
        assert worldmap.is_solved()

    def test_propagates_backwards_too(self):
        worldmap = filled([CHAIN_A, CHAIN_B], 5)
        worldmap[(4,)] = [CHAIN_A]
        propagate(worldmap, Position(4))
        assert [worldmap[(x,)][0].index for x in range(5)] == [0, 1, 0, 1, 0]

    def test_long_chain_does_not_recurse(self):
        """Propagation depth far beyond the interpreter recursion limit."""
        worldmap = filled([CHAIN_A, CHAIN_B], 5000)
        worldmap[(0,)] = [CHAIN_A]
        propagate(worldmap, Position(0))
        assert worldmap.is_solved()
        assert worldmap[(4999,)] == [CHAIN_B]

    def test_domains_only_shrink(self, pipe_catalog):
        """No domain grows during propagation."""
        worldmap = Worldmap(6, 6)
        worldmap.reset_all(pipe_catalog)
        before = worldmap.domain_sizes()
        worldmap[(2, 2)] = [pipe_catalog.find(3)]
        propagate(worldmap, Position(2, 2))
        after = worldmap.domain_sizes()
        assert all(a <= b for a, b in zip(after, before))
        assert sum(after) < sum(before)

    def test_contradiction(self):
        worldmap = filled([LINE, EMPTY], 3)
        worldmap[(2,)] = [EMPTY]
        worldmap[(0,)] = [LINE]
        worldmap[(1,)] = [LINE]
        with pytest.raises(Contradiction):
            propagate(worldmap, Position(1))

    def test_no_change_visits_only_origin(self):
        worldmap = filled([LINE, EMPTY], 3)
        assert propagate(worldmap, Position(1)) == 1


class TestConsistencyChecks:
    """Test conflict detection on decided cells."""

    def test_consistent_grid(self):
        worldmap = Worldmap(2)
        worldmap[(0,)] = [LINE]
        worldmap[(1,)] = [LINE]
        assert find_conflicts(worldmap) == []
        assert is_consistent(worldmap)

    def test_conflict_reported_once(self):
        worldmap = Worldmap(2)
        worldmap[(0,)] = [LINE]
        worldmap[(1,)] = [EMPTY]
        assert find_conflicts(worldmap) == [(Position(0), Direction.EAST)]
        assert not is_consistent(worldmap)

    def test_empty_domain_is_inconsistent(self):
        worldmap = Worldmap(2)
        worldmap[(0,)] = [LINE]
        assert not is_consistent(worldmap)
