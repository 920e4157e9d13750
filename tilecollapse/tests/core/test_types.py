"""Tests for directions, positions and labels."""

import pytest

from tilecollapse.core.types import Direction, Label, Position


class TestDirection:
    """Test the Direction enum."""

    def test_indices_follow_label_slots(self):
        """Directions slot into the label tuple as N, E, S, W, Up, Down."""
        assert [d.index for d in Direction] == [0, 1, 2, 3, 4, 5]

    def test_opposite_is_an_involution(self):
        """Flipping twice returns the original direction."""
        for direction in Direction:
            assert direction.opposite.opposite == direction
            assert direction.opposite != direction

    def test_opposite_pairs(self):
        assert Direction.NORTH.opposite == Direction.SOUTH
        assert Direction.EAST.opposite == Direction.WEST
        assert Direction.UP.opposite == Direction.DOWN

    def test_offsets_cancel_with_opposite(self):
        """Moving in a direction and back lands on the start."""
        for direction in Direction:
            dx, dy, dz = direction.offset
            ox, oy, oz = direction.opposite.offset
            assert (dx + ox, dy + oy, dz + oz) == (0, 0, 0)

    def test_for_arity(self):
        assert Direction.for_arity(4) == Direction.horizontal()
        assert len(Direction.for_arity(6)) == 6
        with pytest.raises(ValueError):
            Direction.for_arity(5)


class TestPosition:
    """Test Position arithmetic."""

    def test_defaults_to_planar(self):
        assert Position(3) == (3, 0, 0)
        assert Position(1, 2) == (1, 2, 0)

    def test_add_direction(self):
        assert Position(1, 1) + Direction.NORTH == Position(1, 0, 0)
        assert Position(1, 1) + Direction.EAST == Position(2, 1, 0)
        assert Position(1, 1, 1) + Direction.DOWN == Position(1, 1, 0)

    def test_neighbors_covers_all_directions(self):
        neighbors = Position(5, 5, 5).neighbors()
        assert set(neighbors) == set(Direction)


class TestLabel:
    """Test the tagged connection label."""

    def test_author_labels_match_by_value(self):
        assert Label.of(3) == Label(3)
        assert Label.of(3) != Label.of(4)

    def test_seam_never_matches_author_label(self):
        """A seam with the same number is still a different label."""
        assert Label.seam(1000) != Label.of(1000)

    def test_epoch_distinguishes_seams(self):
        seam = Label.seam(1001)
        assert seam.at_epoch(1) != seam
        assert seam.at_epoch(4) == seam

    def test_epoch_ignored_for_author_labels(self):
        assert Label.of(2).at_epoch(3) == Label.of(2)

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            Label.of("1")
        with pytest.raises(TypeError):
            Label.of(True)
