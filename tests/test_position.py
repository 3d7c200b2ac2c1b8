"""Tests for the position adapter."""

from notemark.core.model import Position, Range
from notemark.core.position import (
    NodePosition,
    Point,
    node_position_to_range,
    point_to_position,
    utf16_len,
)


def test_point_to_position_is_zero_indexed():
    """Test 1-indexed points become 0-indexed positions."""
    assert point_to_position(Point(1, 1, 0)) == Position(0, 0)
    assert point_to_position(Point(3, 5, 20)) == Position(2, 4)


def test_node_position_to_range():
    """Test both ends are converted."""
    pos = NodePosition(Point(1, 1, 0), Point(2, 4, 10))
    assert node_position_to_range(pos) == Range.create(0, 0, 1, 3)


def test_utf16_len_counts_astral_twice():
    """Test astral characters take two code units."""
    assert utf16_len("abc") == 3
    assert utf16_len("é") == 1
    assert utf16_len("😀") == 2
    assert utf16_len("a😀b") == 4


def test_range_contains():
    """Test half-open containment."""
    rng = Range.create(1, 0, 3, 0)
    assert rng.contains(Position(1, 0))
    assert rng.contains(Position(2, 10))
    assert not rng.contains(Position(3, 0))
    assert not rng.contains(Position(0, 5))


def test_positions_order_by_line_then_character():
    """Test positions sort in document order."""
    positions = [Position(2, 0), Position(0, 5), Position(0, 1)]
    assert sorted(positions) == [Position(0, 1), Position(0, 5), Position(2, 0)]
