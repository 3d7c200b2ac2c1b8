"""Conversion between tree points (1-indexed) and document positions (0-indexed)."""

from dataclasses import dataclass

from .model import Position, Range


@dataclass(frozen=True)
class Point:
    line: int  # 1-indexed
    column: int  # 1-indexed, UTF-16 code units
    offset: int  # 0-indexed code point offset into the normalized source


@dataclass(frozen=True)
class NodePosition:
    start: Point
    end: Point  # exclusive


def utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units (astral characters count twice)."""
    return len(text) + sum(1 for c in text if ord(c) > 0xFFFF)


def point_to_position(point: Point) -> Position:
    return Position(point.line - 1, point.column - 1)


def node_position_to_range(pos: NodePosition) -> Range:
    return Range(point_to_position(pos.start), point_to_position(pos.end))
