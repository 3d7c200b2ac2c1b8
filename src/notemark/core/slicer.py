"""Slicing engine for extracting the source text of sections."""

from .model import Position, Resource, Section
from .utils import slugify


def _char_index(line: str, character: int) -> int:
    """Code-point index in line for a UTF-16 column; clamps past the end."""
    units = 0
    for i, c in enumerate(line):
        if units >= character:
            return i
        units += 2 if ord(c) > 0xFFFF else 1
    return len(line)


def position_to_offset(source: str, position: Position) -> int:
    """Translate a line/UTF-16 column position into an index into source."""
    lines = source.split("\n")
    if position.line >= len(lines):
        return len(source)
    offset = sum(len(line) + 1 for line in lines[: position.line])
    return offset + _char_index(lines[position.line], position.character)


def slice_section(source: str, section: Section) -> tuple[int, int]:
    """
    Get the (start, end) offsets a section covers in source.

    The range end is exclusive, so the pair can be used directly as
    source[start:end].
    """
    start = position_to_offset(source, section.range.start)
    end = position_to_offset(source, section.range.end)
    return start, max(start, end)


def section_text(source: str, section: Section) -> str:
    start, end = slice_section(source, section)
    return source[start:end]


def fragment_to_anchor(fragment: str, resource: Resource | None = None) -> str:
    """
    Map a link fragment to the HTML anchor a renderer emits for it.

    - With a resource: the canonical id of the section the fragment finds,
      falling back to the rules below when nothing matches
    - Block ids (^label): the label without the caret
    - Anything else: the heading slug
    """
    if resource is not None:
        section = resource.find_section(fragment)
        if section is not None and section.canonical_id:
            return section.canonical_id
    if fragment.startswith("^"):
        return fragment[1:]
    return slugify(fragment)
