from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DocumentUri = str


@dataclass(frozen=True, order=True)
class Position:
    line: int  # 0-indexed
    character: int  # 0-indexed, UTF-16 code units


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position  # exclusive

    @classmethod
    def create(
        cls, start_line: int, start_char: int, end_line: int | None = None, end_char: int | None = None
    ) -> "Range":
        if end_line is None:
            end_line = start_line
        if end_char is None:
            end_char = start_char
        return cls(Position(start_line, start_char), Position(end_line, end_char))

    def contains(self, position: Position) -> bool:
        return self.start <= position < self.end


class LinkType(str, Enum):
    WIKILINK = "wikilink"
    LINK = "link"


@dataclass(frozen=True)
class ResourceLink:
    type: LinkType
    raw_text: str  # literal source, including a leading "!" for embeds
    range: Range
    is_embed: bool = False


@dataclass(frozen=True)
class Tag:
    label: str
    range: Range


@dataclass(frozen=True)
class Alias:
    title: str
    range: Range


@dataclass(frozen=True)
class NoteLinkDefinition:
    label: str
    url: str
    title: str | None = None
    range: Range | None = None

    def format(self) -> str:
        """Render the definition back to `[label]: url "title"` form."""
        url = f"<{self.url}>" if " " in self.url else self.url
        text = f"[{self.label}]: {url}"
        if self.title:
            text = f'{text} "{self.title}"'
        return text


@dataclass
class Section:
    """
    A linkable part of a document: a heading, or a block carrying a ^block-id.

    canonical_id is what new links should use (heading slug, or the block id
    without its caret). It is None for units that only exist for display,
    such as list items without an id.
    linkable_ids holds every identifier that resolves to this section.
    """

    label: str
    range: Range
    canonical_id: str | None
    linkable_ids: list[str] = field(default_factory=list)


_FRAGMENT_JUNK = re.compile(r"[^a-z0-9_-]")


def normalize_fragment(fragment: str) -> str:
    return _FRAGMENT_JUNK.sub("", re.sub(r"\s+", "-", fragment.lower()))


@dataclass
class Resource:
    uri: DocumentUri
    type: str = "note"
    title: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    sections: list[Section] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    aliases: list[Alias] = field(default_factory=list)
    links: list[ResourceLink] = field(default_factory=list)
    definitions: list[NoteLinkDefinition] = field(default_factory=list)

    def find_section(self, fragment: str) -> Section | None:
        """
        Find the section a link fragment points to.

        Matches the fragment verbatim against each section's linkable ids,
        then in normalized form (lowercase, whitespace to dashes, anything
        outside [a-z0-9_-] dropped). Sections without a canonical id are
        never link targets.
        """
        if not fragment:
            return None
        normalized = normalize_fragment(fragment)
        for section in self.sections:
            if section.canonical_id is None or not section.linkable_ids:
                continue
            if fragment in section.linkable_ids or normalized in section.linkable_ids:
                return section
        return None


class DiagnosticKind(str, Enum):
    FRONTMATTER = "frontmatter"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class ParseDiagnostic:
    kind: DiagnosticKind
    message: str
    uri: DocumentUri
    plugin: str | None = None
    hook: str | None = None
    error: str | None = None  # repr of the caught exception


@dataclass
class ParseResult:
    resource: Resource
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)
