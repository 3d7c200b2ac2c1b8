"""Document tree produced by the tree builder and walked by the plugin pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from .position import NodePosition


class NodeKind(Enum):
    ROOT = "root"
    FRONTMATTER = "frontmatter"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    CODE = "code"
    HTML = "html"
    TABLE = "table"
    THEMATIC_BREAK = "thematic_break"
    DEFINITION = "definition"
    TEXT = "text"
    EMPHASIS = "emphasis"
    INLINE_CODE = "inline_code"
    LINK = "link"
    IMAGE = "image"
    WIKILINK = "wikilink"
    BREAK = "break"
    OTHER = "other"


# Node kinds whose literal value counts as readable text
TEXT_KINDS = frozenset(
    {
        NodeKind.TEXT,
        NodeKind.BREAK,
        NodeKind.INLINE_CODE,
        NodeKind.CODE,
        NodeKind.HTML,
        NodeKind.WIKILINK,
    }
)


@dataclass(eq=False)
class Node:
    kind: NodeKind
    position: NodePosition
    children: list[Node] = field(default_factory=list)
    value: str | None = None
    depth: int | None = None  # heading level
    url: str | None = None
    title: str | None = None
    label: str | None = None
    ordered: bool = False
    meta: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        start, end = self.position.start, self.position.end
        return f"<Node {self.kind.value} {start.line}:{start.column}-{end.line}:{end.column}>"


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield node and everything below it, pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def walk(root: Node) -> Iterator[tuple[Node, int | None, Node | None, list[Node]]]:
    """
    Depth-first, pre-order walk.

    Yields (node, index_in_parent, parent, ancestors) where ancestors runs
    from the root down to the parent. The ancestors list is a snapshot.
    """
    stack: list[tuple[Node, int | None, list[Node]]] = [(root, None, [])]
    while stack:
        node, index, ancestors = stack.pop()
        parent = ancestors[-1] if ancestors else None
        yield node, index, parent, ancestors
        lineage = ancestors + [node]
        for i in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[i], i, lineage))


def get_text(node: Node) -> str:
    """Concatenate the literal text held by node's text-bearing descendants."""
    return "".join(
        n.value or "" for n in iter_descendants(node) if n.kind in TEXT_KINDS
    )


@dataclass
class DocumentTree:
    """Tree builder output: the tree plus the decoded front matter."""

    root: Node
    source: str  # normalized text the positions refer to
    properties: dict[str, Any] = field(default_factory=dict)
    frontmatter: Node | None = None
    frontmatter_error: Exception | None = None
