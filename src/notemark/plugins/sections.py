"""Headings and ^block-id blocks as linkable sections.

Headings are tracked on a stack: a heading stays open until a heading of
the same or a shallower level appears, so an H3 closing does not close the
H2 above it. Blocks become sections when they carry a block id, either at
the end of their own text or as a paragraph of ids right after them. List
items always become sections, linkable only when they carry an id.
"""

import re
from dataclasses import dataclass, field

from ..core.model import Position, Range, Resource, Section
from ..core.pipeline import ParseContext
from ..core.ports import ParserPlugin
from ..core.position import node_position_to_range, point_to_position, utf16_len
from ..core.tree import Node, NodeKind, get_text, iter_descendants
from ..core.utils import Slugger

BLOCK_ID = r"\^[:\w.-]+"
HEADING_BLOCK_ID_RE = re.compile(rf"(?:^|\s)({BLOCK_ID})\s*$")
TRAILING_BLOCK_IDS_RE = re.compile(rf"(?:\s+{BLOCK_ID})+\s*$")
ID_PARAGRAPH_RE = re.compile(rf"{BLOCK_ID}(?:\s+{BLOCK_ID})*")
# Quote and list markers in front of a line's content
LINE_MARKERS_RE = re.compile(r"^(?:[\s>]*(?:[-+*]|\d{1,9}[.)])(?=\s))*[\s>]*")

BLOCK_KINDS = frozenset(
    {NodeKind.PARAGRAPH, NodeKind.LIST_ITEM, NodeKind.LIST, NodeKind.BLOCKQUOTE}
)


def split_block_id(text: str) -> tuple[str, str | None]:
    """Split a trailing ^block-id off heading text: ("Intro ^x") -> ("Intro", "^x")."""
    m = HEADING_BLOCK_ID_RE.search(text)
    if not m:
        return text.strip(), None
    return text[: m.start()].strip(), m.group(1)


def split_trailing_ids(text: str) -> tuple[str, list[str]]:
    """Split every trailing ^id off block text: ("para\\n^a ^b") -> ("para", ["^a", "^b"])."""
    m = TRAILING_BLOCK_IDS_RE.search(text)
    if not m:
        return text.strip(), []
    return text[: m.start()].strip(), m.group(0).split()


def _block_ids(block_id: str) -> list[str]:
    return [block_id[1:], block_id]


def _dedupe(ids: list[str | None]) -> list[str]:
    seen: list[str] = []
    for i in ids:
        if i is not None and i not in seen:
            seen.append(i)
    return seen


def list_item_text(node: Node) -> str:
    # Nested lists belong to their own items
    return "\n".join(
        get_text(child) for child in node.children if child.kind is NodeKind.PARAGRAPH
    )


def table_text(node: Node) -> str:
    """One line per row, cells joined with " | "."""
    rows = [n for n in iter_descendants(node) if n.meta.get("type") == "tr"]
    return "\n".join(" | ".join(get_text(cell) for cell in row.children) for row in rows)


def block_text(node: Node) -> str:
    if node.kind is NodeKind.LIST_ITEM:
        return list_item_text(node)
    if node.kind is NodeKind.LIST:
        return "\n".join(list_item_text(item) for item in node.children)
    if node.kind is NodeKind.BLOCKQUOTE:
        return "\n".join(block_text(child) for child in node.children)
    if node.kind is NodeKind.TABLE:
        return table_text(node)
    return get_text(node)


def line_content(line: str) -> str:
    return LINE_MARKERS_RE.sub("", line).strip()


@dataclass
class _OpenHeading:
    label: str
    level: int
    start: Position
    slug: str
    block_id: str | None = None


@dataclass
class _SectionState:
    stack: list[_OpenHeading] = field(default_factory=list)
    slugger: Slugger = field(default_factory=Slugger)
    attributed: set[Node] = field(default_factory=set)


class SectionsPlugin(ParserPlugin):
    name = "sections"

    def on_will_visit_tree(self, tree, resource, context):
        state = _SectionState()
        state.slugger.reset()
        context.set_state(self, state)
        resource.sections = []

    def visit(self, node, resource, source, index, parent, ancestors, context):
        state: _SectionState = context.state(self)
        if node.kind is NodeKind.HEADING:
            self._heading(node, resource, state, context)
            return
        if node.kind not in BLOCK_KINDS or node in state.attributed:
            return
        if any(a.kind is NodeKind.HEADING for a in ancestors):
            return

        if node.kind is NodeKind.PARAGRAPH:
            text = get_text(node).strip()
            if ID_PARAGRAPH_RE.fullmatch(text):
                self._label_previous(node, text.split(), index, parent, resource, state)
            else:
                self._trailing_id(node, text, resource, state, context)
        elif node.kind is NodeKind.LIST_ITEM:
            text = list_item_text(node).strip()
            if not self._trailing_id(node, text, resource, state, context):
                resource.sections.append(
                    Section(
                        label=text,
                        range=node_position_to_range(node.position),
                        canonical_id=None,
                        linkable_ids=[],
                    )
                )
                # Nested lists stay open for their own items
                state.attributed.add(node)
                for child in node.children:
                    if child.kind is NodeKind.PARAGRAPH:
                        self._attribute(child, state)
        else:
            self._id_line(node, resource, state, context)

    def on_did_visit_tree(self, tree, resource, source, context):
        state: _SectionState = context.state(self)
        while state.stack:
            self._close(state.stack.pop(), len(context.lines), resource, context)
        resource.sections.sort(key=lambda s: s.range.start)

    # headings

    def _heading(self, node: Node, resource: Resource, state: _SectionState, context: ParseContext):
        level = node.depth
        text = get_text(node)
        if not text or not level:
            return
        label, block_id = split_block_id(text)
        start = point_to_position(node.position.start)
        while state.stack and state.stack[-1].level >= level:
            self._close(state.stack.pop(), start.line, resource, context)
        state.stack.append(
            _OpenHeading(
                label=label,
                level=level,
                start=start,
                slug=state.slugger.slug(label),
                block_id=block_id,
            )
        )

    def _close(self, heading: _OpenHeading, next_line: int, resource: Resource, context: ParseContext):
        """Emit a heading section running up to (not including) next_line."""
        lines = context.lines
        last = max(heading.start.line, min(next_line, len(lines)) - 1)
        while last > heading.start.line and not lines[last].strip():
            last -= 1
        ids = [heading.slug, heading.label]
        if heading.block_id:
            ids.extend([heading.block_id, heading.block_id[1:]])
        resource.sections.append(
            Section(
                label=heading.label,
                range=Range(heading.start, Position(last, utf16_len(lines[last]))),
                canonical_id=heading.slug,
                linkable_ids=_dedupe(ids),
            )
        )

    # blocks

    def _attribute(self, node: Node, state: _SectionState) -> None:
        state.attributed.update(iter_descendants(node))

    def _block_section(self, label: str, rng: Range, ids: list[str]) -> Section:
        block_id = ids[0]
        ids = _dedupe([i for b in ids for i in _block_ids(b)])
        return Section(label=label, range=rng, canonical_id=block_id[1:], linkable_ids=ids)

    def _label_previous(self, node, ids, index, parent, resource, state) -> None:
        """A paragraph made only of ^ids labels the block right before it."""
        if parent is None or not index:
            return
        block = parent.children[index - 1]
        if block.kind is NodeKind.HEADING or block in state.attributed:
            return
        label, _ = split_trailing_ids(block_text(block))
        resource.sections.append(
            self._block_section(label, node_position_to_range(block.position), ids)
        )
        self._attribute(block, state)
        self._attribute(node, state)

    def _trailing_id(self, node, text, resource, state, context) -> bool:
        """`Some text ^id`: the block labels itself."""
        label, ids = split_trailing_ids(text)
        if not ids:
            return False
        resource.sections.append(
            self._block_section(label, self._range_without_id_lines(node, context), ids)
        )
        self._attribute(node, state)
        return True

    def _id_line(self, node, resource, state, context) -> None:
        """A list or blockquote whose last lines are lone ^ids."""
        lines = block_text(node).rstrip().split("\n")
        cut = len(lines)
        while cut > 1 and ID_PARAGRAPH_RE.fullmatch(lines[cut - 1].strip()):
            cut -= 1
        if cut == len(lines):
            return
        ids = " ".join(lines[cut:]).split()
        resource.sections.append(
            self._block_section(
                "\n".join(lines[:cut]).strip(),
                self._range_without_id_lines(node, context),
                ids,
            )
        )
        self._attribute(node, state)

    def _range_without_id_lines(self, node: Node, context: ParseContext) -> Range:
        """The node's range minus trailing lines holding only ^ids."""
        rng = node_position_to_range(node.position)
        lines = context.lines
        last = rng.end.line
        while last > rng.start.line:
            content = line_content(lines[last])
            if content and not ID_PARAGRAPH_RE.fullmatch(content):
                break
            last -= 1
        if last == rng.end.line:
            return rng
        return Range(rng.start, Position(last, utf16_len(lines[last])))
