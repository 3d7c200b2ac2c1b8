"""Markdown to document tree conversion, built on markdown-it-py.

markdown-it only records line spans for block tokens. Block positions are
taken from those spans (trailing blank lines trimmed). Inline positions are
recovered by scanning the block's source for each token's literal markup,
in document order.
"""

import bisect
import re

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock, reference
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.front_matter import front_matter_plugin

from ..core.position import NodePosition, Point, utf16_len
from ..core.tree import DocumentTree, Node, NodeKind
from .wikilinks import wikilinks_plugin
from .yaml_codec import FrontmatterError, YamlFrontmatter

NEWLINE_RE = re.compile(r"\r\n?")
LIST_MARKER_RE = re.compile(r"(?:[-+*]|\d{1,9}[.)])[ \t]*")
DEFINITION_RE = re.compile(
    r"^\[(?P<label>(?:\\.|[^\\\]])+)\]:\s*"
    r"(?:<(?P<angle>[^<>\n]*)>|(?P<url>\S+))"
    r"(?:\s+(?:\"(?P<dq>(?:\\.|[^\"\\])*)\"|'(?P<sq>(?:\\.|[^'\\])*)'|\((?P<paren>(?:\\.|[^()\\])*)\)))?"
    r"\s*$",
    re.DOTALL,
)

_BLOCK_KINDS = {
    "front_matter": NodeKind.FRONTMATTER,
    "heading": NodeKind.HEADING,
    "paragraph": NodeKind.PARAGRAPH,
    "bullet_list": NodeKind.LIST,
    "ordered_list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
    "blockquote": NodeKind.BLOCKQUOTE,
    "fence": NodeKind.CODE,
    "code_block": NodeKind.CODE,
    "html_block": NodeKind.HTML,
    "hr": NodeKind.THEMATIC_BREAK,
    "table": NodeKind.TABLE,
    "definition": NodeKind.DEFINITION,
}


def _reference_with_token(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    # The stock rule only records definitions in env; keep them in the tree too.
    if not reference(state, start_line, end_line, silent):
        return False
    if not silent:
        token = state.push("definition", "", 0)
        token.map = [start_line, state.line]
        token.content = state.getLines(start_line, state.line, state.blkIndent, False)
    return True


def create_markdown_it(tables: bool = True) -> MarkdownIt:
    """CommonMark plus strikethrough, optional tables, front matter and wikilinks."""
    md = MarkdownIt("commonmark")
    md.enable("strikethrough")
    if tables:
        md.enable("table")
    md.use(front_matter_plugin)
    md.use(wikilinks_plugin)
    md.block.ruler.at("reference", _reference_with_token)
    return md


def normalize_newlines(text: str) -> str:
    return NEWLINE_RE.sub("\n", text)


def parse_definition(text: str) -> tuple[str, str, str | None] | None:
    """Split `[label]: url "title"` into its parts; angle brackets are dropped."""
    m = DEFINITION_RE.match(text.strip())
    if not m:
        return None
    url = m.group("angle") if m.group("angle") is not None else m.group("url")
    title = next(
        (m.group(g) for g in ("dq", "sq", "paren") if m.group(g) is not None), None
    )
    return m.group("label"), url, title


class _SourceMap:
    def __init__(self, source: str):
        self.source = source
        self.lines = source.split("\n")
        self.line_starts = []
        offset = 0
        for line in self.lines:
            self.line_starts.append(offset)
            offset += len(line) + 1

    def point(self, offset: int) -> Point:
        line = bisect.bisect_right(self.line_starts, offset) - 1
        column = utf16_len(self.source[self.line_starts[line] : offset]) + 1
        return Point(line + 1, column, offset)

    def position(self, start: int, end: int) -> NodePosition:
        return NodePosition(self.point(start), self.point(end))

    def line_end(self, line: int) -> int:
        return self.line_starts[line] + len(self.lines[line])


def _leading_column(line: str, quote_depth: int) -> int:
    i = 0
    for _ in range(quote_depth):
        while i < len(line) and line[i] in " \t":
            i += 1
        if i < len(line) and line[i] == ">":
            i += 1
            if i < len(line) and line[i] == " ":
                i += 1
    while i < len(line) and line[i] in " \t":
        i += 1
    return i


def _is_blank(line: str, quote_depth: int) -> bool:
    if quote_depth:
        return not line.strip(" \t>")
    return not line.strip()


class _InlineLocator:
    """Assigns source positions to inline tokens by scanning forward."""

    def __init__(self, sm: _SourceMap, start: int, limit: int):
        self.sm = sm
        self.src = sm.source
        self.cursor = start
        self.limit = limit

    def _find(self, needle: str, start: int | None = None) -> int:
        if not needle:
            return -1
        return self.src.find(needle, self.cursor if start is None else start, self.limit)

    def _node(self, kind: NodeKind, start: int, end: int, **fields) -> Node:
        return Node(kind, self.sm.position(start, end), **fields)

    def convert_all(self, children: list[SyntaxTreeNode]) -> list[Node]:
        return [self.convert(child) for child in children]

    def convert(self, sn: SyntaxTreeNode) -> Node:
        t = sn.type
        if t == "text":
            return self._literal(NodeKind.TEXT, sn.content, sn.content)
        if t == "html_inline":
            return self._literal(NodeKind.HTML, sn.content, sn.content)
        if t == "wikilink":
            node = self._literal(NodeKind.WIKILINK, sn.content, sn.meta.get("target", ""))
            node.label = sn.meta.get("alias")
            return node
        if t == "code_inline":
            return self._code(sn)
        if t in ("softbreak", "hardbreak"):
            return self._break()
        if t == "link":
            return self._link(sn)
        if t == "image":
            return self._image(sn)
        if t in ("em", "strong", "s"):
            return self._emphasis(sn)
        start = self.cursor
        children = self.convert_all(sn.children)
        return self._node(NodeKind.OTHER, start, max(start, self.cursor), children=children)

    def _literal(self, kind: NodeKind, literal: str, value: str) -> Node:
        idx = self._find(literal)
        if idx == -1:
            start = end = self.cursor
        else:
            start, end = idx, idx + len(literal)
            self.cursor = end
        return self._node(kind, start, end, value=value)

    def _break(self) -> Node:
        idx = self._find("\n")
        if idx == -1:
            return self._node(NodeKind.BREAK, self.cursor, self.cursor, value="\n")
        self.cursor = idx + 1
        return self._node(NodeKind.BREAK, idx, idx + 1, value="\n")

    def _code(self, sn: SyntaxTreeNode) -> Node:
        markup = sn.markup or "`"
        start = self._find(markup)
        if start == -1:
            return self._node(NodeKind.INLINE_CODE, self.cursor, self.cursor, value=sn.content)
        close = self._find(markup, start + len(markup))
        if close == -1:
            end = min(start + len(markup) + len(sn.content), self.limit)
        else:
            end = close + len(markup)
        self.cursor = end
        return self._node(NodeKind.INLINE_CODE, start, end, value=sn.content)

    def _emphasis(self, sn: SyntaxTreeNode) -> Node:
        markup = sn.markup
        start = self._find(markup)
        if start == -1:
            start = self.cursor
        else:
            self.cursor = start + len(markup)
        children = self.convert_all(sn.children)
        close = self._find(markup)
        if close != -1:
            self.cursor = close + len(markup)
        return self._node(
            NodeKind.EMPHASIS, start, self.cursor, children=children, meta={"markup": markup}
        )

    def _label_end(self, open_pos: int) -> int:
        depth = 0
        i = open_pos
        while i < self.limit:
            c = self.src[i]
            if c == "\\":
                i += 2
                continue
            if c == "[":
                depth += 1
            elif c == "]":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return -1

    def _link_tail(self, pos: int) -> int:
        """End offset of the destination part following a link label."""
        if pos < self.limit and self.src[pos] == "(":
            depth = 0
            i = pos
            while i < self.limit:
                c = self.src[i]
                if c == "\\":
                    i += 2
                    continue
                if c == "(":
                    depth += 1
                elif c == ")":
                    depth -= 1
                    if depth == 0:
                        return i + 1
                i += 1
            return pos
        if pos < self.limit and self.src[pos] == "[":
            close = self.src.find("]", pos + 1, self.limit)
            if close != -1:
                return close + 1
        return pos

    def _link(self, sn: SyntaxTreeNode) -> Node:
        href = sn.attrs.get("href")
        title = sn.attrs.get("title")
        if sn.markup == "autolink":
            start = self._find("<")
            if start == -1:
                start = self.cursor
            self.cursor = start + 1
            children = self.convert_all(sn.children)
            close = self._find(">")
            if close != -1:
                self.cursor = close + 1
            return self._node(NodeKind.LINK, start, self.cursor, children=children, url=href)

        start = self._find("[")
        if start == -1:
            start = self.cursor
            children = self.convert_all(sn.children)
            return self._node(
                NodeKind.LINK, start, max(start, self.cursor), children=children, url=href, title=title
            )
        close = self._label_end(start)
        inner = _InlineLocator(self.sm, start + 1, close if close != -1 else self.limit)
        children = inner.convert_all(sn.children)
        end = inner.cursor if close == -1 else self._link_tail(close + 1)
        self.cursor = end
        return self._node(NodeKind.LINK, start, end, children=children, url=href, title=title)

    def _image(self, sn: SyntaxTreeNode) -> Node:
        src = sn.attrs.get("src")
        title = sn.attrs.get("title")
        start = self._find("![")
        if start == -1:
            return self._node(
                NodeKind.IMAGE, self.cursor, self.cursor, url=src, title=title, label=sn.content
            )
        close = self._label_end(start + 1)
        end = start + 2 if close == -1 else self._link_tail(close + 1)
        self.cursor = end
        # Alt text stays an attribute, as in mdast
        return self._node(NodeKind.IMAGE, start, end, url=src, title=title, label=sn.content)


class _Converter:
    def __init__(self, source: str):
        self.sm = _SourceMap(source)

    def convert(self, root: SyntaxTreeNode) -> Node:
        end = len(self.sm.source)
        node = Node(NodeKind.ROOT, self.sm.position(0, end))
        locator = _InlineLocator(self.sm, 0, end)
        for child in root.children:
            node.children.append(self._block(child, 0, (0, end), None, locator))
        return node

    def _block(
        self,
        sn: SyntaxTreeNode,
        quote_depth: int,
        outer: tuple[int, int],
        inherited: tuple[int, int] | None,
        outer_locator: _InlineLocator,
    ) -> Node:
        kind = _BLOCK_KINDS.get(sn.type, NodeKind.OTHER)
        lines = self.sm.lines

        if sn.map:
            begin, stop = sn.map
            column = _leading_column(lines[begin], quote_depth)
            if inherited is not None and inherited[0] == begin:
                column = max(column, inherited[1])
            column = min(column, len(lines[begin]))
            last = max(begin, min(stop, len(lines)) - 1)
            while last > begin and _is_blank(lines[last], quote_depth):
                last -= 1
            start = self.sm.line_starts[begin] + column
            end = self.sm.line_end(last)
            span = (start, end)
            locator = _InlineLocator(self.sm, start, end)
        else:
            begin, column = None, None
            span = outer
            locator = outer_locator

        node = Node(kind, self.sm.position(*span))
        if kind is NodeKind.OTHER:
            node.meta["type"] = sn.type
        elif kind is NodeKind.HEADING:
            node.depth = int(sn.tag[1:])
        elif kind is NodeKind.LIST:
            node.ordered = sn.type == "ordered_list"
        elif kind is NodeKind.CODE:
            node.value = sn.content
            node.meta["info"] = sn.info
        elif kind in (NodeKind.HTML, NodeKind.FRONTMATTER):
            node.value = sn.content
        elif kind is NodeKind.DEFINITION:
            node.value = sn.content
            parts = parse_definition(sn.content)
            if parts is not None:
                node.label, node.url, node.title = parts

        # Where content starts on this block's first line, for children sharing it
        child_inherited = inherited
        if begin is not None:
            content_column = column
            line = lines[begin]
            if kind is NodeKind.LIST_ITEM:
                m = LIST_MARKER_RE.match(line, column)
                if m:
                    content_column = m.end()
            elif kind is NodeKind.BLOCKQUOTE and line.startswith(">", column):
                content_column = column + 1
                if line.startswith(" ", content_column):
                    content_column += 1
            child_inherited = (begin, content_column)
        child_depth = quote_depth + 1 if kind is NodeKind.BLOCKQUOTE else quote_depth

        for child in sn.children:
            if child.type == "inline":
                node.children.extend(locator.convert_all(child.children))
            else:
                node.children.append(
                    self._block(child, child_depth, span, child_inherited, locator)
                )
        return node


class TreeBuilder:
    """
    Builds a DocumentTree from raw Markdown.

    Line endings are normalized first; every position in the tree refers to
    the normalized text, which is returned as DocumentTree.source. Front
    matter that fails to decode is reported on the result rather than raised.
    """

    def __init__(self, tables: bool = True, frontmatter: YamlFrontmatter | None = None):
        self.md = create_markdown_it(tables=tables)
        self.frontmatter = frontmatter or YamlFrontmatter()

    def build(self, text: str) -> DocumentTree:
        source = normalize_newlines(text)
        tokens = self.md.parse(source)
        root = _Converter(source).convert(SyntaxTreeNode(tokens))
        document = DocumentTree(root=root, source=source)
        for child in root.children:
            if child.kind is NodeKind.FRONTMATTER:
                document.frontmatter = child
                try:
                    document.properties = self.frontmatter.decode(child.value or "")
                except FrontmatterError as e:
                    document.frontmatter_error = e
                break
        return document
