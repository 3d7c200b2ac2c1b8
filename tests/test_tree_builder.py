"""Tests for building document trees from Markdown."""

from notemark.adapters.tree_builder import TreeBuilder, parse_definition
from notemark.core.model import Range
from notemark.core.position import node_position_to_range
from notemark.core.tree import NodeKind, get_text, iter_descendants, walk


def find_all(root, kind):
    return [n for n in iter_descendants(root) if n.kind is kind]


def test_build_heading_and_inline_text():
    """Test heading depth and concatenated label text."""
    doc = TreeBuilder().build("# Hello *world*\n\nSome text.\n")

    heading = find_all(doc.root, NodeKind.HEADING)[0]
    assert heading.depth == 1
    assert get_text(heading) == "Hello world"
    assert node_position_to_range(heading.position) == Range.create(0, 0, 0, 15)

    emphasis = find_all(heading, NodeKind.EMPHASIS)[0]
    assert node_position_to_range(emphasis.position) == Range.create(0, 8, 0, 15)


def test_build_wikilink_position():
    """Test wikilinks carry target, alias and an exact source span."""
    text = "# T\n\nSome [[note#part|Alias]] text.\n"
    doc = TreeBuilder().build(text)

    link = find_all(doc.root, NodeKind.WIKILINK)[0]
    assert link.value == "note#part"
    assert link.label == "Alias"
    start, end = link.position.start.offset, link.position.end.offset
    assert text[start:end] == "[[note#part|Alias]]"
    assert node_position_to_range(link.position) == Range.create(2, 5, 2, 24)


def test_build_markdown_link_and_image():
    """Test links keep their url and images keep alt text."""
    text = "see [docs](other.md#part) and ![alt](pic.png)\n"
    doc = TreeBuilder().build(text)

    link = find_all(doc.root, NodeKind.LINK)[0]
    assert link.url == "other.md#part"
    assert get_text(link) == "docs"
    assert text[link.position.start.offset : link.position.end.offset] == "[docs](other.md#part)"

    image = find_all(doc.root, NodeKind.IMAGE)[0]
    assert image.url == "pic.png"
    assert image.label == "alt"
    assert text[image.position.start.offset : image.position.end.offset] == "![alt](pic.png)"


def test_build_frontmatter_properties():
    """Test leading YAML is decoded into properties."""
    doc = TreeBuilder().build("---\ntitle: T\ntags: [a, b]\n---\n# H\n")

    assert doc.properties == {"title": "T", "tags": ["a", "b"]}
    assert doc.frontmatter is not None
    assert doc.frontmatter.kind is NodeKind.FRONTMATTER
    assert doc.frontmatter.position.start.line == 1
    assert doc.frontmatter_error is None


def test_build_bad_frontmatter_is_reported_not_raised():
    """Test malformed YAML leaves properties empty."""
    doc = TreeBuilder().build("---\nkey: [unclosed\n---\n# T\n")

    assert doc.properties == {}
    assert doc.frontmatter_error is not None
    assert find_all(doc.root, NodeKind.HEADING)


def test_build_non_mapping_frontmatter_is_an_error():
    """Test a YAML list is not accepted as properties."""
    doc = TreeBuilder().build("---\n- a\n- b\n---\ntext\n")

    assert doc.properties == {}
    assert doc.frontmatter_error is not None


def test_build_reference_definition_node():
    """Test reference definitions stay in the tree."""
    doc = TreeBuilder().build('Text\n\n[ref]: http://example.com "Title"\n')

    definition = find_all(doc.root, NodeKind.DEFINITION)[0]
    assert definition.label == "ref"
    assert definition.url == "http://example.com"
    assert definition.title == "Title"
    assert node_position_to_range(definition.position).start.line == 2


def test_parse_definition_angle_brackets():
    """Test angle-bracketed urls lose their brackets."""
    assert parse_definition("[a b]: <my file.md>") == ("a b", "my file.md", None)
    assert parse_definition("[x]: y.md 'T'") == ("x", "y.md", "T")
    assert parse_definition("not a definition") is None


def test_build_normalizes_line_endings():
    """Test CRLF and CR become LF."""
    doc = TreeBuilder().build("# A\r\nb\rc\n")
    assert doc.source == "# A\nb\nc\n"


def test_build_code_block():
    """Test fenced code keeps content and info string."""
    doc = TreeBuilder().build("```py\nx = 1\n```\n")

    code = find_all(doc.root, NodeKind.CODE)[0]
    assert code.value == "x = 1\n"
    assert code.meta["info"] == "py"
    assert node_position_to_range(code.position) == Range.create(0, 0, 2, 3)


def test_build_tables_toggle():
    """Test table syntax can be switched off."""
    text = "| a | b |\n|---|---|\n| 1 | 2 |\n"

    assert find_all(TreeBuilder().build(text).root, NodeKind.TABLE)
    assert not find_all(TreeBuilder(tables=False).build(text).root, NodeKind.TABLE)


def test_build_nested_list_columns():
    """Test nested items start at their own marker."""
    doc = TreeBuilder().build("- a\n  - b\n")

    items = find_all(doc.root, NodeKind.LIST_ITEM)
    assert len(items) == 2
    assert node_position_to_range(items[0].position) == Range.create(0, 0, 1, 5)
    assert node_position_to_range(items[1].position) == Range.create(1, 2, 1, 5)

    inner_paragraph = find_all(items[1], NodeKind.PARAGRAPH)[0]
    assert node_position_to_range(inner_paragraph.position).start.character == 4


def test_build_blockquote_paragraph_column():
    """Test paragraphs inside quotes start after the marker."""
    doc = TreeBuilder().build("> quoted\n")

    paragraph = find_all(doc.root, NodeKind.PARAGRAPH)[0]
    assert node_position_to_range(paragraph.position) == Range.create(0, 2, 0, 8)


def test_build_trims_trailing_blank_lines_from_blocks():
    """Test blank lines after a list are not part of it."""
    doc = TreeBuilder().build("- a\n- b\n\n\nText\n")

    lst = find_all(doc.root, NodeKind.LIST)[0]
    assert node_position_to_range(lst.position).end.line == 1


def test_walk_is_preorder_with_ancestors():
    """Test walk order, indexes and ancestor chains."""
    doc = TreeBuilder().build("# A\n\ntext\n")

    visited = [(n.kind, i, [a.kind for a in anc]) for n, i, _, anc in walk(doc.root)]
    assert visited[0] == (NodeKind.ROOT, None, [])
    assert visited[1] == (NodeKind.HEADING, 0, [NodeKind.ROOT])
    assert visited[2] == (NodeKind.TEXT, 0, [NodeKind.ROOT, NodeKind.HEADING])
    assert visited[3] == (NodeKind.PARAGRAPH, 1, [NodeKind.ROOT])
