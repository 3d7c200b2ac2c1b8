"""Tests for alias extraction."""

from notemark.adapters.markdown_parser import MarkdownParser
from notemark.core.model import Range


def test_alias_and_aliases_keys():
    """Test both keys contribute, ranged on the front matter block."""
    resource = MarkdownParser().parse(
        "file:///note.md", "---\nalias: One, Two\naliases:\n  - Three\n---\n"
    )

    assert [a.title for a in resource.aliases] == ["One", "Two", "Three"]
    assert all(a.range == Range.create(0, 0, 4, 3) for a in resource.aliases)


def test_no_aliases_without_frontmatter():
    """Test documents without front matter have no aliases."""
    resource = MarkdownParser().parse("file:///note.md", "# alias: nope\n")
    assert resource.aliases == []
