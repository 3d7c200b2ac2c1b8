"""Tests for title resolution."""

from notemark.adapters.markdown_parser import MarkdownParser


def parse(text, uri="file:///notes/My%20Note.md"):
    return MarkdownParser().parse(uri, text)


def test_frontmatter_title_wins():
    """Test front matter title beats the first heading."""
    assert parse("---\ntitle: From YAML\n---\n# From Heading\n").title == "From YAML"


def test_first_level_one_heading():
    """Test the first H1 is used, not an earlier H2."""
    assert parse("## Sub\n# Main\n# Later\n").title == "Main"


def test_heading_block_id_stripped_from_title():
    """Test a block id is not part of the title."""
    assert parse("# Main ^top\n").title == "Main"


def test_filename_fallback():
    """Test the decoded file name is the last resort."""
    assert parse("no headings here\n").title == "My Note"


def test_non_string_title_is_stringified():
    """Test YAML scalars become strings."""
    assert parse("---\ntitle: 2024\n---\n").title == "2024"
