"""Tests for parser wiring and logging setup."""

import logging

import pytest

import notemark
from notemark import runtime
from notemark._logging import configure_logging
from notemark.config import NotemarkConfig, ParserConfig
from notemark.core.ports import ParserPlugin


@pytest.fixture
def fresh_logger():
    logger = logging.getLogger("notemark")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.handlers[:], logger.level, logger.propagate = saved


def test_build_parser_with_cache(monkeypatch):
    """Test the default configuration wires a cache."""
    monkeypatch.setattr(runtime, "configure_logging", lambda level: None)
    parser = runtime.build_parser(NotemarkConfig())

    assert parser.cache is not None
    first = parser.parse("file:///a.md", "# A\n")
    assert parser.parse("file:///a.md", "# A\n") is first


def test_build_parser_without_cache_or_tables(monkeypatch):
    """Test parser options follow the configuration."""
    monkeypatch.setattr(runtime, "configure_logging", lambda level: None)
    config = NotemarkConfig(parser=ParserConfig(cache=False, tables=False))
    parser = runtime.build_parser(config)

    assert parser.cache is None
    assert "table" not in parser.builder.md.get_active_rules()["block"]


def test_build_parser_extra_plugins(monkeypatch):
    """Test extension plugins are appended after the built-ins."""

    class Extra(ParserPlugin):
        name = "extra"

    monkeypatch.setattr(runtime, "configure_logging", lambda level: None)
    parser = runtime.build_parser(NotemarkConfig(), extra_plugins=[Extra()])
    assert parser.plugins[-1].name == "extra"


def test_configure_logging_level_from_env(fresh_logger, monkeypatch):
    """Test the environment sets the level when no argument is given."""
    monkeypatch.setenv("NOTEMARK_LOG_LEVEL", "debug")
    configure_logging()

    assert fresh_logger.level == logging.DEBUG
    assert len(fresh_logger.handlers) == 1
    assert fresh_logger.propagate is False


def test_configure_logging_is_idempotent(fresh_logger):
    """Test repeated calls keep a single handler."""
    configure_logging("INFO")
    configure_logging("ERROR")

    assert fresh_logger.level == logging.INFO
    assert len(fresh_logger.handlers) == 1


def test_version_module():
    """Test that version is accessible from module."""
    assert notemark.__version__
    parts = notemark.__version__.split(".")
    assert len(parts) >= 2


def test_helpers_are_public():
    """Test link and section helpers are importable from the package."""
    resource = notemark.MarkdownParser().parse("file:///a.md", "# Intro\n\nSee [[b#Part|x]].\n")

    assert notemark.analyze_link(resource.links[0]) == notemark.LinkParts("b", "Part", "x")
    section = resource.find_section("intro")
    assert notemark.section_text("# Intro\n\nSee [[b#Part|x]].\n", section).startswith("# Intro")
    assert notemark.fragment_to_anchor("Intro", resource) == "intro"
