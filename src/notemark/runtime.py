"""Runtime wiring helper for applications embedding the parser."""

from typing import Iterable

from ._logging import configure_logging
from .adapters.markdown_parser import MarkdownParser
from .adapters.tree_builder import TreeBuilder
from .config import NotemarkConfig, load_config
from .core.cache import ParseCache
from .core.ports import ParserPlugin


def build_parser(
    config: NotemarkConfig | None = None,
    extra_plugins: Iterable[ParserPlugin] = (),
) -> MarkdownParser:
    """Build a MarkdownParser wired according to the configuration."""
    if config is None:
        config = load_config()

    configure_logging(config.logging.level)

    builder = TreeBuilder(tables=config.parser.tables)
    cache = ParseCache() if config.parser.cache else None
    return MarkdownParser(extra_plugins=extra_plugins, cache=cache, builder=builder)
