"""notemark - Markdown notes parsed into linkable resources."""

from .adapters.markdown_parser import MarkdownParser
from .core.cache import ParseCache
from .core.links import LinkParts, analyze_link
from .core.model import (
    Alias,
    NoteLinkDefinition,
    ParseDiagnostic,
    ParseResult,
    Position,
    Range,
    Resource,
    ResourceLink,
    Section,
    Tag,
)
from .core.ports import ParserPlugin
from .core.slicer import fragment_to_anchor, section_text, slice_section
from .runtime import build_parser

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "MarkdownParser",
    "ParseCache",
    "ParserPlugin",
    "build_parser",
    "analyze_link",
    "LinkParts",
    "slice_section",
    "section_text",
    "fragment_to_anchor",
    "Alias",
    "NoteLinkDefinition",
    "ParseDiagnostic",
    "ParseResult",
    "Position",
    "Range",
    "Resource",
    "ResourceLink",
    "Section",
    "Tag",
]
