import logging
from typing import Iterable

from ..core.cache import ParseCache
from ..core.model import DocumentUri, ParseDiagnostic, ParseResult, Resource
from ..core.pipeline import PluginPipeline
from ..core.ports import ParserPlugin, ResourceParser
from ..core.utils import checksum
from ..plugins import default_plugins
from .tree_builder import TreeBuilder, normalize_newlines

log = logging.getLogger(__name__)


class MarkdownParser(ResourceParser):
    """
    Parse one Markdown document into a Resource.

    The built-in plugins run first, in a fixed order, followed by any
    extra_plugins. With a cache, unchanged text for a known URI returns the
    previously built result without parsing.
    """

    def __init__(
        self,
        extra_plugins: Iterable[ParserPlugin] = (),
        cache: ParseCache | None = None,
        builder: TreeBuilder | None = None,
    ):
        self.builder = builder or TreeBuilder()
        self.pipeline = PluginPipeline([*default_plugins(), *extra_plugins])
        self.cache = cache

    @property
    def plugins(self) -> list[ParserPlugin]:
        return self.pipeline.plugins

    def parse(self, uri: DocumentUri, text: str) -> Resource:
        return self.parse_with_diagnostics(uri, text).resource

    def parse_with_diagnostics(self, uri: DocumentUri, text: str) -> ParseResult:
        if self.cache is None:
            return self._parse(uri, text)

        digest = checksum(text)
        cached = self.cache.lookup(uri, digest)
        if cached is not None:
            log.debug("Cache hit: %s", uri)
            return cached
        result = self._parse(uri, text)
        self.cache.put(uri, digest, result)
        return result

    def _parse(self, uri: DocumentUri, text: str) -> ParseResult:
        log.debug("Parsing: %s", uri)
        diagnostics: list[ParseDiagnostic] = []
        markdown = self.pipeline.prepare(uri, normalize_newlines(text), diagnostics)
        document = self.builder.build(markdown)
        resource = self.pipeline.run(uri, document, diagnostics)
        log.debug(
            "Parsed %s: %d sections, %d links, %d tags",
            uri,
            len(resource.sections),
            len(resource.links),
            len(resource.tags),
        )
        return ParseResult(resource=resource, diagnostics=diagnostics)
