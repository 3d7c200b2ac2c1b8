from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from .model import DocumentUri, ParseResult, Resource
from .tree import Node

if TYPE_CHECKING:
    from .pipeline import ParseContext


class ParserPlugin:
    """
    One analysis contributing to a Resource.

    Every hook is optional; the pipeline only calls the hooks a subclass
    overrides. Hooks run in this order for each parse:

    1. on_will_parse_markdown(markdown) -> markdown
    2. on_will_visit_tree(tree, resource, context)
    3. on_did_find_properties(properties, resource, node, context)
    4. visit(node, resource, source, index, parent, ancestors, context), once per node
    5. on_did_visit_tree(tree, resource, source, context)

    Plugin instances are shared between parses. Anything that must not
    leak from one document to the next belongs in the ParseContext, set
    up in on_will_visit_tree.
    """

    name: str = ""

    def on_will_parse_markdown(self, markdown: str) -> str:
        return markdown

    def on_will_visit_tree(self, tree: Node, resource: Resource, context: ParseContext) -> None:
        pass

    def on_did_find_properties(
        self, properties: dict[str, Any], resource: Resource, node: Node, context: ParseContext
    ) -> None:
        pass

    def visit(
        self,
        node: Node,
        resource: Resource,
        source: str,
        index: int | None,
        parent: Node | None,
        ancestors: list[Node],
        context: ParseContext,
    ) -> None:
        pass

    def on_did_visit_tree(
        self, tree: Node, resource: Resource, source: str, context: ParseContext
    ) -> None:
        pass


def provides(plugin: ParserPlugin, hook: str) -> bool:
    """True if the plugin overrides the given hook."""
    impl = getattr(type(plugin), hook, None)
    return impl is not None and impl is not getattr(ParserPlugin, hook)


class ResourceParser(Protocol):
    """
    Turn raw Markdown into a Resource. Never raises on malformed content.
    """

    def parse(self, uri: DocumentUri, text: str) -> Resource:
        pass

    def parse_with_diagnostics(self, uri: DocumentUri, text: str) -> ParseResult:
        pass


class ParserCache(Protocol):
    """
    Remember the last parse of each document, keyed by URI and gated on checksum.
    """

    def get(self, uri: DocumentUri) -> Resource | None:
        pass

    def put(self, uri: DocumentUri, checksum: str, result: ParseResult) -> None:
        pass
