"""Plugin pipeline: drives every analysis over a single walk of the tree."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .model import DiagnosticKind, DocumentUri, ParseDiagnostic, Resource
from .ports import ParserPlugin, provides
from .tree import DocumentTree, walk

log = logging.getLogger(__name__)


class ParseContext:
    """
    Everything that belongs to one parse and nothing else.

    A new context is built for every parse, so per-document plugin state
    stored here can never leak into the next document.
    """

    def __init__(self, uri: DocumentUri, source: str, diagnostics: list[ParseDiagnostic]):
        self.uri = uri
        self.source = source
        self.lines = source.split("\n")
        self.diagnostics = diagnostics
        self._states: dict[int, Any] = {}

    def set_state(self, plugin: ParserPlugin, state: Any) -> None:
        self._states[id(plugin)] = state

    def state(self, plugin: ParserPlugin) -> Any:
        return self._states[id(plugin)]


def plugin_name(plugin: ParserPlugin) -> str:
    return plugin.name or type(plugin).__name__


class PluginPipeline:
    def __init__(self, plugins: Iterable[ParserPlugin]):
        self.plugins = list(plugins)

    def _call(
        self,
        plugin: ParserPlugin,
        hook: str,
        uri: DocumentUri,
        diagnostics: list[ParseDiagnostic],
        *args: Any,
    ) -> tuple[bool, Any]:
        try:
            return True, getattr(plugin, hook)(*args)
        except Exception as e:
            name = plugin_name(plugin)
            log.warning(
                "Error while executing [%s] in plugin [%s] for file [%s]: %s",
                hook,
                name,
                uri,
                e,
                exc_info=True,
            )
            diagnostics.append(
                ParseDiagnostic(
                    kind=DiagnosticKind.PLUGIN,
                    message=f"{hook} failed in plugin {name}: {e}",
                    uri=uri,
                    plugin=name,
                    hook=hook,
                    error=repr(e),
                )
            )
            return False, None

    def prepare(self, uri: DocumentUri, markdown: str, diagnostics: list[ParseDiagnostic]) -> str:
        """Let each plugin rewrite the raw text before it is parsed, in order."""
        for plugin in self.plugins:
            if not provides(plugin, "on_will_parse_markdown"):
                continue
            ok, result = self._call(plugin, "on_will_parse_markdown", uri, diagnostics, markdown)
            if ok and isinstance(result, str):
                markdown = result
        return markdown

    def run(
        self, uri: DocumentUri, document: DocumentTree, diagnostics: list[ParseDiagnostic]
    ) -> Resource:
        """Walk the tree once, dispatching every node to every plugin."""
        resource = Resource(uri=uri)
        context = ParseContext(uri, document.source, diagnostics)
        tree = document.root
        source = document.source

        for plugin in self.plugins:
            if provides(plugin, "on_will_visit_tree"):
                self._call(plugin, "on_will_visit_tree", uri, diagnostics, tree, resource, context)

        if document.frontmatter_error is not None:
            log.warning("Error while parsing YAML for [%s]: %s", uri, document.frontmatter_error)
            diagnostics.append(
                ParseDiagnostic(
                    kind=DiagnosticKind.FRONTMATTER,
                    message=f"Invalid front matter: {document.frontmatter_error}",
                    uri=uri,
                    error=repr(document.frontmatter_error),
                )
            )
        elif document.frontmatter is not None:
            properties = document.properties
            resource.properties = {**resource.properties, **properties}
            for plugin in self.plugins:
                if provides(plugin, "on_did_find_properties"):
                    self._call(
                        plugin,
                        "on_did_find_properties",
                        uri,
                        diagnostics,
                        properties,
                        resource,
                        document.frontmatter,
                        context,
                    )

        visitors = [p for p in self.plugins if provides(p, "visit")]
        for node, index, parent, ancestors in walk(tree):
            for plugin in visitors:
                self._call(
                    plugin,
                    "visit",
                    uri,
                    diagnostics,
                    node,
                    resource,
                    source,
                    index,
                    parent,
                    ancestors,
                    context,
                )

        for plugin in self.plugins:
            if provides(plugin, "on_did_visit_tree"):
                self._call(plugin, "on_did_visit_tree", uri, diagnostics, tree, resource, source, context)

        return resource
