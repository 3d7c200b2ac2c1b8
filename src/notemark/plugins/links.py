import posixpath
from urllib.parse import unquote, urlsplit

from ..core.model import LinkType, Position, Range, ResourceLink
from ..core.ports import ParserPlugin
from ..core.position import node_position_to_range
from ..core.tree import NodeKind


def _document_path(uri: str) -> str:
    return posixpath.normpath(unquote(urlsplit(uri).path) or uri)


def links_to_other_document(url: str | None, document_uri: str) -> bool:
    """
    True for relative or file: URLs that point somewhere other than the
    document itself. External schemes and bare #fragments are not notes.
    """
    if not url:
        return False
    parts = urlsplit(url)
    # a one-letter scheme is a Windows drive
    if parts.scheme and parts.scheme != "file" and len(parts.scheme) > 1:
        return False
    if not parts.path:
        return False
    path = unquote(parts.path)
    if parts.scheme != "file" and not path.startswith("/"):
        base = posixpath.dirname(_document_path(document_uri))
        path = posixpath.join(base, path)
    return posixpath.normpath(path) != _document_path(document_uri)


class LinksPlugin(ParserPlugin):
    """Wikilinks, plus Markdown links and images pointing at other documents."""

    name = "links"

    def visit(self, node, resource, source, index, parent, ancestors, context):
        if node.kind is NodeKind.WIKILINK:
            start = node.position.start.offset
            end = node.position.end.offset
            if start == end:
                return
            rng = node_position_to_range(node.position)
            is_embed = start > 0 and source[start - 1] == "!"
            if is_embed:
                start -= 1
                rng = Range(Position(rng.start.line, rng.start.character - 1), rng.end)
            resource.links.append(
                ResourceLink(
                    type=LinkType.WIKILINK,
                    raw_text=source[start:end],
                    range=rng,
                    is_embed=is_embed,
                )
            )
        elif node.kind in (NodeKind.LINK, NodeKind.IMAGE):
            if not links_to_other_document(node.url, resource.uri):
                return
            raw = source[node.position.start.offset : node.position.end.offset]
            resource.links.append(
                ResourceLink(
                    type=LinkType.LINK,
                    raw_text=raw,
                    range=node_position_to_range(node.position),
                    is_embed=raw.startswith("!"),
                )
            )
