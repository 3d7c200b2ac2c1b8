from ..core.model import NoteLinkDefinition, Position
from ..core.ports import ParserPlugin
from ..core.position import node_position_to_range, point_to_position
from ..core.tree import NodeKind


def trailing_definitions(
    definitions: list[NoteLinkDefinition], file_end: Position
) -> list[NoteLinkDefinition]:
    """
    Keep only the definitions forming a contiguous block at the end of the file.

    Walking backwards from the end, a definition starting more than two
    lines above the one below it (or the file end) ends the block.
    """
    previous_line = file_end.line
    kept: list[NoteLinkDefinition] = []
    for definition in reversed(definitions):
        if definition.range is None:
            break
        if definition.range.start.line < previous_line - 2:
            break
        kept.insert(0, definition)
        previous_line = definition.range.end.line
    return kept


class DefinitionsPlugin(ParserPlugin):
    """Legacy `[label]: url "title"` reference definitions trailing the note."""

    name = "definitions"

    def visit(self, node, resource, source, index, parent, ancestors, context):
        if node.kind is NodeKind.DEFINITION and node.label is not None:
            resource.definitions.append(
                NoteLinkDefinition(
                    label=node.label,
                    url=node.url or "",
                    title=node.title,
                    range=node_position_to_range(node.position),
                )
            )

    def on_did_visit_tree(self, tree, resource, source, context):
        end = point_to_position(tree.position.end)
        resource.definitions = trailing_definitions(resource.definitions, end)
