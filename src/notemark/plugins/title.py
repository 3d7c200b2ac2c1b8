from ..core.ports import ParserPlugin
from ..core.tree import NodeKind, get_text
from ..core.utils import title_from_uri
from .sections import split_block_id


class TitlePlugin(ParserPlugin):
    """
    Title precedence: front matter `title`, then the first level-1 heading,
    then the file name.
    """

    name = "title"

    def on_did_find_properties(self, properties, resource, node, context):
        title = properties.get("title")
        if title is not None:
            resource.title = str(title)

    def visit(self, node, resource, source, index, parent, ancestors, context):
        if resource.title == "" and node.kind is NodeKind.HEADING and node.depth == 1:
            title, _ = split_block_id(get_text(node))
            if title:
                resource.title = title

    def on_did_visit_tree(self, tree, resource, source, context):
        if resource.title == "":
            resource.title = title_from_uri(resource.uri)
