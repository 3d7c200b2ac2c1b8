import re

from ..core.model import Range, Tag
from ..core.ports import ParserPlugin
from ..core.position import node_position_to_range, point_to_position, utf16_len
from ..core.tree import NodeKind
from ..core.utils import extract_hashtags, split_property_list

TOP_LEVEL_KEY_RE = re.compile(r"^[^\s#-][^:]*:")


def property_lines(yaml_text: str, key: str) -> tuple[int, int] | None:
    """
    Line span [start, end) of a top-level key in raw YAML text.

    A heuristic good enough to place list entries on their line; it does
    not understand flow mappings or multi-document streams.
    """
    lines = yaml_text.split("\n")
    start = None
    for i, line in enumerate(lines):
        if start is None:
            if line.startswith(f"{key}:"):
                start = i
        elif TOP_LEVEL_KEY_RE.match(line):
            return start, i
    if start is None:
        return None
    return start, len(lines)


class TagsPlugin(ParserPlugin):
    """Tags from the front matter `tags` key and from #hashtags in text."""

    name = "tags"

    def on_did_find_properties(self, properties, resource, node, context):
        tags = split_property_list(properties.get("tags"))
        if not tags:
            return
        block_range = node_position_to_range(node.position)
        yaml_text = node.value or ""
        yaml_lines = yaml_text.split("\n")
        span = property_lines(yaml_text, "tags")
        # The first YAML line sits right below the opening fence
        first_line = block_range.start.line + 1
        for tag in tags:
            rng = block_range
            if span is not None:
                for i in range(*span):
                    line = yaml_lines[i]
                    skip = len("tags:") if i == span[0] else 0
                    col = line.find(tag, skip)
                    if col != -1:
                        char = utf16_len(line[:col])
                        rng = Range.create(
                            first_line + i, char, first_line + i, char + utf16_len(tag)
                        )
                        break
            resource.tags.append(Tag(label=tag, range=rng))

    def visit(self, node, resource, source, index, parent, ancestors, context):
        if node.kind is not NodeKind.TEXT or not node.value:
            return
        start = point_to_position(node.position.start)
        for label, offset in extract_hashtags(node.value):
            char = start.character + utf16_len(node.value[:offset])
            resource.tags.append(
                Tag(
                    label=label,
                    range=Range.create(start.line, char, start.line, char + utf16_len(label) + 1),
                )
            )
