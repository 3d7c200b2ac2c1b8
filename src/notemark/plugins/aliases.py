from ..core.model import Alias
from ..core.ports import ParserPlugin
from ..core.position import node_position_to_range
from ..core.utils import split_property_list

ALIAS_KEYS = ("alias", "aliases")


class AliasesPlugin(ParserPlugin):
    name = "aliases"

    def on_did_find_properties(self, properties, resource, node, context):
        rng = node_position_to_range(node.position)
        for key in ALIAS_KEYS:
            for alias in split_property_list(properties.get(key)):
                resource.aliases.append(Alias(title=alias, range=rng))
