"""Built-in analyses run on every parsed document."""

from .aliases import AliasesPlugin
from .definitions import DefinitionsPlugin
from .links import LinksPlugin
from .sections import SectionsPlugin
from .tags import TagsPlugin
from .title import TitlePlugin


def default_plugins() -> list:
    """Fresh instances of the built-in plugins, in dispatch order."""
    return [
        TitlePlugin(),
        LinksPlugin(),
        DefinitionsPlugin(),
        TagsPlugin(),
        AliasesPlugin(),
        SectionsPlugin(),
    ]


__all__ = [
    "default_plugins",
    "TitlePlugin",
    "LinksPlugin",
    "DefinitionsPlugin",
    "TagsPlugin",
    "AliasesPlugin",
    "SectionsPlugin",
]
