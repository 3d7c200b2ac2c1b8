"""Splitting a link's raw text into target, section and alias."""

import re
from dataclasses import dataclass
from urllib.parse import unquote

from .model import LinkType, ResourceLink

MARKDOWN_LINK_RE = re.compile(r"^!?\[(?P<alias>.*)\]\((?P<dest>.*)\)$", re.DOTALL)
# <url with spaces> "optional title"
DESTINATION_RE = re.compile(r"^\s*(?:<(?P<angled>[^>]*)>|(?P<bare>\S*))(?:\s+.*)?$", re.DOTALL)


@dataclass(frozen=True)
class LinkParts:
    target: str
    section: str
    alias: str


def _split_section(target: str) -> tuple[str, str]:
    path, _, section = target.partition("#")
    return path.strip(), section.strip()


def analyze_link(link: ResourceLink) -> LinkParts:
    """
    Break a link down into what it points at.

        >>> analyze_link(ResourceLink(LinkType.WIKILINK, "[[note#Intro|see]]", r))
        LinkParts(target='note', section='Intro', alias='see')

    Markdown links yield the URL-decoded path as target and the link text
    as alias. Unrecognized raw text yields the whole text as target.
    """
    raw = link.raw_text
    if link.type is LinkType.WIKILINK:
        inner = raw.lstrip("!")
        if inner.startswith("[[") and inner.endswith("]]"):
            inner = inner[2:-2]
        target, _, alias = inner.partition("|")
        path, section = _split_section(target)
        return LinkParts(target=path, section=section, alias=alias.strip())

    m = MARKDOWN_LINK_RE.match(raw)
    if not m:
        return LinkParts(target=raw, section="", alias="")
    dest = DESTINATION_RE.match(m.group("dest"))
    url = ""
    if dest:
        url = dest.group("angled") if dest.group("angled") is not None else dest.group("bare")
    path, section = _split_section(url)
    return LinkParts(target=unquote(path), section=unquote(section), alias=m.group("alias"))
