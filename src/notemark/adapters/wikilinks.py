"""markdown-it extension recognizing [[target#section|alias]] wikilinks."""

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline


def wikilinks_plugin(md: MarkdownIt) -> None:
    """Emit a `wikilink` token for every [[...]] span.

    The token's content is the literal source, e.g. "[[note#part|Alias]]";
    meta holds "target" (everything before "|") and "alias" (or None).
    """
    md.inline.ruler.before("link", "wikilink", _wikilink_rule)


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    src = state.src
    start = state.pos
    if not src.startswith("[[", start):
        return False
    end = src.find("]]", start + 2, state.posMax)
    if end == -1:
        return False
    inner = src[start + 2 : end]
    if not inner.strip() or "\n" in inner or "[" in inner or "]" in inner:
        return False

    if not silent:
        target, _, alias = inner.partition("|")
        token = state.push("wikilink", "", 0)
        token.content = src[start : end + 2]
        token.markup = "[["
        token.meta = {"target": target.strip(), "alias": alias.strip() or None}

    state.pos = end + 2
    return True
