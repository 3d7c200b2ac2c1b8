"""Utility functions for notemark."""

import hashlib
import re
import unicodedata
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import unquote, urlsplit


def slugify(text: str) -> str:
    """
    Convert heading text to a URL-safe anchor slug, GitHub style.

    - Lowercase
    - Drop punctuation and symbols, keeping letters, marks, digits, `-` and `_`
    - Each space becomes `-` (runs are not collapsed)

    Examples:
        >>> slugify("Parallel transport")
        'parallel-transport'
        >>> slugify("What's new?")
        'whats-new'
    """
    text = text.lower()
    kept = []
    for c in text:
        if c == " ":
            kept.append("-")
        elif c in "-_" or unicodedata.category(c)[0] in "LMN":
            kept.append(c)
    return "".join(kept)


class Slugger:
    """
    Slug generator that never hands out the same slug twice.

    Collisions get a numeric suffix: "intro", "intro-1", "intro-2".
    One instance covers one document; call reset() before reusing it.
    """

    def __init__(self):
        self._occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        original = slugify(text)
        result = original
        while result in self._occurrences:
            self._occurrences[original] += 1
            result = f"{original}-{self._occurrences[original]}"
        self._occurrences[result] = 0
        return result

    def reset(self) -> None:
        self._occurrences.clear()


def checksum(text: str) -> str:
    """SHA256 hex digest of the text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


# "#" at the start or after whitespace; the tag needs at least one non-digit
HASHTAG_RE = re.compile(r"(?<!\S)#([\w/-]*[^\W\d][\w/-]*)")


def extract_hashtags(text: str) -> list[tuple[str, int]]:
    """Return (label, offset) for every #hashtag in text; offset points at '#'."""
    return [(m.group(1), m.start()) for m in HASHTAG_RE.finditer(text)]


def split_property_list(prop: Any) -> list[str]:
    """
    Normalize a front-matter list property.

    Accepts a comma separated string or a list; entries are stringified,
    trimmed, and empty entries dropped.
    """
    if prop is None:
        return []
    if isinstance(prop, (list, tuple)):
        items = [str(p) for p in prop if p is not None]
    else:
        items = str(prop).split(",")
    return [item.strip() for item in items if item.strip()]


def title_from_uri(uri: str) -> str:
    """File name of the document without its extension."""
    path = unquote(urlsplit(uri).path) or uri
    return PurePosixPath(path.replace("\\", "/")).stem
