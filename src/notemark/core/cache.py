"""Checksum-gated memory of the last parse of each document."""

from dataclasses import dataclass

from .model import DocumentUri, ParseResult, Resource
from .ports import ParserCache


@dataclass(frozen=True)
class CacheEntry:
    checksum: str
    result: ParseResult


class ParseCache(ParserCache):
    """
    At most one entry per document URI.

    A lookup only counts as a hit when the caller's checksum matches the
    stored one; a different checksum means the entry is stale and gets
    replaced wholesale by the next put().
    """

    def __init__(self):
        self._entries: dict[DocumentUri, CacheEntry] = {}

    def get(self, uri: DocumentUri) -> Resource | None:
        """The cached Resource for uri, whatever its checksum."""
        entry = self._entries.get(uri)
        return entry.result.resource if entry is not None else None

    def entry(self, uri: DocumentUri) -> CacheEntry | None:
        return self._entries.get(uri)

    def lookup(self, uri: DocumentUri, checksum: str) -> ParseResult | None:
        entry = self._entries.get(uri)
        if entry is None or entry.checksum != checksum:
            return None
        return entry.result

    def put(self, uri: DocumentUri, checksum: str, result: ParseResult) -> None:
        self._entries[uri] = CacheEntry(checksum=checksum, result=result)

    def has(self, uri: DocumentUri) -> bool:
        return uri in self._entries

    def delete(self, uri: DocumentUri) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
