"""Resolve citation keys into the author, year and title used for display."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging

from .bibliography import BibliographyIndex
from .diagnostics import DiagnosticEmitter, NullEmitter
from .formatter import format_author


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BibEntry:
    """Display fields of one bibliography record; absent fields are ``None``."""

    author: str | None = None
    year: str | None = None
    title: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.author is None and self.year is None and self.title is None


def strip_braces(value: str) -> str:
    """Remove BibTeX grouping braces."""
    return value.replace("{", "").replace("}", "")


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = strip_braces(str(value)).strip()
    return text or None


def entry_from_fields(fields: Mapping[str, str]) -> BibEntry:
    """Build a `BibEntry` from raw bibliography fields."""
    author = _clean(fields.get("author"))
    year = _clean(fields.get("year"))
    if year is None:
        date = _clean(fields.get("date"))
        if date is not None:
            year = _clean(date.split("-")[0])
    return BibEntry(
        author=(format_author(author) or None) if author is not None else None,
        year=year,
        title=_clean(fields.get("title")),
    )


class FieldResolver:
    """Map citation keys to `BibEntry` values through a bibliography index."""

    def __init__(
        self,
        index: BibliographyIndex,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.index = index
        self.emitter = emitter or NullEmitter()
        self.lookup_count = 0

    def resolve_key(self, key: str) -> BibEntry | None:
        self.lookup_count += 1
        try:
            fields = self.index.lookup(key)
        except Exception as exc:  # noqa: BLE001 - index failures are lookup misses
            logger.debug("Bibliography lookup for '%s' failed", key, exc_info=exc)
            self.emitter.event("citation_lookup_miss", {"key": key, "reason": str(exc)})
            return None
        if fields is None:
            logger.debug("No bibliography entry for '%s'", key)
            self.emitter.event("citation_lookup_miss", {"key": key})
            return None
        return entry_from_fields(fields)

    def resolve(self, keys: Sequence[str]) -> list[BibEntry | None]:
        """Return one entry per key, ``None`` where the lookup failed."""
        return [self.resolve_key(key) for key in keys]


__all__ = ["BibEntry", "FieldResolver", "entry_from_fields", "strip_braces"]
