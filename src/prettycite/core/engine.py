"""Incremental citation decoration.

The engine owns two tables for one document: display overrides it installed,
and `RenderedSpan` cache records keyed by the offset where a citation's key
list ends. Both move with edits. A record stays fresh until the text around
its anchor changes or its key list no longer matches, so re-rendering
unchanged text never queries the bibliography again, even for keys that
failed to resolve.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
from types import MappingProxyType

from .bibliography import BibliographyIndex
from .config import PrettifyConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .document import DisplayOverride, DocumentSurface, shift_range
from .formatter import format_citation
from .links import CitationLink, CitationSpan, iter_citations
from .resolver import BibEntry, FieldResolver


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RenderedSpan:
    """Resolved entries cached at a citation's key-list anchor."""

    anchor: int
    keys: str
    entries: tuple[BibEntry | None, ...]
    fresh: bool = True


class DecorationEngine:
    """Overlay formatted citations on a document without touching its text."""

    def __init__(
        self,
        document: DocumentSurface,
        bibliography: BibliographyIndex,
        config: PrettifyConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.document = document
        self.config = config or PrettifyConfig()
        self.emitter = emitter or NullEmitter()
        self.resolver = FieldResolver(bibliography, emitter=self.emitter)
        self._cache: dict[int, RenderedSpan] = {}
        self._overrides: dict[tuple[int, int], DisplayOverride] = {}
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def cache(self) -> Mapping[int, RenderedSpan]:
        return MappingProxyType(self._cache)

    @property
    def overrides(self) -> tuple[DisplayOverride, ...]:
        return tuple(sorted(self._overrides.values(), key=lambda item: item.start))

    def override_at(self, offset: int) -> DisplayOverride | None:
        """Return the override covering *offset*, if any."""
        for override in self._overrides.values():
            if override.start <= offset < override.end:
                return override
        return None

    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        self.document.subscribe(self.handle_change)
        logger.debug("Citation decoration enabled")
        self.refresh()

    def disable(self) -> None:
        if not self._enabled:
            return
        self.document.unsubscribe(self.handle_change)
        self.document.clear_all_overrides()
        self._overrides.clear()
        self._cache.clear()
        self._enabled = False
        logger.debug("Citation decoration disabled")

    def handle_change(self, start: int, end: int, old_length: int) -> None:
        """Edit notification: new text at ``[start, end)`` replaced *old_length* chars."""
        if not self._enabled:
            return
        old_end = start + old_length
        delta = (end - start) - old_length
        self._shift_cache(start, old_end, end, delta)
        self._shift_overrides(start, old_end, delta)
        self.refresh(start, end)

    def _shift_cache(self, start: int, old_end: int, new_end: int, delta: int) -> None:
        shifted: dict[int, RenderedSpan] = {}
        for anchor, record in self._cache.items():
            if anchor < start:
                shifted[anchor] = record
                continue
            if anchor > old_end:
                record.anchor = anchor + delta
                shifted[record.anchor] = record
                continue
            # The key list touches the edit, keep the record only as stale.
            record.fresh = False
            record.anchor = new_end
            shifted.setdefault(new_end, record)
        self._cache = shifted

    def _shift_overrides(self, start: int, old_end: int, delta: int) -> None:
        shifted: dict[tuple[int, int], DisplayOverride] = {}
        for override in self._overrides.values():
            moved = shift_range(override.start, override.end, start, old_end, delta)
            if moved is not None:
                shifted[moved] = DisplayOverride(moved[0], moved[1], override.text)
        self._overrides = shifted

    def refresh(self, start: int = 0, end: int | None = None) -> None:
        """Re-render every citation on the lines spanning ``[start, end]``."""
        if not self._enabled:
            return
        text = self.document.text
        if end is None:
            end = len(text)
        region_start = self.document.line_bounds(start)[0]
        region_end = self.document.line_bounds(end)[1]
        self._clear_region(region_start, region_end)

        lookups = self.resolver.lookup_count
        seen: set[int] = set()
        matched = rendered = 0
        for span in iter_citations(text, region_start, region_end):
            matched += 1
            bounds = self._link_bounds(span)
            if bounds is None:
                continue
            seen.add(span.keys_end)
            record = self._rendered_span(span)
            display = self._format(span.link, record.entries)
            if display:
                self._install(bounds[0], bounds[1], display)
                rendered += 1

        for anchor in [a for a in self._cache if region_start <= a <= region_end]:
            if anchor not in seen:
                del self._cache[anchor]

        if matched:
            self.emitter.event(
                "citation_render",
                {
                    "matched": matched,
                    "rendered": rendered,
                    "lookups": self.resolver.lookup_count - lookups,
                },
            )

    def _clear_region(self, start: int, end: int) -> None:
        self.document.clear_overrides(start, end)
        for key, override in list(self._overrides.items()):
            if override.overlaps(start, end):
                del self._overrides[key]

    def _link_bounds(self, span: CitationSpan) -> tuple[int, int] | None:
        """Return the decorated range, or ``None`` for citations outside bracket links."""
        link = self.document.bracket_link_at(span.start)
        if link is None:
            return None
        link_start, link_end = link
        if span.start != link_start and self.document.get_text(link_start, span.start) != "[[":
            return None
        if span.keys_end > link_end:
            return None
        return link_start, min(link_end, span.end)

    def _rendered_span(self, span: CitationSpan) -> RenderedSpan:
        record = self._cache.get(span.keys_end)
        if record is not None and record.fresh and record.keys == span.link.keys:
            return record
        entries = tuple(self.resolver.resolve(span.link.key_list))
        record = RenderedSpan(anchor=span.keys_end, keys=span.link.keys, entries=entries)
        self._cache[span.keys_end] = record
        return record

    def _format(self, link: CitationLink, entries: Sequence[BibEntry | None]) -> str:
        formatter = self.config.format_function
        if formatter is None:
            return format_citation(link, entries, self.config)
        try:
            return formatter(link, entries, self.config) or ""
        except Exception as exc:  # noqa: BLE001 - decoration never interrupts editing
            self.emitter.warning(f"Citation format function failed for '{link.keys}'", exc)
            return ""

    def _install(self, start: int, end: int, text: str) -> None:
        self.document.set_override(start, end, text)
        self._overrides[(start, end)] = DisplayOverride(start, end, text)


__all__ = ["DecorationEngine", "RenderedSpan"]
