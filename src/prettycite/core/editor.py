"""Edit citation links through their raw text.

Decorated citations hide their markup, so editing happens in two phases: the
raw text of the link under the cursor goes through a side-channel prompt, and
the accepted result replaces the link in the document. The editor only writes
raw text; decoration catches up through the document's change notifications.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import TYPE_CHECKING

from .document import DocumentSurface, EditPrompt
from .exceptions import MalformedLinkError, NotOnLinkError
from .links import CitationSpan, citation_at, parse_link, spans_on_line


if TYPE_CHECKING:
    from .engine import DecorationEngine


logger = logging.getLogger(__name__)


class CursorTarget(str, Enum):
    """Where the prompt cursor starts inside the raw link."""

    START = "start"
    VARIANT_END = "variant-end"
    KEYS_END = "keys-end"
    PAGE_END = "page-end"
    END = "end"


def cursor_offset(span: CitationSpan, target: CursorTarget | None = None) -> int:
    """Return the prompt cursor position relative to the start of *span*."""
    if target is None:
        target = CursorTarget.PAGE_END if span.page_end is not None else CursorTarget.VARIANT_END
    if target is CursorTarget.START:
        position = span.start
    elif target is CursorTarget.VARIANT_END:
        position = span.variant_end
    elif target is CursorTarget.KEYS_END:
        position = span.keys_end
    elif target is CursorTarget.PAGE_END:
        position = span.page_end if span.page_end is not None else span.keys_end
    else:
        position = span.end
    return position - span.start


def strip_brackets(raw: str) -> str:
    """Collapse a link without page information to its ``variant:keys`` form.

    >>> strip_brackets("[[cite:CoxeterPG2ed]]")
    'cite:CoxeterPG2ed'
    >>> strip_brackets("[[cite:CoxeterPG2ed][53]]")
    '[[cite:CoxeterPG2ed][53]]'
    """
    link = parse_link(raw)
    if link is None or link.has_locator:
        return raw
    return link.bare()


class CitationEditor:
    """Raw-text editing commands for citation links."""

    def __init__(
        self,
        document: DocumentSurface,
        prompt: EditPrompt,
        engine: DecorationEngine | None = None,
        *,
        validate: bool = False,
    ) -> None:
        self.document = document
        self.prompt = prompt
        self.engine = engine
        self.validate = validate

    def span_at(self, position: int) -> CitationSpan:
        span = citation_at(self.document.text, position)
        if span is None:
            raise NotOnLinkError(position)
        return span

    def edit_at(self, position: int, target: CursorTarget | None = None) -> str | None:
        """Prompt for a new version of the link at *position* and write it back.

        Returns the inserted text, or ``None`` when the prompt was cancelled. With
        ``validate`` set, text that is not a citation link is rejected before the
        document changes.
        """
        span = self.span_at(position)
        raw = self.document.get_text(span.start, span.end)
        edited = self.prompt(raw, cursor_offset(span, target))
        if edited is None:
            logger.debug("Citation edit cancelled at %d", position)
            return None
        if self.validate and parse_link(edited) is None:
            raise MalformedLinkError(edited)
        replacement = strip_brackets(edited)
        self.document.replace(span.start, span.end, replacement)
        return replacement

    def delete_backward(self, position: int) -> int:
        """Delete the character before *position*, or the whole decorated link ending there."""
        if position <= 0:
            return position
        span = self._decorated_span(position, backward=True)
        if span is not None:
            self.document.replace(span.start, span.end, "")
            return span.start
        self.document.replace(position - 1, position, "")
        return position - 1

    def delete_forward(self, position: int) -> int:
        """Delete the character after *position*, or the whole decorated link starting there."""
        if position >= len(self.document.text):
            return position
        span = self._decorated_span(position, backward=False)
        if span is not None:
            self.document.replace(span.start, span.end, "")
        else:
            self.document.replace(position, position + 1, "")
        return position

    def _decorated_span(self, position: int, *, backward: bool) -> CitationSpan | None:
        if self.engine is None or not self.engine.enabled:
            return None
        for span in spans_on_line(self.document.text, position):
            boundary = span.end if backward else span.start
            if boundary != position:
                continue
            if self.engine.override_at(span.start) is not None:
                return span
        return None


__all__ = ["CitationEditor", "CursorTarget", "cursor_offset", "strip_brackets"]
