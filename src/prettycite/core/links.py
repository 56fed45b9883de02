"""Citation link grammar and matcher.

Citation links follow the org-ref syntax::

    [[VARIANT:KEYS][PREPAGE::PAGE::POSTPAGE]]

where the outer brackets, the page bracket and every part of the page
bracket are optional. Matches are returned as `CitationSpan` records holding a
parsed `CitationLink` together with the offsets editing commands need.

```pycon
>>> span = search("See [[cite:CoxeterPG2ed][53]].")
>>> span.link.variant.value, span.link.keys, span.link.page
('cite', 'CoxeterPG2ed', '53')
>>> span.start, span.end
(4, 29)
```
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
import re


class CitationVariant(str, Enum):
    """Known citation tags."""

    CITE = "cite"
    NOCITE = "nocite"
    CITET = "citet"
    CITEP = "citep"
    CITEALT = "citealt"
    CITEALP = "citealp"
    CITENUM = "citenum"
    CITETEXT = "citetext"
    CITEAUTHOR = "citeauthor"
    CITEYEAR = "citeyear"
    CITEYEARPAR = "citeyearpar"
    CITETITLE = "citetitle"
    CITEURL = "citeurl"
    PARENCITE = "parencite"
    FOOTCITE = "footcite"
    FOOTCITETEXT = "footcitetext"
    TEXTCITE = "textcite"
    SMARTCITE = "smartcite"
    SUPERCITE = "supercite"
    AUTOCITE = "autocite"
    FULLCITE = "fullcite"
    FOOTFULLCITE = "footfullcite"
    NOTECITE = "notecite"
    PNOTECITE = "pnotecite"
    FNOTECITE = "fnotecite"
    CITES = "cites"
    PARENCITES = "parencites"
    FOOTCITES = "footcites"
    FOOTCITETEXTS = "footcitetexts"
    SMARTCITES = "smartcites"
    TEXTCITES = "textcites"
    SUPERCITES = "supercites"
    AUTOCITES = "autocites"
    CAP_CITE = "Cite"
    CAP_CITET = "Citet"
    CAP_CITEP = "Citep"
    CAP_CITEALT = "Citealt"
    CAP_CITEALP = "Citealp"
    CAP_CITEAUTHOR = "Citeauthor"
    CAP_PARENCITE = "Parencite"
    CAP_TEXTCITE = "Textcite"
    CAP_SMARTCITE = "Smartcite"
    CAP_AUTOCITE = "Autocite"
    CAP_NOTECITE = "Notecite"
    CAP_PNOTECITE = "Pnotecite"
    CAP_CITES = "Cites"
    CAP_PARENCITES = "Parencites"
    CAP_SMARTCITES = "Smartcites"
    CAP_TEXTCITES = "Textcites"
    CAP_AUTOCITES = "Autocites"
    STAR_CITE = "cite*"
    STAR_CITET = "citet*"
    STAR_CITEP = "citep*"
    STAR_CITEALT = "citealt*"
    STAR_CITEALP = "citealp*"
    STAR_CITEAUTHOR = "citeauthor*"
    STAR_CITEYEAR = "citeyear*"
    STAR_CITETITLE = "citetitle*"
    STAR_PARENCITE = "parencite*"
    STAR_AUTOCITE = "autocite*"
    STAR_CAP_AUTOCITE = "Autocite*"

    @property
    def style(self) -> str:
        """Return the lower-case tag without star, used for formatting dispatch."""
        return self.value.rstrip("*").lower()


# Longest tags first so ``citetitle`` wins over ``cite``.
_VARIANT_ALTERNATION = "|".join(
    re.escape(variant.value)
    for variant in sorted(CitationVariant, key=lambda item: len(item.value), reverse=True)
)
_LETTER = r"[^\W\d_]"

CITATION_PATTERN = re.compile(
    r"(?:\[\[)?"
    rf"(?<![\w*])(?P<variant>{_VARIANT_ALTERNATION})"
    r":&?"
    r"(?P<keys>[\w-]+(?:,[\w-]+)*)"
    r"\]?"
    r"(?P<pages>\["
    rf"(?:(?P<prepage>{_LETTER}(?:{_LETTER}|[ .])*)::)?"
    r"(?P<page>[\d-]*)"
    r"(?:::(?P<postpage>[^\]\n]+))?"
    r"\])?"
    r"\]?"
)


@dataclass(frozen=True, slots=True)
class CitationLink:
    """Structured fields of a citation link.

    Missing page segments are empty strings; `has_page_bracket` tells apart a
    link without page bracket from one with an empty bracket.
    """

    variant: CitationVariant
    keys: str
    prepage: str = ""
    page: str = ""
    postpage: str = ""
    has_page_bracket: bool = False

    @property
    def key_list(self) -> tuple[str, ...]:
        return tuple(key.strip() for key in self.keys.split(",") if key.strip())

    @property
    def has_locator(self) -> bool:
        """Whether any of the page bracket segments carries text."""
        return bool(self.page or self.prepage or self.postpage)

    def bare(self) -> str:
        """Return the minimal ``variant:keys`` form."""
        return f"{self.variant.value}:{self.keys}"


@dataclass(frozen=True, slots=True)
class CitationSpan:
    """A citation link located in a text buffer."""

    start: int
    end: int
    variant_end: int
    keys_end: int
    page_end: int | None
    text: str
    link: CitationLink

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end


def _span_from_match(match: re.Match[str]) -> CitationSpan:
    has_pages = match.group("pages") is not None
    link = CitationLink(
        variant=CitationVariant(match.group("variant")),
        keys=match.group("keys"),
        prepage=(match.group("prepage") or "").strip(),
        page=match.group("page") or "",
        postpage=(match.group("postpage") or "").strip(),
        has_page_bracket=has_pages,
    )
    return CitationSpan(
        start=match.start(),
        end=match.end(),
        variant_end=match.end("variant"),
        keys_end=match.end("keys"),
        page_end=match.end("page") if has_pages else None,
        text=match.group(0),
        link=link,
    )


def search(text: str, pos: int = 0, endpos: int | None = None) -> CitationSpan | None:
    """Return the first citation starting at or after *pos*."""
    if endpos is None:
        endpos = len(text)
    match = CITATION_PATTERN.search(text, pos, endpos)
    if match is None:
        return None
    return _span_from_match(match)


def iter_citations(text: str, start: int = 0, end: int | None = None) -> Iterator[CitationSpan]:
    """Yield every citation found between *start* and *end*."""
    if end is None:
        end = len(text)
    for match in CITATION_PATTERN.finditer(text, start, end):
        yield _span_from_match(match)


def parse_link(raw: str) -> CitationLink | None:
    """Parse *raw* as a single citation link, or return ``None``."""
    match = CITATION_PATTERN.fullmatch(raw.strip())
    if match is None:
        return None
    return _span_from_match(match).link


def line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return the ``[start, end)`` bounds of the line containing *offset*."""
    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return start, end


def spans_on_line(text: str, offset: int) -> list[CitationSpan]:
    """Return the citations found on the line containing *offset*."""
    start, end = line_bounds(text, offset)
    return list(iter_citations(text, start, end))


def citation_at(text: str, offset: int) -> CitationSpan | None:
    """Return the first citation on the current line that contains *offset*."""
    for span in spans_on_line(text, offset):
        if span.contains(offset):
            return span
    return None


__all__ = [
    "CITATION_PATTERN",
    "CitationLink",
    "CitationSpan",
    "CitationVariant",
    "citation_at",
    "iter_citations",
    "line_bounds",
    "parse_link",
    "search",
    "spans_on_line",
]
