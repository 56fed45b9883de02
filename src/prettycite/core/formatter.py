"""Turn resolved bibliography fields into citation display strings.

```pycon
>>> from prettycite.core.links import parse_link
>>> from prettycite.core.resolver import BibEntry
>>> entry = BibEntry(author="Coxeter", year="1987", title="Projective Geometry")
>>> format_citation(parse_link("[[parencite:CoxeterPG2ed][36-44]]"), [entry])
'(Coxeter, 1987, pp. 36-44)'
```
"""

from __future__ import annotations

from collections.abc import Sequence
import re
from typing import TYPE_CHECKING

from .config import PrettifyConfig
from .links import CitationLink


if TYPE_CHECKING:
    from .resolver import BibEntry


AUTHOR_SEPARATOR = " and "
MAX_LISTED_AUTHORS = 3
_INITIAL_RE = re.compile(r" [^\W\d_]\.")


def _surname(name: str) -> str:
    name = name.strip()
    if ", " in name:
        return name.split(", ", 1)[0].strip()
    # Natural order names keep their given name but lose middle initials.
    return _INITIAL_RE.sub("", name).strip()


def format_author(raw: str) -> str:
    """Reduce a BibTeX author list to surnames, truncating long lists.

    >>> format_author("Coxeter, H.S.M.")
    'Coxeter'
    >>> format_author("Doe, Jane and Roe, R. and Poe, Edgar and Moe, M.")
    'Doe et al.'
    """
    cleaned = raw.replace("{", "").replace("}", "")
    names = [_surname(name) for name in cleaned.split(AUTHOR_SEPARATOR)]
    names = [name for name in names if name]
    if len(names) > MAX_LISTED_AUTHORS:
        return f"{names[0]} et al."
    return AUTHOR_SEPARATOR.join(names)


def format_pages(page: str, postpage: str = "", *, space: bool = True) -> str | None:
    """Return ``p. 53`` / ``pp. 36-44`` style locators, or ``None`` without page."""
    if not page:
        return None
    marker = "pp." if "-" in page else "p."
    separator = " " if space else ""
    text = f"{marker}{separator}{page}"
    if postpage:
        text = f"{text}, {postpage}"
    return text


def format_entry(
    style: str,
    entry: BibEntry,
    link: CitationLink,
    *,
    space_before_page_number: bool = True,
) -> str | None:
    """Format a single resolved key according to the citation style."""
    if entry.is_empty:
        return None

    pages = format_pages(link.page, link.postpage, space=space_before_page_number)
    author = entry.author
    if link.prepage:
        author = f"{link.prepage} {author}" if author else link.prepage

    if style == "citeauthor":
        return author
    if style == "citeyear":
        return entry.year
    if style == "citetitle":
        return entry.title
    if style == "textcite":
        inner = ", ".join(part for part in (entry.year, pages) if part)
        if not inner:
            return author
        return f"{author} ({inner})" if author else f"({inner})"
    return ", ".join(part for part in (author, entry.year, pages) if part) or None


def format_citation(
    link: CitationLink,
    entries: Sequence[BibEntry | None],
    config: PrettifyConfig | None = None,
) -> str:
    """Build the display string for a citation link; empty when nothing resolved."""
    config = config or PrettifyConfig()
    style = link.variant.style
    parts: list[str] = []
    for entry in entries:
        if entry is None:
            continue
        text = format_entry(
            style,
            entry,
            link,
            space_before_page_number=config.space_before_page_number,
        )
        if text:
            parts.append(text)

    joined = "; ".join(parts)
    if joined and style == "parencite":
        return f"({joined})"
    return joined


__all__ = [
    "AUTHOR_SEPARATOR",
    "MAX_LISTED_AUTHORS",
    "format_author",
    "format_citation",
    "format_entry",
    "format_pages",
]
