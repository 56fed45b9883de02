"""Parsing helpers for bibliography payloads."""

from __future__ import annotations

import io

from pybtex.database import BibliographyData
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError


def bibliography_data_from_string(payload: str) -> BibliographyData:
    """Parse an inline BibTeX payload."""
    parser = bibtex.Parser()
    try:
        parsed = parser.parse_stream(io.StringIO(payload))
    except (OSError, PybtexError) as exc:
        raise PybtexError(f"Failed to parse inline bibliography payload: {exc}") from exc

    if not parsed.entries:
        raise PybtexError("Inline bibliography payload does not contain an entry.")
    return parsed
