"""Primary public API for prettycite."""

from __future__ import annotations

from prettycite.api import CitationPrettifier
from prettycite.core.bibliography import (
    BibliographyCollection,
    BibliographyIndex,
    BibliographyIssue,
    bibliography_data_from_string,
)
from prettycite.core.config import PrettifyConfig
from prettycite.core.document import DisplayOverride, DocumentSurface, EditPrompt, TextDocument
from prettycite.core.editor import CitationEditor, CursorTarget, strip_brackets
from prettycite.core.engine import DecorationEngine, RenderedSpan
from prettycite.core.exceptions import MalformedLinkError, NotOnLinkError, PrettifyError
from prettycite.core.formatter import format_author, format_citation, format_pages
from prettycite.core.links import (
    CitationLink,
    CitationSpan,
    CitationVariant,
    iter_citations,
    parse_link,
)
from prettycite.core.resolver import BibEntry, FieldResolver
from prettycite.version import get_version


__version__ = get_version()

__all__ = [
    "BibEntry",
    "BibliographyCollection",
    "BibliographyIndex",
    "BibliographyIssue",
    "CitationEditor",
    "CitationLink",
    "CitationPrettifier",
    "CitationSpan",
    "CitationVariant",
    "CursorTarget",
    "DecorationEngine",
    "DisplayOverride",
    "DocumentSurface",
    "EditPrompt",
    "FieldResolver",
    "MalformedLinkError",
    "NotOnLinkError",
    "PrettifyConfig",
    "PrettifyError",
    "RenderedSpan",
    "TextDocument",
    "__version__",
    "bibliography_data_from_string",
    "format_author",
    "format_citation",
    "format_pages",
    "get_version",
    "iter_citations",
    "parse_link",
    "strip_brackets",
]
