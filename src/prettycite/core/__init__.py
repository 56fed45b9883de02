"""Core citation parsing, formatting, decoration, and editing primitives."""

from __future__ import annotations

from .bibliography import BibliographyCollection, BibliographyIndex, BibliographyIssue
from .config import PrettifyConfig
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .document import DisplayOverride, DocumentSurface, EditPrompt, TextDocument
from .editor import CitationEditor, CursorTarget, strip_brackets
from .engine import DecorationEngine, RenderedSpan
from .exceptions import MalformedLinkError, NotOnLinkError, PrettifyError
from .formatter import format_author, format_citation, format_pages
from .links import CitationLink, CitationSpan, CitationVariant, iter_citations, parse_link
from .resolver import BibEntry, FieldResolver


__all__ = [
    "BibEntry",
    "BibliographyCollection",
    "BibliographyIndex",
    "BibliographyIssue",
    "CitationEditor",
    "CitationLink",
    "CitationSpan",
    "CitationVariant",
    "CursorTarget",
    "DecorationEngine",
    "DiagnosticEmitter",
    "DisplayOverride",
    "DocumentSurface",
    "EditPrompt",
    "FieldResolver",
    "LoggingEmitter",
    "MalformedLinkError",
    "NotOnLinkError",
    "NullEmitter",
    "PrettifyConfig",
    "PrettifyError",
    "RenderedSpan",
    "TextDocument",
    "format_author",
    "format_citation",
    "format_pages",
    "iter_citations",
    "parse_link",
    "strip_brackets",
]
