"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from prettycite.api import CitationPrettifier
from prettycite.core.bibliography import BibliographyCollection
from prettycite.core.config import PrettifyConfig
from prettycite.core.document import TextDocument

from .diagnostics import CliEmitter
from .state import emit_warning, get_cli_state


def load_bibliography(files: Iterable[Path] | None) -> BibliographyCollection:
    """Load BibTeX files, reporting loading issues as warnings."""
    collection = BibliographyCollection()
    collection.load_files(files or [])
    for issue in collection.issues:
        emit_warning(str(issue))
    return collection


def resolve_config(config_path: Path | None, *, no_page_space: bool = False) -> PrettifyConfig:
    """Combine an optional configuration file with command line overrides."""
    config = PrettifyConfig.from_file(config_path) if config_path else PrettifyConfig()
    if no_page_space:
        config = config.model_copy(update={"space_before_page_number": False})
    return config


def build_prettifier(
    document: TextDocument,
    bibliography_files: Iterable[Path] | None,
    config: PrettifyConfig,
    *,
    emitter: CliEmitter | None = None,
) -> CitationPrettifier:
    """Create a prettifier reporting diagnostics through the CLI state."""
    bibliography = load_bibliography(bibliography_files)
    return CitationPrettifier(
        document,
        bibliography,
        config,
        emitter=emitter or CliEmitter(state=get_cli_state()),
    )


__all__ = ["build_prettifier", "load_bibliography", "resolve_config"]
