"""Render a document with its citation links prettified."""

from __future__ import annotations

from pydantic import ValidationError
from rich.text import Text
import typer

from prettycite.core.document import TextDocument
from prettycite.core.exceptions import PrettifyError

from .._options import (
    BibliographyOption,
    ConfigOption,
    DocumentArgument,
    HighlightOption,
    NoPageSpaceOption,
)
from ..state import emit_error, get_cli_state
from ..utils import build_prettifier, resolve_config


def render(
    document: DocumentArgument,
    bibliography: BibliographyOption = None,
    config: ConfigOption = None,
    no_page_space: NoPageSpaceOption = False,
    highlight: HighlightOption = False,
) -> None:
    """Print DOCUMENT as displayed with citation decoration enabled."""
    try:
        settings = resolve_config(config, no_page_space=no_page_space)
    except (PrettifyError, ValidationError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = TextDocument.from_path(document)
    prettifier = build_prettifier(source, bibliography, settings)
    prettifier.enable()

    output = Text()
    for segment, decorated in source.iter_display_segments():
        output.append(segment, style="bold cyan" if decorated and highlight else None)
    get_cli_state().console.print(output, end="", soft_wrap=True)
    prettifier.disable()


__all__ = ["render"]
