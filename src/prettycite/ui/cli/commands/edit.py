"""Edit the raw text of a citation link from the terminal."""

from __future__ import annotations

import click
import typer

from prettycite.core.document import EditPrompt, TextDocument
from prettycite.core.editor import CitationEditor
from prettycite.core.exceptions import PrettifyError

from .._options import (
    DocumentArgument,
    InPlaceOption,
    PositionOption,
    TargetOption,
    TextOption,
)
from ..state import emit_error, emit_warning, get_cli_state


def terminal_prompt(initial_text: str, cursor_offset: int) -> str | None:
    """Ask for the new link text; an empty answer keeps the current one."""
    hint = initial_text[:cursor_offset] + "|" + initial_text[cursor_offset:]
    try:
        return typer.prompt(f"Edit {hint}", default=initial_text, show_default=False)
    except click.Abort:
        return None


def _fixed_prompt(text: str) -> EditPrompt:
    def prompt(initial_text: str, cursor_offset: int) -> str:
        return text

    return prompt


def edit(
    document: DocumentArgument,
    position: PositionOption,
    target: TargetOption = None,
    text: TextOption = None,
    in_place: InPlaceOption = False,
) -> None:
    """Replace the citation link at POSITION in DOCUMENT."""
    source = TextDocument.from_path(document)
    editor = CitationEditor(
        source,
        terminal_prompt if text is None else _fixed_prompt(text),
        validate=True,
    )
    try:
        replacement = editor.edit_at(position, target)
    except PrettifyError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if replacement is None:
        emit_warning("Edit cancelled; document left unchanged.")
        raise typer.Exit(code=1)

    if in_place:
        source.write()
        get_cli_state().err_console.log(f"Updated {document}")
        return
    typer.echo(source.text, nl=False)


__all__ = ["edit", "terminal_prompt"]
