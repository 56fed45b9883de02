"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from prettycite.core.editor import CursorTarget


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
EDITING_PANEL = "Editing"

DocumentArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DOCUMENT",
        help="Text document containing citation links.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

BibliographyOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--bibliography",
        "-b",
        help="BibTeX file used to resolve citation keys. Repeat for several files.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="TOML file with prettycite options.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

NoPageSpaceOption = Annotated[
    bool,
    typer.Option(
        "--no-page-space",
        help="Render page locators as 'p.53' instead of 'p. 53'.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

HighlightOption = Annotated[
    bool,
    typer.Option(
        "--highlight",
        help="Style rendered citations so they stand out from the surrounding text.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

PositionOption = Annotated[
    int,
    typer.Option(
        "--position",
        "-p",
        min=0,
        help="Character offset of the citation link to edit.",
        rich_help_panel=EDITING_PANEL,
    ),
]

TargetOption = Annotated[
    CursorTarget | None,
    typer.Option(
        "--target",
        case_sensitive=False,
        help="Part of the link the prompt cursor refers to.",
        rich_help_panel=EDITING_PANEL,
    ),
]

TextOption = Annotated[
    str | None,
    typer.Option(
        "--text",
        help="Replacement link text; skips the interactive prompt.",
        rich_help_panel=EDITING_PANEL,
    ),
]

InPlaceOption = Annotated[
    bool,
    typer.Option(
        "--in-place",
        "-i",
        help="Write the edited document back instead of printing it.",
        rich_help_panel=EDITING_PANEL,
    ),
]
