"""List the citation links of a document."""

from __future__ import annotations

from pydantic import ValidationError
import typer

from prettycite.core.document import TextDocument
from prettycite.core.exceptions import PrettifyError
from prettycite.core.links import iter_citations

from .._options import BibliographyOption, ConfigOption, DocumentArgument, NoPageSpaceOption
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import build_prettifier, resolve_config


def links(
    document: DocumentArgument,
    bibliography: BibliographyOption = None,
    config: ConfigOption = None,
    no_page_space: NoPageSpaceOption = False,
) -> None:
    """Show every citation link of DOCUMENT with its rendering."""
    from rich import box
    from rich.table import Table

    try:
        settings = resolve_config(config, no_page_space=no_page_space)
    except (PrettifyError, ValidationError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = TextDocument.from_path(document)
    emitter = CliEmitter()
    prettifier = build_prettifier(source, bibliography, settings, emitter=emitter)
    prettifier.enable()

    table = Table(
        title="Citations",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Offset", justify="right")
    table.add_column("Variant", style="magenta")
    table.add_column("Keys", style="green")
    table.add_column("Page")
    table.add_column("Rendered")

    spans = list(iter_citations(source.text))
    if not spans:
        table.add_row("-", "-", "-", "-", "No citations found")
    for span in spans:
        override = prettifier.engine.override_at(span.start)
        table.add_row(
            str(span.start),
            span.link.variant.value,
            span.link.keys,
            span.link.page or "-",
            override.text if override is not None else "-",
        )

    get_cli_state().console.print(table)
    prettifier.disable()

    missing = emitter.unresolved_keys()
    if missing:
        emit_warning(f"Unresolved citation keys: {', '.join(missing)}")


__all__ = ["links"]
