"""Facade wiring citation decoration and editing for one document.

Architecture
: `CitationPrettifier` owns the `DecorationEngine` and `CitationEditor` of a
  single document so hosts deal with one object per open buffer. The mode is
  off until `enable()` is called; `disable()` restores the raw markup.
: `commands()` returns the host command table. Edit and delete commands are
  only listed when `bind_edit_keys` is set so hosts can keep their own
  bindings.

Usage Example

```pycon
>>> from prettycite.api import CitationPrettifier
>>> from prettycite.core import BibliographyCollection, TextDocument
>>> bibliography = BibliographyCollection()
>>> bibliography.load_string(
...     "@book{CoxeterPG2ed, author={Coxeter, H.S.M.}, year={1987}, title={Projective Geometry}}"
... )
>>> document = TextDocument("As shown in [[cite:CoxeterPG2ed][53]].")
>>> prettifier = CitationPrettifier(document, bibliography)
>>> prettifier.enable()
>>> document.display_text()
'As shown in Coxeter, 1987, p. 53.'
>>> prettifier.disable()
>>> document.display_text()
'As shown in [[cite:CoxeterPG2ed][53]].'
```
"""

from __future__ import annotations

from collections.abc import Callable

from prettycite.core.bibliography import BibliographyIndex
from prettycite.core.config import PrettifyConfig
from prettycite.core.diagnostics import DiagnosticEmitter
from prettycite.core.document import DocumentSurface, EditPrompt
from prettycite.core.editor import CitationEditor, CursorTarget
from prettycite.core.engine import DecorationEngine


def _no_prompt(initial_text: str, cursor_offset: int) -> None:
    return None


class CitationPrettifier:
    """Citation prettification mode for a single document."""

    def __init__(
        self,
        document: DocumentSurface,
        bibliography: BibliographyIndex,
        config: PrettifyConfig | None = None,
        *,
        prompt: EditPrompt | None = None,
        emitter: DiagnosticEmitter | None = None,
        validate_edits: bool = False,
    ) -> None:
        self.document = document
        self.config = config or PrettifyConfig()
        self.engine = DecorationEngine(document, bibliography, self.config, emitter=emitter)
        self.editor = CitationEditor(
            document,
            prompt or _no_prompt,
            self.engine,
            validate=validate_edits,
        )

    @property
    def enabled(self) -> bool:
        return self.engine.enabled

    def enable(self) -> None:
        self.engine.enable()

    def disable(self) -> None:
        self.engine.disable()

    def toggle(self) -> bool:
        """Flip the mode and return whether it is now enabled."""
        if self.engine.enabled:
            self.engine.disable()
        else:
            self.engine.enable()
        return self.engine.enabled

    def edit_link_at(self, position: int, target: CursorTarget | None = None) -> str | None:
        return self.editor.edit_at(position, target)

    def delete_backward_char(self, position: int) -> int:
        return self.editor.delete_backward(position)

    def delete_forward_char(self, position: int) -> int:
        return self.editor.delete_forward(position)

    def commands(self) -> dict[str, Callable[..., object]]:
        """Return the commands a host should expose, keyed by command name."""
        table: dict[str, Callable[..., object]] = {"toggle-mode": self.toggle}
        if self.config.bind_edit_keys:
            table.update(
                {
                    "edit-link": self.edit_link_at,
                    "delete-backward-char": self.delete_backward_char,
                    "delete-forward-char": self.delete_forward_char,
                }
            )
        return table


__all__ = ["CitationPrettifier"]
