"""Problems recorded while loading bibliography sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BibliographyIssue:
    """A loading problem, optionally tied to a citation key and a source file."""

    message: str
    key: str | None = None
    source: Path | None = None

    def __str__(self) -> str:
        prefix = f"[{self.key}] " if self.key else ""
        location = f" ({self.source})" if self.source else ""
        return f"{prefix}{self.message}{location}"
