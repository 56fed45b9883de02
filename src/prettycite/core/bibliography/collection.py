"""Aggregation utilities for BibTeX references."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pybtex.database import BibliographyData, Entry, Person
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from .issues import BibliographyIssue
from .parsing import bibliography_data_from_string


@runtime_checkable
class BibliographyIndex(Protocol):
    """Read-only mapping from citation keys to bibliography fields."""

    def lookup(self, key: str) -> Mapping[str, str] | None: ...


class BibliographyCollection:
    """Aggregate references from one or more BibTeX sources."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._issues: list[BibliographyIssue] = []
        self._file_entry_counts: dict[Path, int] = {}
        self._file_order: list[Path] = []

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def issues(self) -> Sequence[BibliographyIssue]:
        """Return the list of issues discovered while loading references."""
        return tuple(self._issues)

    @property
    def file_stats(self) -> Sequence[tuple[Path, int]]:
        """Return (file, entry_count) pairs in the order files were processed."""
        return tuple((path, self._file_entry_counts.get(path, 0)) for path in self._file_order)

    def load_files(self, files: Iterable[Path | str]) -> None:
        """Load BibTeX entries from one or more files."""
        for file_path in files:
            self._load_file(Path(file_path))

    def _load_file(self, file_path: Path) -> None:
        file_path = file_path.resolve()
        self._file_order.append(file_path)
        parser = bibtex.Parser()

        try:
            data = parser.parse_file(str(file_path))
        except (OSError, PybtexError) as exc:
            self._issues.append(
                BibliographyIssue(
                    message=f"Failed to parse '{file_path}': {exc}",
                    key=None,
                    source=file_path,
                )
            )
            self._file_entry_counts[file_path] = 0
            return

        entry_count = len(data.entries)
        self._file_entry_counts[file_path] = entry_count
        if entry_count == 0:
            self._issues.append(
                BibliographyIssue(
                    message="No references found in file.",
                    key=None,
                    source=file_path,
                )
            )

        self._merge_entries(data, file_path)

    def load_string(self, payload: str, *, source: Path | str | None = None) -> None:
        """Parse inline BibTeX and merge its entries."""
        try:
            data = bibliography_data_from_string(payload)
        except PybtexError as exc:
            source_path = self._resolve_source_path(source)
            self._issues.append(
                BibliographyIssue(message=str(exc), key=None, source=source_path)
            )
            return
        self.load_data(data, source=source)

    def load_data(
        self,
        data: BibliographyData,
        *,
        source: Path | str | None = None,
    ) -> None:
        """Merge pre-parsed bibliography data into the collection."""
        source_path = self._resolve_source_path(source)
        entry_count = len(data.entries)
        self._file_entry_counts[source_path] = (
            self._file_entry_counts.get(source_path, 0) + entry_count
        )
        if source_path not in self._file_order:
            self._file_order.append(source_path)

        if entry_count == 0:
            self._issues.append(
                BibliographyIssue(
                    message="No references found in inline bibliography data.",
                    key=None,
                    source=source_path,
                )
            )
            return

        self._merge_entries(data, source_path)

    def _resolve_source_path(self, source: Path | str | None) -> Path:
        if source is None:
            return Path("inline-bibliography.bib")
        if isinstance(source, Path):
            return source
        return Path(source)

    def _merge_entries(self, data: BibliographyData, source: Path) -> None:
        for key, entry in data.entries.items():
            existing = self._entries.get(key)

            if existing is None:
                self._entries[key] = entry
                continue

            if self._entry_signature(existing) != self._entry_signature(entry):
                self._issues.append(
                    BibliographyIssue(
                        message=(
                            "Duplicate entry conflicts with an existing "
                            "reference; ignoring the newer definition."
                        ),
                        key=key,
                        source=source,
                    )
                )

    def lookup(self, key: str) -> dict[str, str] | None:
        """Return the flat string fields of a reference, persons included.

        Field names are lower-cased. Person roles (``author``, ``editor``) are
        joined back with ``and`` in ``Last, First`` order, as written in BibTeX.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        fields = {str(name).lower(): str(value) for name, value in entry.fields.items()}
        for role, names in _person_names(entry).items():
            if names:
                fields[role.lower()] = " and ".join(names)
        return fields

    def _entry_signature(self, entry: Entry) -> dict[str, Any]:
        return {
            "type": entry.type,
            "fields": {str(name): str(value) for name, value in entry.fields.items()},
            "persons": _person_names(entry),
        }


def _person_names(entry: Entry) -> dict[str, list[str]]:
    return {
        str(role): [str(person) for person in persons if isinstance(person, Person)]
        for role, persons in entry.persons.items()
    }
