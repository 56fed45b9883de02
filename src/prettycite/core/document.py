"""Document surface consumed by the decoration engine and the link editor.

Architecture
: `DocumentSurface` lists what the citation machinery needs from a live
  document: raw text access, line and bracket-link boundaries, a display
  override API, and after-change notifications.
: `TextDocument` is an in-memory implementation. Display overrides move with
  edits like text properties do in an editor: overrides after a change are
  shifted, overrides touching the replaced text are dropped.
: `EditPrompt` is the side-channel prompt used to edit raw citation text.

Change callbacks receive ``(start, end, old_length)``: the new text occupies
``[start, end)`` and replaced ``old_length`` characters.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Protocol, runtime_checkable

from .links import line_bounds


logger = logging.getLogger(__name__)

ChangeCallback = Callable[[int, int, int], None]

# Org bracket links: [[target]] or [[target][description]].
BRACKET_LINK_PATTERN = re.compile(r"\[\[(?:[^\[\]\\]|\\.)+\](?:\[[^\n]*?\])?\]")


@dataclass(frozen=True, slots=True)
class DisplayOverride:
    """Replacement text displayed over ``[start, end)``."""

    start: int
    end: int
    text: str

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and start < self.end


@runtime_checkable
class DocumentSurface(Protocol):
    """Operations a host document exposes to the citation machinery."""

    @property
    def text(self) -> str: ...

    def get_text(self, start: int = 0, end: int | None = None) -> str: ...

    def replace(self, start: int, end: int, text: str) -> None: ...

    def line_bounds(self, offset: int) -> tuple[int, int]: ...

    def bracket_link_at(self, offset: int) -> tuple[int, int] | None: ...

    def set_override(self, start: int, end: int, text: str) -> None: ...

    def clear_overrides(self, start: int, end: int) -> None: ...

    def clear_all_overrides(self) -> None: ...

    def subscribe(self, callback: ChangeCallback) -> None: ...

    def unsubscribe(self, callback: ChangeCallback) -> None: ...


@runtime_checkable
class EditPrompt(Protocol):
    """Side-channel prompt returning the edited text, or ``None`` when cancelled."""

    def __call__(self, initial_text: str, cursor_offset: int) -> str | None: ...


def shift_range(
    start: int, end: int, change_start: int, old_end: int, delta: int
) -> tuple[int, int] | None:
    """Move ``[start, end)`` across a change, ``None`` when it touched the change."""
    if end <= change_start:
        return start, end
    if start >= old_end:
        return start + delta, end + delta
    return None


class TextDocument:
    """In-memory document implementing `DocumentSurface`."""

    def __init__(self, text: str = "", *, path: Path | None = None) -> None:
        self._text = text
        self.path = path
        self._overrides: dict[tuple[int, int], DisplayOverride] = {}
        self._subscribers: list[ChangeCallback] = []

    @classmethod
    def from_path(cls, path: Path | str) -> TextDocument:
        source = Path(path)
        return cls(source.read_text(encoding="utf-8"), path=source)

    def write(self, path: Path | str | None = None) -> Path:
        """Persist the raw text, never the display overrides."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("Document has no associated path.")
        target.write_text(self._text, encoding="utf-8")
        return target

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def get_text(self, start: int = 0, end: int | None = None) -> str:
        return self._text[start:end]

    def line_bounds(self, offset: int) -> tuple[int, int]:
        return line_bounds(self._text, offset)

    def bracket_link_at(self, offset: int) -> tuple[int, int] | None:
        start, end = self.line_bounds(offset)
        for match in BRACKET_LINK_PATTERN.finditer(self._text, start, end):
            if match.start() <= offset < match.end():
                return match.start(), match.end()
        return None

    def replace(self, start: int, end: int, text: str) -> None:
        if not 0 <= start <= end <= len(self._text):
            raise IndexError(f"Invalid range [{start}, {end}) for document of length {len(self)}")
        old_length = end - start
        self._text = self._text[:start] + text + self._text[end:]
        self._shift_overrides(start, end, len(text) - old_length)
        new_end = start + len(text)
        for callback in list(self._subscribers):
            callback(start, new_end, old_length)

    def insert(self, offset: int, text: str) -> None:
        self.replace(offset, offset, text)

    def delete(self, start: int, end: int) -> None:
        self.replace(start, end, "")

    def _shift_overrides(self, start: int, old_end: int, delta: int) -> None:
        shifted: dict[tuple[int, int], DisplayOverride] = {}
        for override in self._overrides.values():
            moved = shift_range(override.start, override.end, start, old_end, delta)
            if moved is None:
                continue
            shifted[moved] = DisplayOverride(moved[0], moved[1], override.text)
        self._overrides = shifted

    def set_override(self, start: int, end: int, text: str) -> None:
        self.clear_overrides(start, end)
        self._overrides[(start, end)] = DisplayOverride(start, end, text)

    def clear_overrides(self, start: int, end: int) -> None:
        for key, override in list(self._overrides.items()):
            if override.overlaps(start, end):
                del self._overrides[key]

    def clear_all_overrides(self) -> None:
        self._overrides.clear()

    @property
    def overrides(self) -> tuple[DisplayOverride, ...]:
        return tuple(sorted(self._overrides.values(), key=lambda item: item.start))

    def iter_display_segments(self) -> Iterator[tuple[str, bool]]:
        """Yield ``(text, decorated)`` chunks making up the displayed document."""
        cursor = 0
        for override in self.overrides:
            if override.start > cursor:
                yield self._text[cursor : override.start], False
            yield override.text, True
            cursor = override.end
        if cursor < len(self._text):
            yield self._text[cursor:], False

    def display_text(self) -> str:
        return "".join(segment for segment, _ in self.iter_display_segments())

    def subscribe(self, callback: ChangeCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


__all__ = [
    "BRACKET_LINK_PATTERN",
    "ChangeCallback",
    "DisplayOverride",
    "DocumentSurface",
    "EditPrompt",
    "TextDocument",
    "shift_range",
]
