"""Custom exception hierarchy for citation prettification."""

from __future__ import annotations


class PrettifyError(RuntimeError):
    """Base exception for citation prettification failures."""


class NotOnLinkError(PrettifyError):
    """Raised when an edit command is invoked outside any citation link."""

    def __init__(self, position: int) -> None:
        super().__init__(f"Not on a citation link (position {position}).")
        self.position = position


class MalformedLinkError(PrettifyError):
    """Raised when text expected to be a citation link does not parse."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Malformed citation link: {text!r}")
        self.text = text


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "MalformedLinkError",
    "NotOnLinkError",
    "PrettifyError",
    "exception_hint",
    "exception_messages",
]
