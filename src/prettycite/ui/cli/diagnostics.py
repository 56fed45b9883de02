"""Route decoration diagnostics to the terminal."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from prettycite.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter(DiagnosticEmitter):
    """Emitter used by CLI commands.

    Every event is recorded on the `CLIState`. Lookup misses and render
    summaries are echoed to stderr only with ``-v``; `unresolved_keys` lets a
    command report the misses once at the end instead.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        self._state.record_event(name, data)
        if self._state.verbosity >= 1 and (message := format_event_message(name, data)):
            render_message("info", message)

    def unresolved_keys(self) -> list[str]:
        """Return the sorted citation keys that had no bibliography entry."""
        misses = self._state.events.get("citation_lookup_miss", [])
        return sorted({str(event["key"]) for event in misses if event.get("key")})


__all__ = ["CliEmitter"]
