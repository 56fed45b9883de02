"""Public CLI exports for prettycite."""

from __future__ import annotations

from .app import app, main
from .commands import edit, links, render
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "edit",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "links",
    "main",
    "render",
]
