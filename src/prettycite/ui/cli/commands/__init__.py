"""CLI command implementations exposed via `prettycite.ui.cli`."""

from __future__ import annotations

from .edit import edit
from .links import links
from .render import render


__all__ = ["edit", "links", "render"]
