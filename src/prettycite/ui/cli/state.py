"""Per-invocation CLI state and the stderr message helpers built on it."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

import click
import typer

from prettycite.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Verbosity, traceback mode and recorded diagnostic events of one run."""

    verbosity: int = 0
    show_tracebacks: bool = False
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict, init=False)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Console bound to the current stdout."""
        self._console = _bound_console(self._console, sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Console bound to the current stderr."""
        self._err_console = _bound_console(self._err_console, sys.stderr)
        return self._err_console

    def record_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        self.events.setdefault(name, []).append(dict(payload or {}))


def _bound_console(console: Console | None, stream: Any) -> Console:
    # Test runners swap the standard streams between invocations.
    if console is not None and console.file is stream:
        return console
    from rich.console import Console

    return Console(file=stream, highlight=False)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("prettycite_cli_state", default=None)


def _state_from_context(ctx: click.Context) -> CLIState | None:
    current: click.Context | None = ctx
    while current is not None:
        if isinstance(current.obj, CLIState):
            return current.obj
        current = current.parent
    return None


def get_cli_state(
    ctx: typer.Context | click.Context | None = None,
    *,
    create: bool = True,
) -> CLIState:
    """Return the state attached to the active click context, or the fallback one."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    state = _state_from_context(ctx) if ctx is not None else None
    if state is None and ctx is not None and create:
        state = CLIState()
        ctx.obj = state
    if state is not None:
        _STATE_VAR.set(state)
        return state

    fallback = _STATE_VAR.get()
    if fallback is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        fallback = CLIState()
        _STATE_VAR.set(fallback)
    return fallback


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Write *message* to stderr; ``-v`` adds the exception type, ``-vv`` its causes."""
    state = get_cli_state()

    if level == "info":
        state.err_console.log(message)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    details: list[str] = []
    if exception is not None and state.verbosity >= 1:
        details.append(f"type: {type(exception).__name__}")
        if state.verbosity >= 2:
            causes = [entry for entry in exception_messages(exception)[1:] if entry != message]
            if causes:
                details.append("caused by:")
                details.extend(f"  {entry}" for entry in causes)

    if details:
        text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` asked for full tracebacks."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
