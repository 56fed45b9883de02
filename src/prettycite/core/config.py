"""Configuration model for citation prettification.

PrettifyConfig

`space_before_page_number` (`bool`, alias `spaceBeforePageNumber`)
: Insert a space between the `p.`/`pp.` marker and the page value
  (`p. 53` rather than `p.53`). Enabled by default.

`format_function` (`Callable | None`, alias `formatFunction`)
: Replacement for the formatter entry point. It is called as
  `format_function(link, entries, config)` with the parsed `CitationLink`, the
  resolved `BibEntry | None` per key, and this configuration, and must return
  the display string (empty to leave the link undecorated).

`bind_edit_keys` (`bool`, alias `bindEditKeys`)
: Whether hosts should bind the raw-link edit and whole-link deletion
  commands. Enabled by default.

Configuration files are TOML documents holding either a `[prettycite]` table
or the options at top level.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import tomllib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import PrettifyError


class PrettifyConfig(BaseModel):
    """Options recognised by the decoration engine and the formatter."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    space_before_page_number: bool = Field(default=True, alias="spaceBeforePageNumber")
    format_function: Callable[..., str] | None = Field(default=None, alias="formatFunction")
    bind_edit_keys: bool = Field(default=True, alias="bindEditKeys")

    @classmethod
    def from_file(cls, path: Path | str) -> PrettifyConfig:
        """Load options from a TOML file."""
        config_path = Path(path)
        try:
            payload: dict[str, Any] = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise PrettifyError(f"Unable to read configuration '{config_path}': {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise PrettifyError(f"Invalid configuration '{config_path}': {exc}") from exc
        section = payload.get("prettycite", payload)
        return cls.model_validate(section)


__all__ = ["PrettifyConfig"]
