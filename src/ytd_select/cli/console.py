"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``, ``--json``)
remain functional even when Rich is not installed.
"""

from __future__ import annotations

import re
import sys
from functools import lru_cache
from typing import Any

from ytd_select.exceptions import EnvironmentError

_MARKUP_RE = re.compile(r"\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


@lru_cache(maxsize=2)
def get_rich_console(stderr: bool = True) -> Any:
    """Return a shared Rich console for stderr (default) or stdout."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr, highlight=False)


def strip_markup(text: str) -> str:
    """Remove simple Rich markup tags such as ``[bold red]`` / ``[/]``."""
    return _MARKUP_RE.sub("", text).replace("[/]", "")


def escape(text: str) -> str:
    """Escape *text* so selector brackets are not read as Rich markup."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return text
    return rich_escape(text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with a plain-text fallback."""

    def __init__(self, *, stderr: bool) -> None:
        self._stderr = stderr

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain ``print``."""
        try:
            rich_console = get_rich_console(self._stderr)
        except EnvironmentError:
            stream = sys.stderr if self._stderr else sys.stdout
            plain = [strip_markup(o) if isinstance(o, str) else o for o in objects]
            print(*plain, file=stream)
            return
        rich_console.print(*objects)


console = _ConsoleProxy(stderr=True)
