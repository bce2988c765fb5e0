"""Rendering of catalogs and selection decisions for the CLI layer.

This module is responsible for:

* Rendering a Rich table of the available streams (``--list``).
* Rendering the selected stream(s) as a Rich table.
* Converting a selection into a JSON-serialisable dict (``--json``).

All display-related logic lives here — no selection logic, no
metadata parsing.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ytd_select.cli.console import console, escape
from ytd_select.core.models import SelectedFormat, StreamDescriptor, VideoMetadata
from ytd_select.exceptions import EnvironmentError


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for format rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
            hint="Use --json for plain output.",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _format_filesize(filesize: int | None) -> str:
    """Convert bytes to a human-readable MB string, or ``"Unknown"``."""
    if filesize is None:
        return "Unknown"
    mb = filesize / (1024 * 1024)
    return f"{mb:.1f} MB"


def _format_resolution(fmt: StreamDescriptor) -> str:
    """Render ``1920x1080``, ``1080p``, ``audio only`` or ``Unknown``."""
    if not fmt.kind.has_video:
        return "audio only"
    if fmt.height is None:
        return "Unknown"
    if fmt.width is not None:
        return f"{fmt.width}x{fmt.height}"
    return f"{fmt.height}p"


def _format_bitrate(bitrate: float | None) -> str:
    if bitrate is None:
        return "—"
    return f"{bitrate:.0f}k"


def _format_fps(fps: int | None) -> str:
    if fps is None:
        return "—"
    return str(fps)


def _build_table(title: str, formats: Iterable[StreamDescriptor]) -> Any:
    table_class = _import_rich_table()
    table = table_class(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("ID", justify="left", style="bold")
    table.add_column("Kind", justify="left")
    table.add_column("Ext", justify="left")
    table.add_column("Resolution", justify="right", min_width=10)
    table.add_column("FPS", justify="right")
    table.add_column("Bitrate", justify="right")
    table.add_column("Codec", justify="left")
    table.add_column("Size", justify="right", min_width=10)

    for fmt in formats:
        table.add_row(
            fmt.id,
            fmt.kind.value,
            fmt.ext,
            _format_resolution(fmt),
            _format_fps(fmt.fps),
            _format_bitrate(fmt.bitrate),
            fmt.codec or "—",
            _format_filesize(fmt.filesize),
        )
    return table


# ---------------------------------------------------------------------------
# Rich display
# ---------------------------------------------------------------------------

def display_metadata(metadata: VideoMetadata) -> None:
    console.print()
    console.print(f"[bold cyan]Title:[/bold cyan]  {escape(metadata.title)}")
    if metadata.duration is not None:
        minutes, seconds = divmod(metadata.duration, 60)
        console.print(f"[bold cyan]Duration:[/bold cyan] {minutes}m {seconds}s")
    console.print()


def display_catalog(formats: Iterable[StreamDescriptor]) -> None:
    """Print every available stream in catalog order."""
    console.print(_build_table("Available Formats", formats))
    console.print()


def display_selection(selected: SelectedFormat, expression: str) -> None:
    """Print the streams chosen for *expression*."""
    table = _build_table("Selected Format", selected.descriptors)
    console.print(f"[bold]Selector:[/bold] {escape(expression)}")
    console.print(table)
    console.print(
        f"[bold green]{selected.format_spec}[/bold green]  "
        f"({selected.kind.value}, alternative {selected.alternative_index + 1})"
    )


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def descriptor_to_dict(fmt: StreamDescriptor) -> dict[str, Any]:
    return {
        "id": fmt.id,
        "kind": fmt.kind.value,
        "ext": fmt.ext,
        "height": fmt.height,
        "width": fmt.width,
        "bitrate": fmt.bitrate,
        "codec": fmt.codec,
        "fps": fmt.fps,
        "filesize": fmt.filesize,
        "extra": dict(fmt.extra),
    }


def selection_to_dict(selected: SelectedFormat, expression: str) -> dict[str, Any]:
    """JSON-serialisable summary of a selection decision."""
    return {
        "expression": expression,
        "format_spec": selected.format_spec,
        "kind": selected.kind.value,
        "alternative_index": selected.alternative_index,
        "formats": [descriptor_to_dict(fmt) for fmt in selected.descriptors],
    }
