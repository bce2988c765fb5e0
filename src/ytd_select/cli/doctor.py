"""``ytd-select doctor`` — environment diagnostics command.

Gathers system information and renders a table summarising whether
the runtime environment can fetch and select formats.  Rendering falls
back to plain stderr text when Rich is missing, since a missing Rich is
one of the conditions this command reports.
"""

from __future__ import annotations

import platform
import sys

from ytd_select.cli import exit_codes
from ytd_select.cli.console import console
from ytd_select.version import __version__

Check = tuple[str, str, str]
"""``(label, value, status)`` where status is ``OK``, ``WARN`` or ``FAIL``."""

_STATUS_MARKUP: dict[str, str] = {
    "OK": "[green]OK[/green]",
    "WARN": "[yellow]WARN[/yellow]",
    "FAIL": "[red]FAIL[/red]",
}


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    return "Python", version, "OK" if ok else "FAIL"


def _ytdlp_version_check() -> Check:
    """yt-dlp is required for live extraction, not for ``--info-json``."""
    try:
        from yt_dlp.version import __version__ as ydl_ver
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "FAIL"
    return "yt-dlp", ydl_ver, "OK"


def _rich_check() -> Check:
    try:
        from importlib.metadata import version

        import rich  # noqa: F401
    except ImportError:
        return "rich", "NOT INSTALLED", "WARN"
    return "rich", version("rich"), "OK"


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "OK"


def collect_checks() -> list[Check]:
    return [
        ("ytd-select", __version__, "OK"),
        _python_version_check(),
        _ytdlp_version_check(),
        _rich_check(),
        _os_check(),
    ]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _print_plain(checks: list[Check]) -> None:
    print("\nytd-select doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<32} {status:<8}", file=sys.stderr)
    print(file=sys.stderr)


def _print_rich(checks: list[Check]) -> bool:
    """Render with Rich; return ``False`` when Rich is unavailable."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return False

    table = Table(
        title="ytd-select doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, _STATUS_MARKUP[status])

    console.print()
    console.print(table)
    console.print()
    return True


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks()
    if not _print_rich(checks):
        _print_plain(checks)

    if any(status == "FAIL" for _, _, status in checks):
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
