"""CLI application entry point and command routing for ytd-select.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ytd_select.exceptions.YtdSelectError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No selection logic lives here — all work is delegated to the core
  and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  for everything except ``--json`` output, which goes to stdout as-is.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from ytd_select.cli import exit_codes
from ytd_select.cli.console import console, escape
from ytd_select.exceptions import NoFormatAvailableError, YtdSelectError
from ytd_select.logging_config import setup_logging
from ytd_select.utils.constants import DEFAULT_FORMAT_SPEC
from ytd_select.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are not used; the CLI supports:
    * ``ytd-select <url> [-f EXPR]``       — select from a live extraction
    * ``ytd-select --info-json FILE``      — select from a saved extraction
    * ``ytd-select doctor``                — environment diagnostics
    * ``ytd-select --version``
    """
    parser = argparse.ArgumentParser(
        prog="ytd-select",
        description="Evaluate a yt-dlp style format selector against a video's formats.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Video URL, or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="expression",
        default=DEFAULT_FORMAT_SPEC,
        help=f"Format selector expression (default: {DEFAULT_FORMAT_SPEC}).",
    )
    parser.add_argument(
        "--info-json",
        metavar="FILE",
        default=None,
        help="Read formats from a 'yt-dlp --dump-json' file instead of the network.",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List all available formats instead of selecting.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write the result as JSON to stdout.",
    )
    parser.add_argument(
        "--audio-multistreams",
        action="store_true",
        help="Allow more than one audio stream in a '+' combination.",
    )
    parser.add_argument(
        "--no-video-multistreams",
        action="store_true",
        help="Allow at most one video stream in a '+' combination.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _write_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _handle_select(args: argparse.Namespace) -> int:
    """Obtain a catalog, then list it or evaluate the selector against it.

    Flow:
    1. Load the catalog (info-JSON file, or live yt-dlp extraction).
    2. ``--list``: render the catalog and stop.
    3. Otherwise evaluate the expression and render the decision.
    """
    from ytd_select.cli.render import (
        descriptor_to_dict,
        display_catalog,
        display_metadata,
        display_selection,
        selection_to_dict,
    )
    from ytd_select.core.catalog_service import CatalogService
    from ytd_select.core.combination import StreamCoherencePolicy
    from ytd_select.core.evaluator import select_format

    if args.info_json is not None:
        from ytd_select.infra.info_json import read_info_json

        info = read_info_json(args.info_json)
        metadata = CatalogService.parse_metadata(info)
        catalog = CatalogService.build_catalog(info)
    else:
        from ytd_select.infra.ytdlp_provider import YtDlpMetadataProvider

        if not args.json:
            console.print(f"\n[bold]Fetching formats…[/bold]  {escape(args.target)}\n")
        service = CatalogService(YtDlpMetadataProvider())
        metadata, catalog = service.extract(args.target)

    if args.list:
        if args.json:
            _write_json([descriptor_to_dict(fmt) for fmt in catalog])
        else:
            display_metadata(metadata)
            display_catalog(catalog)
        return exit_codes.SUCCESS

    policy = StreamCoherencePolicy(
        allow_multiple_video=not args.no_video_multistreams,
        allow_multiple_audio=args.audio_multistreams,
    )
    selected = select_format(args.expression, catalog, policy)
    logger.info("Selected %s for %r", selected.format_spec, args.expression)

    if args.json:
        _write_json(selection_to_dict(selected, args.expression))
    else:
        display_metadata(metadata)
        display_selection(selected, args.expression)
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytd_select.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytd-select CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug or args.log_file:
        setup_logging("DEBUG" if args.debug else "INFO", args.log_file)

    if args.target is None and args.info_json is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.target is not None and args.target.lower() == "doctor":
        return _handle_doctor()

    return _handle_select(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _print_error(exc: YtdSelectError) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    if isinstance(exc, NoFormatAvailableError):
        for index, failure in enumerate(exc.failures, start=1):
            console.print(f"  [dim]{index}.[/dim] {escape(str(failure))}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except NoFormatAvailableError as exc:
        _print_error(exc)
        sys.exit(exit_codes.NO_FORMAT)
    except YtdSelectError as exc:
        _print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unhandled exception", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
