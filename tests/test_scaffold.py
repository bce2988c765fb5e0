"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import argparse
from unittest.mock import patch

import pytest

from ytd_select import __version__
from ytd_select.cli import exit_codes
from ytd_select.cli.app import main
from ytd_select.exceptions import (
    CatalogError,
    EnvironmentCheckError,
    EnvironmentError,
    FormatSelectionError,
    IncoherentCombinationError,
    InvalidURLError,
    MetadataExtractionError,
    NoFormatAvailableError,
    SelectorSyntaxError,
    UnresolvedTermError,
    VideoUnavailableError,
    YtdSelectError,
    append_ytdlp_upgrade_suggestion,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            SelectorSyntaxError,
            FormatSelectionError,
            CatalogError,
            InvalidURLError,
            MetadataExtractionError,
            VideoUnavailableError,
            EnvironmentError,
            EnvironmentCheckError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[YtdSelectError]
    ) -> None:
        assert issubclass(exc_class, YtdSelectError)

    @pytest.mark.parametrize(
        "exc_class",
        [UnresolvedTermError, IncoherentCombinationError, NoFormatAvailableError],
    )
    def test_selection_failures(self, exc_class: type[YtdSelectError]) -> None:
        assert issubclass(exc_class, FormatSelectionError)

    def test_selector_syntax_error_does_not_shadow_builtin(self) -> None:
        assert not issubclass(SelectorSyntaxError, SyntaxError)

    def test_hint_is_stored(self) -> None:
        err = YtdSelectError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert YtdSelectError("boom").hint is None

    def test_syntax_error_carries_position(self) -> None:
        err = SelectorSyntaxError("Bad", expression="best[", position=4)
        assert str(err) == "Bad (at position 4)"
        assert err.expression == "best["
        assert err.position == 4

    def test_upgrade_suggestion_appended_once(self) -> None:
        once = append_ytdlp_upgrade_suggestion("Nothing found.")
        assert once.startswith("Nothing found.\n")
        assert append_ytdlp_upgrade_suggestion(once) == once


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.NO_FORMAT == 3
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        assert main([]) == exit_codes.SUCCESS
        assert "usage" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    @patch("ytd_select.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        assert main(["doctor"]) == exit_codes.SUCCESS

    def test_url_routes_to_select(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from ytd_select.cli import app as app_module

        seen: list[str] = []

        def _fake_select(args: argparse.Namespace) -> int:
            seen.append(args.target)
            return exit_codes.SUCCESS

        monkeypatch.setattr(app_module, "_handle_select", _fake_select)
        code = main(["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
        assert code == exit_codes.SUCCESS
        assert seen == ["https://www.youtube.com/watch?v=dQw4w9WgXcQ"]
