"""Tests for the fallback evaluator (core/evaluator.py).

End-to-end selection over small catalogs — no I/O, no mocking except
where call order is observed.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from ytd_select.core import combination as combination_module
from ytd_select.core.combination import StreamCoherencePolicy
from ytd_select.core.evaluator import select, select_format
from ytd_select.core.matcher import match
from ytd_select.core.models import FormatCatalog, StreamDescriptor, StreamKind
from ytd_select.core.selector_parser import parse
from ytd_select.exceptions import (
    IncoherentCombinationError,
    NoFormatAvailableError,
    SelectorSyntaxError,
    UnresolvedTermError,
)

CANONICAL = (
    "bestvideo[height<=1080][ext=mp4]+bestaudio[ext=m4a]"
    "/best[height<=1080][ext=mp4]/best"
)


def _catalog() -> FormatCatalog:
    return FormatCatalog(
        formats=(
            StreamDescriptor(id="137", kind=StreamKind.VIDEO_ONLY, ext="mp4", height=1080),
            StreamDescriptor(id="140", kind=StreamKind.AUDIO_ONLY, ext="m4a"),
            StreamDescriptor(id="18", kind=StreamKind.MUXED, ext="mp4", height=360),
        )
    )


# ---------------------------------------------------------------------------
# Reference examples
# ---------------------------------------------------------------------------

class TestExamples:
    def test_canonical_expression(self) -> None:
        result = select_format(CANONICAL, _catalog())
        assert [d.id for d in result.descriptors] == ["137", "140"]
        assert result.kind is StreamKind.MUXED
        assert result.alternative_index == 0
        assert result.format_spec == "137+140"

    def test_unsatisfiable_height(self) -> None:
        with pytest.raises(NoFormatAvailableError) as exc_info:
            select_format("bestvideo[height<=240]", _catalog())
        failures = exc_info.value.failures
        assert len(failures) == 1
        assert isinstance(failures[0], UnresolvedTermError)

    def test_explicit_identifier(self) -> None:
        result = select_format("18", _catalog())
        assert result.descriptors == (_catalog().get("18"),)
        assert result.kind is StreamKind.MUXED


# ---------------------------------------------------------------------------
# Fallback semantics
# ---------------------------------------------------------------------------

class TestFallback:
    def test_falls_through_to_later_alternative(self) -> None:
        result = select_format("bestvideo[ext=webm]+bestaudio/best[ext=mp4]", _catalog())
        assert result.format_spec == "18"
        assert result.alternative_index == 1

    def test_leftmost_wins_when_both_resolve(self) -> None:
        result = select_format("worst/best", _catalog())
        assert result.alternative_index == 0
        assert select_format("best/worst", _catalog()).alternative_index == 0

    def test_later_alternatives_not_evaluated(self) -> None:
        expr = parse("18/137+140/bestaudio")
        with patch.object(
            combination_module, "match", wraps=combination_module.match
        ) as spy:
            select(expr, _catalog())
        assert spy.call_count == 1

    def test_incoherent_alternative_is_skipped(self) -> None:
        result = select_format("bestaudio+bestaudio/bestvideo+bestaudio", _catalog())
        assert result.format_spec == "137+140"
        assert result.alternative_index == 1

    def test_failures_recorded_in_order(self) -> None:
        with pytest.raises(NoFormatAvailableError) as exc_info:
            select_format("bestvideo[ext=webm]/140+140/999", _catalog())
        kinds = [type(f) for f in exc_info.value.failures]
        assert kinds == [
            UnresolvedTermError,
            IncoherentCombinationError,
            UnresolvedTermError,
        ]

    def test_policy_forwarded(self) -> None:
        policy = StreamCoherencePolicy(require_video=False)
        result = select_format("140+140/best", _catalog(), policy)
        assert result.alternative_index == 1
        relaxed = StreamCoherencePolicy(require_video=False, allow_multiple_audio=True)
        assert select_format("140+140/best", _catalog(), relaxed).format_spec == "140+140"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestProperties:
    @pytest.mark.parametrize(
        "expression",
        ["best", "worst", "bestvideo+bestaudio", "bestaudio", CANONICAL, "18/137"],
    )
    def test_empty_catalog_never_selects(self, expression: str) -> None:
        with pytest.raises(NoFormatAvailableError) as exc_info:
            select_format(expression, FormatCatalog(formats=()))
        assert exc_info.value.hint == "The format catalog is empty."

    def test_deterministic(self) -> None:
        first = select_format(CANONICAL, _catalog())
        for _ in range(5):
            assert select_format(CANONICAL, _catalog()) == first

    @pytest.mark.parametrize(
        "expression",
        [
            CANONICAL,
            "bestvideo*+bestaudio/best",
            "worstvideo+worstaudio",
            "best[height>=360]",
            "bestaudio[ext=m4a]",
        ],
    )
    def test_every_member_passes_match(self, expression: str) -> None:
        catalog = _catalog()
        expr = parse(expression)
        result = select(expr, catalog)
        combination = expr.alternatives[result.alternative_index]
        for term, descriptor in zip(combination.terms, result.descriptors):
            assert descriptor in match(term, catalog)
        if len(result.descriptors) > 1:
            assert StreamCoherencePolicy().check(result.descriptors) is None

    def test_catalog_not_mutated(self) -> None:
        catalog = _catalog()
        before = catalog.formats
        select_format(CANONICAL, catalog)
        assert catalog.formats == before

    def test_accepts_plain_list(self) -> None:
        result = select_format("bestaudio", list(_catalog()))
        assert result.format_spec == "140"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_syntax_error_before_evaluation(self) -> None:
        with pytest.raises(SelectorSyntaxError):
            select_format("bestvideo[height<=1080", _catalog())

    def test_no_format_message_names_expression(self) -> None:
        with pytest.raises(NoFormatAvailableError, match="bestvideo\\[height<=240\\]"):
            select_format("bv[height<=240]", _catalog())

    def test_non_empty_catalog_hint(self) -> None:
        with pytest.raises(NoFormatAvailableError) as exc_info:
            select_format("999", _catalog())
        assert exc_info.value.hint is not None
        assert "--list" in exc_info.value.hint
