"""Tests for constraint matching (core/matcher.py).

Pure function calls only.  Covers numeric and string comparisons,
absent values, the ``?`` flag, opaque attributes and identifiers.
"""

from __future__ import annotations

from ytd_select.core.matcher import field_value, match, satisfies
from ytd_select.core.models import Constraint, RequestTerm, StreamDescriptor, StreamKind
from ytd_select.core.selector_parser import parse


# ---------------------------------------------------------------------------
# Factory helper
# ---------------------------------------------------------------------------

def _fmt(
    *,
    id: str = "137",
    kind: StreamKind = StreamKind.VIDEO_ONLY,
    ext: str = "mp4",
    height: int | None = 1080,
    width: int | None = 1920,
    bitrate: float | None = 4000.0,
    codec: str = "avc1.640028",
    fps: int | None = 30,
    filesize: int | None = None,
    extra: tuple[tuple[str, str], ...] = (),
) -> StreamDescriptor:
    return StreamDescriptor(
        id=id,
        kind=kind,
        ext=ext,
        height=height,
        width=width,
        bitrate=bitrate,
        codec=codec,
        fps=fps,
        filesize=filesize,
        extra=extra,
    )


def _term(text: str) -> RequestTerm:
    return parse(text).alternatives[0].terms[0]


def _ids(formats: list[StreamDescriptor]) -> list[str]:
    return [f.id for f in formats]


# ---------------------------------------------------------------------------
# field_value
# ---------------------------------------------------------------------------

class TestFieldValue:
    def test_known_fields(self) -> None:
        fmt = _fmt()
        assert field_value(fmt, "height") == 1080
        assert field_value(fmt, "ext") == "mp4"
        assert field_value(fmt, "id") == "137"

    def test_unknown_field_reads_extra(self) -> None:
        fmt = _fmt(extra=(("protocol", "https"),))
        assert field_value(fmt, "protocol") == "https"

    def test_missing_extra_is_none(self) -> None:
        assert field_value(_fmt(), "protocol") is None

    def test_empty_string_is_none(self) -> None:
        assert field_value(_fmt(codec=""), "codec") is None


# ---------------------------------------------------------------------------
# satisfies
# ---------------------------------------------------------------------------

class TestSatisfies:
    def test_numeric_range(self) -> None:
        fmt = _fmt(height=720)
        assert satisfies(fmt, Constraint("height", "<=", 720))
        assert satisfies(fmt, Constraint("height", ">", 480))
        assert not satisfies(fmt, Constraint("height", "<", 720))
        assert not satisfies(fmt, Constraint("height", ">=", 1080))

    def test_numeric_equality(self) -> None:
        fmt = _fmt(height=720)
        assert satisfies(fmt, Constraint("height", "=", 720))
        assert satisfies(fmt, Constraint("height", "!=", 1080))

    def test_bitrate_float_compared_to_int(self) -> None:
        assert satisfies(_fmt(bitrate=128.5), Constraint("bitrate", ">", 128))

    def test_absent_numeric_fails_every_operator(self) -> None:
        fmt = _fmt(height=None)
        for op in ("<=", ">=", "<", ">", "=", "!="):
            assert not satisfies(fmt, Constraint("height", op, 1080))

    def test_optional_flag_accepts_absent(self) -> None:
        fmt = _fmt(height=None)
        assert satisfies(fmt, Constraint("height", "<=", 1080, optional=True))

    def test_optional_flag_still_checks_present_value(self) -> None:
        fmt = _fmt(height=2160)
        assert not satisfies(fmt, Constraint("height", "<=", 1080, optional=True))

    def test_string_equality_case_insensitive(self) -> None:
        fmt = _fmt(ext="MP4")
        assert satisfies(fmt, Constraint("ext", "=", "mp4"))
        assert not satisfies(fmt, Constraint("ext", "!=", "Mp4"))

    def test_string_operators(self) -> None:
        fmt = _fmt(codec="avc1.640028")
        assert satisfies(fmt, Constraint("codec", "^=", "AVC1"))
        assert satisfies(fmt, Constraint("codec", "$=", "028"))
        assert satisfies(fmt, Constraint("codec", "*=", "6400"))
        assert not satisfies(fmt, Constraint("codec", "^=", "vp9"))

    def test_string_value_not_trimmed(self) -> None:
        assert not satisfies(_fmt(ext="mp4"), Constraint("ext", "=", " mp4"))

    def test_unknown_field_absent_fails_both_equalities(self) -> None:
        fmt = _fmt()
        assert not satisfies(fmt, Constraint("protocol", "=", "https"))
        assert not satisfies(fmt, Constraint("protocol", "!=", "https"))


# ---------------------------------------------------------------------------
# match
# ---------------------------------------------------------------------------

class TestMatch:
    def test_all_constraints_must_hold(self) -> None:
        catalog = [
            _fmt(id="a", height=1080, ext="mp4"),
            _fmt(id="b", height=1080, ext="webm"),
            _fmt(id="c", height=720, ext="mp4"),
        ]
        result = match(_term("bestvideo[height>=1080][ext=mp4]"), catalog)
        assert _ids(result) == ["a"]

    def test_no_constraints_matches_everything(self) -> None:
        catalog = [_fmt(id="a"), _fmt(id="b", kind=StreamKind.AUDIO_ONLY)]
        assert _ids(match(_term("best"), catalog)) == ["a", "b"]

    def test_keeps_catalog_order(self) -> None:
        catalog = [_fmt(id="z"), _fmt(id="a"), _fmt(id="m")]
        assert _ids(match(_term("best[ext=mp4]"), catalog)) == ["z", "a", "m"]

    def test_empty_result_is_not_an_error(self) -> None:
        assert match(_term("best[height<=144]"), [_fmt()]) == []

    def test_empty_catalog(self) -> None:
        assert match(_term("best"), []) == []

    def test_mixed_absent_and_present_heights(self) -> None:
        catalog = [_fmt(id="known", height=480), _fmt(id="unknown", height=None)]
        assert _ids(match(_term("best[height<=720]"), catalog)) == ["known"]
        assert _ids(match(_term("best[height<=?720]"), catalog)) == ["known", "unknown"]

    def test_identifier_matches_only_that_id(self) -> None:
        catalog = [_fmt(id="18"), _fmt(id="180")]
        assert _ids(match(_term("18"), catalog)) == ["18"]

    def test_identifier_bypasses_filters(self) -> None:
        catalog = [_fmt(id="18", height=360)]
        assert _ids(match(_term("18[height>=1080]"), catalog)) == ["18"]

    def test_unknown_identifier_matches_nothing(self) -> None:
        assert match(_term("999"), [_fmt(id="18")]) == []

    def test_opaque_attribute_filter(self) -> None:
        catalog = [
            _fmt(id="https", extra=(("protocol", "https"),)),
            _fmt(id="hls", extra=(("protocol", "m3u8_native"),)),
            _fmt(id="bare"),
        ]
        assert _ids(match(_term("best[protocol=https]"), catalog)) == ["https"]
        assert _ids(match(_term("best[protocol!=https]"), catalog)) == ["hls"]
