"""Ranking and pick policy for quality keywords.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic, and independent of input order.

Ranking key (applied as an ordered tuple):

1. **Kind** — compatibility with the keyword.  Incompatible kinds are
   dropped; among the rest the keyword's preferred kind ranks first.
2. **Height** — descending for ``best*``, ascending for ``worst*``;
   unknown heights sort lowest.
3. **Bitrate** — same direction as height; unknown sorts lowest.
4. **Id** — lexicographically smallest wins, in both directions.
"""

from __future__ import annotations

from collections.abc import Iterable

from ytd_select.core.models import StreamDescriptor, StreamKind
from ytd_select.utils.constants import QUALITY_KEYWORDS

# keyword stem → {kind: preference}; kinds missing from the map are excluded.
_KIND_PREFERENCES: dict[str, dict[StreamKind, int]] = {
    "": {
        StreamKind.MUXED: 1,
        StreamKind.VIDEO_ONLY: 0,
        StreamKind.AUDIO_ONLY: 0,
    },
    "video": {StreamKind.VIDEO_ONLY: 1, StreamKind.MUXED: 0},
    "audio": {StreamKind.AUDIO_ONLY: 1, StreamKind.MUXED: 0},
    "video*": {StreamKind.VIDEO_ONLY: 0, StreamKind.MUXED: 0},
    "audio*": {StreamKind.AUDIO_ONLY: 0, StreamKind.MUXED: 0},
}


def _split_keyword(keyword: str) -> tuple[bool, str]:
    """Split ``bestvideo*`` into ``(True, "video*")``."""
    if keyword.startswith("best"):
        return True, keyword[len("best"):]
    return False, keyword[len("worst"):]


def kind_preference(keyword: str, kind: StreamKind) -> int | None:
    """Return how strongly *keyword* prefers *kind*, ``None`` if excluded.

    Format ids are not quality keywords and always yield ``None``.
    """
    if keyword not in QUALITY_KEYWORDS:
        return None
    _, stem = _split_keyword(keyword)
    return _KIND_PREFERENCES[stem].get(kind)


def rank(
    keyword: str,
    candidates: Iterable[StreamDescriptor],
) -> list[StreamDescriptor]:
    """Order kind-compatible *candidates* for *keyword*, best pick first.

    For an explicit format id (any keyword that is not a quality
    keyword) candidates are only ordered by id.
    """
    if keyword not in QUALITY_KEYWORDS:
        return sorted(candidates, key=lambda fmt: fmt.id)

    is_best, _ = _split_keyword(keyword)
    direction = -1 if is_best else 1

    keyed: list[tuple[tuple[int, float, float, str], StreamDescriptor]] = []
    for fmt in candidates:
        preference = kind_preference(keyword, fmt.kind)
        if preference is None:
            continue
        height = fmt.height if fmt.height is not None else -1
        bitrate = fmt.bitrate if fmt.bitrate is not None else -1.0
        key = (-preference, direction * height, direction * bitrate, fmt.id)
        keyed.append((key, fmt))

    keyed.sort(key=lambda pair: pair[0])
    return [fmt for _, fmt in keyed]


def pick(
    keyword: str,
    candidates: Iterable[StreamDescriptor],
) -> StreamDescriptor | None:
    """Return the top-ranked candidate for *keyword*, or ``None``."""
    ranked = rank(keyword, candidates)
    return ranked[0] if ranked else None
