"""Combination resolver — resolve every term of a ``+`` group.

Each term is matched and picked independently; the resulting picks
are then validated by a :class:`~ytd_select.core.protocols.CoherencePolicy`.
No partial result ever escapes: either every term resolves coherently
or an exception is raised for the whole combination.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ytd_select.core.matcher import match
from ytd_select.core.models import (
    Combination,
    SelectedFormat,
    StreamDescriptor,
    StreamKind,
)
from ytd_select.core.protocols import CoherencePolicy
from ytd_select.core.ranking import pick
from ytd_select.exceptions import IncoherentCombinationError, UnresolvedTermError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Coherence policies
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StreamCoherencePolicy:
    """Default policy: ``+`` joins complementary streams.

    With the defaults a combination needs at least one stream carrying
    video and at most one stream carrying audio, mirroring yt-dlp's
    behaviour without ``--audio-multistreams``.
    """

    require_video: bool = True
    allow_multiple_video: bool = True
    allow_multiple_audio: bool = False

    def check(self, descriptors: Sequence[StreamDescriptor]) -> str | None:
        video = sum(1 for d in descriptors if d.kind.has_video)
        audio = sum(1 for d in descriptors if d.kind.has_audio)

        if self.require_video and video == 0:
            return "no stream in the combination carries video"
        if not self.allow_multiple_video and video > 1:
            return f"{video} streams carry video, at most one is allowed"
        if not self.allow_multiple_audio and audio > 1:
            return f"{audio} streams carry audio, at most one is allowed"
        return None


DEFAULT_COHERENCE_POLICY: CoherencePolicy = StreamCoherencePolicy()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def combined_kind(descriptors: Sequence[StreamDescriptor]) -> StreamKind:
    """Kind of the merged output of *descriptors*."""
    has_video = any(d.kind.has_video for d in descriptors)
    has_audio = any(d.kind.has_audio for d in descriptors)
    if has_video and has_audio:
        return StreamKind.MUXED
    if has_video:
        return StreamKind.VIDEO_ONLY
    return StreamKind.AUDIO_ONLY


def resolve(
    combination: Combination,
    catalog: Iterable[StreamDescriptor],
    policy: CoherencePolicy | None = None,
    *,
    alternative_index: int = 0,
) -> SelectedFormat:
    """Resolve every term of *combination* against *catalog*.

    Raises
    ------
    UnresolvedTermError
        If any term has no kind-compatible candidate.
    IncoherentCombinationError
        If a multi-term combination fails the coherence *policy*.
    """
    formats = tuple(catalog)
    picks: list[StreamDescriptor] = []
    for term in combination.terms:
        chosen = pick(term.keyword, match(term, formats))
        if chosen is None:
            raise UnresolvedTermError(term)
        picks.append(chosen)

    if len(picks) > 1:
        if policy is None:
            policy = DEFAULT_COHERENCE_POLICY
        reason = policy.check(picks)
        if reason is not None:
            raise IncoherentCombinationError(combination, picks, reason=reason)

    logger.debug(
        "Alternative %d resolved to %s",
        alternative_index,
        "+".join(d.id for d in picks),
    )
    return SelectedFormat(
        descriptors=tuple(picks),
        kind=combined_kind(picks),
        alternative_index=alternative_index,
    )
