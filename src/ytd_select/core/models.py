"""Domain models for ytd-select.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.

Two families live here:

* the catalog side — :class:`StreamDescriptor` and :class:`FormatCatalog`;
* the selector side — :class:`Constraint`, :class:`RequestTerm`,
  :class:`Combination` and :class:`SelectorExpression`, produced by the
  parser and consumed by the evaluator.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from ytd_select.exceptions import CatalogError
from ytd_select.utils.constants import QUALITY_KEYWORDS


# ---------------------------------------------------------------------------
# Video metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VideoMetadata:
    """Top-level metadata for a single video."""

    id: str
    """Source-specific video ID (e.g. ``dQw4w9WgXcQ``)."""

    title: str
    """Human-readable video title."""

    duration: int | None
    """Duration in seconds, or ``None`` if unavailable."""

    webpage_url: str
    """Canonical URL of the video page."""


# ---------------------------------------------------------------------------
# Stream descriptors
# ---------------------------------------------------------------------------

class StreamKind(enum.Enum):
    """Which tracks a stream carries."""

    VIDEO_ONLY = "video-only"
    AUDIO_ONLY = "audio-only"
    MUXED = "video+audio"

    @property
    def has_video(self) -> bool:
        return self is not StreamKind.AUDIO_ONLY

    @property
    def has_audio(self) -> bool:
        return self is not StreamKind.VIDEO_ONLY


@dataclass(frozen=True, slots=True)
class StreamDescriptor:
    """A single stream offered by the media source.

    Numeric fields are ``None`` when the source does not report them.
    """

    id: str
    """Identifier, unique within one catalog (yt-dlp ``format_id``)."""

    kind: StreamKind

    ext: str
    """Container extension (e.g. ``mp4``, ``m4a``, ``webm``)."""

    height: int | None = None
    width: int | None = None

    bitrate: float | None = None
    """Total bitrate in kbit/s; used as a ranking tiebreaker."""

    codec: str = ""
    """Codec token, e.g. ``avc1.640028`` or ``mp4a.40.2+avc1.42001E``."""

    fps: int | None = None
    filesize: int | None = None

    extra: tuple[tuple[str, str], ...] = field(default=())
    """Opaque string attributes (``protocol``, ``language`` …) as pairs."""

    def attribute(self, name: str) -> str | None:
        """Return the opaque attribute *name*, or ``None`` when absent."""
        for key, value in self.extra:
            if key == name:
                return value
        return None


# ---------------------------------------------------------------------------
# Typed collection wrapper
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FormatCatalog:
    """Immutable, ordered collection of :class:`StreamDescriptor` entries.

    The tuple guarantees immutability; ``id`` uniqueness is checked at
    construction.  Convenience dunder methods make the catalog usable in
    boolean, length and iteration contexts.
    """

    formats: tuple[StreamDescriptor, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for fmt in self.formats:
            if fmt.id in seen:
                raise CatalogError(
                    f"Duplicate format id in catalog: {fmt.id!r}",
                    hint="Every format in one catalog must have a unique id.",
                )
            seen.add(fmt.id)

    def __len__(self) -> int:
        return len(self.formats)

    def __bool__(self) -> bool:
        return len(self.formats) > 0

    def __iter__(self) -> Iterator[StreamDescriptor]:
        return iter(self.formats)

    def get(self, format_id: str) -> StreamDescriptor | None:
        """Return the descriptor whose id is *format_id*, if any."""
        for fmt in self.formats:
            if fmt.id == format_id:
                return fmt
        return None


# ---------------------------------------------------------------------------
# Selector tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Constraint:
    """One bracketed predicate, e.g. ``[height<=?1080]``."""

    field: str
    """Canonical field name (aliases are resolved by the parser)."""

    operator: str
    """One of ``<= >= < > = != ^= $= *=``."""

    value: int | str
    """``int`` for numeric fields, the verbatim token otherwise."""

    optional: bool = False
    """``?`` flag: a descriptor without a value for *field* passes."""


@dataclass(frozen=True, slots=True)
class RequestTerm:
    """A quality keyword (or explicit format id) plus its constraints."""

    keyword: str
    constraints: tuple[Constraint, ...] = ()

    @property
    def is_identifier(self) -> bool:
        """True when *keyword* names a format id rather than a quality."""
        return self.keyword not in QUALITY_KEYWORDS


@dataclass(frozen=True, slots=True)
class Combination:
    """One ``+``-joined alternative; every term must resolve."""

    terms: tuple[RequestTerm, ...]


@dataclass(frozen=True, slots=True)
class SelectorExpression:
    """The ``/``-separated alternatives, most preferred first."""

    alternatives: tuple[Combination, ...]


# ---------------------------------------------------------------------------
# Selection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SelectedFormat:
    """The resolved alternative returned by the evaluator."""

    descriptors: tuple[StreamDescriptor, ...]
    """Resolved streams, in the order of the combination's terms."""

    kind: StreamKind
    """Combined kind of all resolved streams."""

    alternative_index: int = 0
    """Zero-based index of the alternative that resolved."""

    @property
    def format_spec(self) -> str:
        """yt-dlp compatible spec naming exactly these streams (``137+140``)."""
        return "+".join(d.id for d in self.descriptors)
