"""Core catalog service — turns extractor output into a format catalog.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~ytd_select.core.protocols.MetadataProvider`
injected at construction time (dependency inversion), keeping the core
free of any external-system imports.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``, no filesystem access.
* Only :class:`~ytd_select.exceptions.YtdSelectError` subclasses escape.
* All parsing logic is deterministic and stateless.
"""

from __future__ import annotations

import logging
from typing import Any

from ytd_select.core.models import (
    FormatCatalog,
    StreamDescriptor,
    StreamKind,
    VideoMetadata,
)
from ytd_select.core.protocols import MetadataProvider
from ytd_select.exceptions import (
    FormatSelectionError,
    InvalidURLError,
    MetadataExtractionError,
    YtdSelectError,
    append_ytdlp_upgrade_suggestion,
)

logger = logging.getLogger(__name__)

# Raw string attributes copied verbatim so selectors can filter on them
# (e.g. ``[protocol=https]``, ``[vcodec^=avc1]``).
_OPAQUE_KEYS: tuple[str, ...] = (
    "protocol",
    "language",
    "format_note",
    "dynamic_range",
    "container",
    "vcodec",
    "acodec",
)


class CatalogService:
    """Stateless service that extracts metadata and builds catalogs.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`MetadataProvider` protocol.
    """

    def __init__(self, provider: MetadataProvider) -> None:
        self._provider: MetadataProvider = provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract_metadata(self, url: str) -> VideoMetadata:
        """Extract top-level metadata for a single video.

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        MetadataExtractionError
            If the backend fails to return metadata.
        VideoUnavailableError
            If the video is confirmed unavailable.
        """
        self._validate_url(url)
        info = self._fetch(url)
        return self.parse_metadata(info)

    def get_catalog(self, url: str) -> FormatCatalog:
        """Extract every stream offered for *url* as a catalog.

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        MetadataExtractionError
            If the backend fails to return metadata.
        VideoUnavailableError
            If the video is confirmed unavailable.
        FormatSelectionError
            If the source reports no usable formats.
        """
        _, catalog = self.extract(url)
        return catalog

    def extract(self, url: str) -> tuple[VideoMetadata, FormatCatalog]:
        """Metadata and catalog for *url* from a single provider call.

        Raises the same exceptions as :meth:`get_catalog`.
        """
        self._validate_url(url)
        info = self._fetch(url)
        metadata = self.parse_metadata(info)
        catalog = self.build_catalog(info)
        logger.debug("Catalog for %s holds %d formats", metadata.id, len(catalog))

        if not catalog:
            raise FormatSelectionError(
                "No formats found for this video.",
                hint=append_ytdlp_upgrade_suggestion(
                    "The extractor returned an empty format list.",
                ),
            )

        return metadata, catalog

    # ------------------------------------------------------------------
    # URL validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_url(url: str) -> None:
        """Raise :class:`InvalidURLError` for empty or non-HTTP URLs."""
        stripped = url.strip()
        if not stripped:
            raise InvalidURLError("URL must not be empty.")
        if not stripped.startswith(("http://", "https://")):
            raise InvalidURLError(
                f"Invalid URL: {stripped}",
                hint="URL must start with http:// or https://",
            )

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> dict[str, Any]:
        """Call the provider and ensure only our exceptions escape."""
        try:
            return self._provider.fetch_info(url)
        except YtdSelectError:
            # Already one of ours; propagate unchanged.
            raise
        except Exception as exc:
            raise MetadataExtractionError(
                f"Unexpected provider error: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def parse_metadata(info: dict[str, Any]) -> VideoMetadata:
        """Convert a raw info dict into a :class:`VideoMetadata`."""
        raw_duration = info.get("duration")
        duration: int | None = (
            int(raw_duration) if isinstance(raw_duration, (int, float)) else None
        )
        return VideoMetadata(
            id=str(info.get("id", "")),
            title=str(info.get("title", "Unknown")),
            duration=duration,
            webpage_url=str(info.get("webpage_url", "")),
        )

    @classmethod
    def build_catalog(cls, info: dict[str, Any]) -> FormatCatalog:
        """Convert a raw info dict into a :class:`FormatCatalog`.

        Malformed entries and entries without any media track are
        skipped; a repeated ``format_id`` keeps its first occurrence.
        """
        seen: set[str] = set()
        descriptors: list[StreamDescriptor] = []
        for raw in cls._extract_raw_formats(info):
            descriptor = cls._parse_single_format(raw)
            if descriptor is None:
                continue
            if descriptor.id in seen:
                logger.warning("Ignoring duplicate format id %r", descriptor.id)
                continue
            seen.add(descriptor.id)
            descriptors.append(descriptor)
        return FormatCatalog(formats=tuple(descriptors))

    @staticmethod
    def _extract_raw_formats(info: dict[str, Any]) -> list[dict[str, Any]]:
        """Safely pull the ``formats`` list from a raw info dict.

        Single-format extractions carry no ``formats`` list; the info
        dict itself then describes the only stream.
        """
        raw: object = info.get("formats")
        if raw is None and "format_id" in info:
            return [info]
        if not isinstance(raw, list):
            return []
        # Each element is expected to be a dict; skip malformed entries.
        return [entry for entry in raw if isinstance(entry, dict)]

    @staticmethod
    def _parse_single_format(raw: dict[str, Any]) -> StreamDescriptor | None:
        """Convert one raw format dict, or ``None`` if it is unusable."""
        format_id = raw.get("format_id")
        if format_id is None or str(format_id) == "":
            return None

        # ``None`` means "unknown codec" and is treated as present.
        vcodec = raw.get("vcodec")
        acodec = raw.get("acodec")
        has_video = vcodec != "none"
        has_audio = acodec != "none"
        if not has_video and not has_audio:
            return None
        if has_video and has_audio:
            kind = StreamKind.MUXED
        elif has_video:
            kind = StreamKind.VIDEO_ONLY
        else:
            kind = StreamKind.AUDIO_ONLY

        raw_fps = raw.get("fps")
        fps: int | None = round(raw_fps) if isinstance(raw_fps, (int, float)) else None

        raw_size = raw.get("filesize")
        if raw_size is None:
            raw_size = raw.get("filesize_approx")
        filesize: int | None = (
            int(raw_size) if isinstance(raw_size, (int, float)) else None
        )

        raw_tbr = raw.get("tbr")
        bitrate: float | None = (
            float(raw_tbr) if isinstance(raw_tbr, (int, float)) and raw_tbr >= 0 else None
        )

        codec = "+".join(
            str(c) for c in (vcodec, acodec) if c is not None and c != "none"
        )
        extra = tuple(
            (key, str(raw[key]))
            for key in _OPAQUE_KEYS
            if raw.get(key) is not None
        )

        return StreamDescriptor(
            id=str(format_id),
            kind=kind,
            ext=str(raw.get("ext") or ""),
            height=_positive_int(raw.get("height")),
            width=_positive_int(raw.get("width")),
            bitrate=bitrate,
            codec=codec,
            fps=fps,
            filesize=filesize,
            extra=extra,
        )


def _positive_int(value: object) -> int | None:
    """Return *value* if it is a positive ``int`` (not ``bool``), else ``None``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None
