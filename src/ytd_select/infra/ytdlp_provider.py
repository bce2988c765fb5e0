"""yt-dlp backed implementation of :class:`~ytd_select.core.protocols.MetadataProvider`.

This module is the **only** place in the codebase that imports ``yt_dlp``.
It is used purely for format *discovery*: nothing is downloaded.  All
yt-dlp exceptions are caught here and re-raised as typed
:class:`~ytd_select.exceptions.YtdSelectError` subclasses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ytd_select.exceptions import (
    EnvironmentError,
    MetadataExtractionError,
    VideoUnavailableError,
)

logger = logging.getLogger(__name__)


class YtDlpMetadataProvider:
    """Concrete :class:`MetadataProvider` backed by the yt-dlp Python API.

    Usage::

        provider = YtDlpMetadataProvider(socket_timeout=15)
        info = provider.fetch_info("https://www.youtube.com/watch?v=...")

    Parameters
    ----------
    socket_timeout:
        Network timeout in seconds handed to yt-dlp.
    extra_opts:
        Additional ``YoutubeDL`` options (e.g. ``cookiefile``); they
        override the defaults built by :meth:`build_opts`.
    """

    # Substrings in yt-dlp error messages that indicate the video itself
    # is unavailable (as opposed to a transient or extraction error).
    _UNAVAILABLE_SIGNALS: tuple[str, ...] = (
        "unavailable",
        "private video",
        "removed",
        "not available",
        "account terminated",
        "this video is no longer available",
        "sign in to confirm your age",
    )

    def __init__(
        self,
        *,
        socket_timeout: float = 30.0,
        extra_opts: Mapping[str, Any] | None = None,
    ) -> None:
        self._socket_timeout = socket_timeout
        self._extra_opts: dict[str, Any] = dict(extra_opts or {})

    def build_opts(self) -> dict[str, Any]:
        """Return yt-dlp options for metadata-only extraction."""
        opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "skip_download": True,
            "noplaylist": True,
            "socket_timeout": self._socket_timeout,
        }
        opts.update(self._extra_opts)
        return opts

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Extract metadata for *url* without downloading.

        Returns
        -------
        dict[str, Any]
            The sanitised, JSON-safe info dict of a single video.

        Raises
        ------
        VideoUnavailableError
            When yt-dlp reports the video as unavailable / private / removed.
        MetadataExtractionError
            For all other extraction failures, and for playlist URLs.
        """
        try:
            import yt_dlp
            import yt_dlp.utils
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
            ) from exc

        logger.info("Extracting formats for %s", url)
        try:
            with yt_dlp.YoutubeDL(self.build_opts()) as ydl:
                info: Any = ydl.extract_info(url, download=False)
                if isinstance(info, dict):
                    info = ydl.sanitize_info(info)
        except yt_dlp.utils.DownloadError as exc:
            self._raise_mapped(exc)
        except Exception as exc:
            raise MetadataExtractionError(
                f"Unexpected yt-dlp error: {exc}",
            ) from exc

        if not isinstance(info, dict):
            raise MetadataExtractionError(
                "yt-dlp returned no metadata for the given URL.",
                hint="The URL may not point to a valid video.",
            )

        if info.get("_type") == "playlist":
            raise MetadataExtractionError(
                "Playlist URLs are not supported.",
                hint="Pass the URL of a single video.",
            )

        logger.debug("yt-dlp reported %d formats", len(info.get("formats") or []))
        return dict(info)

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @classmethod
    def _raise_mapped(cls, exc: Exception) -> None:
        """Translate a yt-dlp ``DownloadError`` into a domain exception.

        Always raises.
        """
        msg_lower = str(exc).lower()
        if any(signal in msg_lower for signal in cls._UNAVAILABLE_SIGNALS):
            raise VideoUnavailableError(
                str(exc),
                hint="The video may be private, removed, or geo-restricted.",
            ) from exc
        raise MetadataExtractionError(str(exc)) from exc
