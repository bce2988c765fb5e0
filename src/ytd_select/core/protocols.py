"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and pluggable
policies must satisfy.  Core code depends ONLY on these protocols —
never on concrete implementations — preserving the dependency inversion
principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from ytd_select.core.models import StreamDescriptor


class MetadataProvider(Protocol):
    """Contract for metadata extraction backends.

    Any object that implements :meth:`fetch_info` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Fetch raw metadata for *url* and return a provider-specific dict.

        The returned dict must contain at least:

        * ``"id"`` — video identifier (``str``)
        * ``"title"`` — video title (``str``)
        * ``"webpage_url"`` — canonical page URL (``str``)
        * ``"formats"`` — list of format dicts (``list[dict]``)

        Implementations must map all backend-specific exceptions to
        :class:`~ytd_select.exceptions.YtdSelectError` subclasses.

        Raises
        ------
        MetadataExtractionError
            When the backend fails to extract metadata.
        VideoUnavailableError
            When the target video is confirmed unavailable.
        """
        ...  # pragma: no cover


class CoherencePolicy(Protocol):
    """Decides whether the picks of a ``+`` combination belong together.

    Only consulted for combinations of two or more terms.  Swapping the
    policy changes what the resolver accepts without touching the
    parser or the ranker.
    """

    def check(self, descriptors: Sequence[StreamDescriptor]) -> str | None:
        """Return ``None`` when coherent, else a short human-readable reason."""
        ...  # pragma: no cover
