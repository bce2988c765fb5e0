"""Custom exception hierarchy for ytd-select.

All exceptions that cross layer boundaries must inherit from
:class:`YtdSelectError`.  Raw third-party exceptions (e.g. from yt-dlp)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
YtdSelectError
├── SelectorSyntaxError
├── FormatSelectionError
│   ├── UnresolvedTermError
│   ├── IncoherentCombinationError
│   └── NoFormatAvailableError
├── CatalogError
├── InvalidURLError
├── MetadataExtractionError
├── VideoUnavailableError
└── EnvironmentError
    └── EnvironmentCheckError
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ytd_select.core.models import Combination, RequestTerm, StreamDescriptor


class YtdSelectError(Exception):
    """Base exception for all ytd-select errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Selector expressions --------------------------------------------------

class SelectorSyntaxError(YtdSelectError):
    """Raised when a selector expression is malformed.

    Reported before any evaluation starts.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str,
        position: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(f"{message} (at position {position})", hint=hint)
        self.expression: str = expression
        self.position: int = position


# --- Format handling -------------------------------------------------------

class FormatSelectionError(YtdSelectError):
    """Raised when no suitable format can be determined."""


class UnresolvedTermError(FormatSelectionError):
    """A single request term had no matching, kind-compatible candidate."""

    def __init__(self, term: RequestTerm, *, hint: str | None = None) -> None:
        from ytd_select.core.selector_parser import format_term

        super().__init__(f"No format matches '{format_term(term)}'.", hint=hint)
        self.term: RequestTerm = term


class IncoherentCombinationError(FormatSelectionError):
    """A ``+`` combination resolved, but its picks do not fit together."""

    def __init__(
        self,
        combination: Combination,
        descriptors: Sequence[StreamDescriptor],
        *,
        reason: str,
    ) -> None:
        from ytd_select.core.selector_parser import format_combination

        ids = "+".join(d.id for d in descriptors)
        super().__init__(
            f"Cannot combine '{format_combination(combination)}' "
            f"(resolved to {ids}): {reason}",
        )
        self.combination: Combination = combination
        self.descriptors: tuple[StreamDescriptor, ...] = tuple(descriptors)
        self.reason: str = reason


class NoFormatAvailableError(FormatSelectionError):
    """Every alternative of a selector expression failed to resolve."""

    def __init__(
        self,
        message: str,
        *,
        failures: Sequence[FormatSelectionError] = (),
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.failures: tuple[FormatSelectionError, ...] = tuple(failures)
        """Per-alternative failures, in evaluation order."""


# --- Catalog ---------------------------------------------------------------

class CatalogError(YtdSelectError):
    """Raised when a format catalog is malformed or cannot be loaded."""


# --- URL validation --------------------------------------------------------

class InvalidURLError(YtdSelectError):
    """Raised when the provided URL fails validation."""


# --- Metadata / extraction -------------------------------------------------

class MetadataExtractionError(YtdSelectError):
    """Raised when yt-dlp fails to extract video metadata."""


class VideoUnavailableError(YtdSelectError):
    """Raised when the target video is unavailable (private, removed, etc.)."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(YtdSelectError):
    """Raised when a required runtime dependency is not available."""


class EnvironmentCheckError(EnvironmentError):
    """Raised when a required environment precondition is not met."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
