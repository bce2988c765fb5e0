"""Vocabulary of the format-selector language.

Kept free of imports from the rest of the package so that models,
parser and matcher can all share it without import cycles.
"""

from __future__ import annotations

DEFAULT_FORMAT_SPEC: str = "bestvideo*+bestaudio/best"
"""Expression used when the caller does not supply one."""

# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------

QUALITY_KEYWORDS: frozenset[str] = frozenset(
    {
        "best",
        "worst",
        "bestvideo",
        "worstvideo",
        "bestaudio",
        "worstaudio",
        "bestvideo*",
        "worstvideo*",
        "bestaudio*",
        "worstaudio*",
    }
)

KEYWORD_ALIASES: dict[str, str] = {
    "b": "best",
    "w": "worst",
    "bv": "bestvideo",
    "wv": "worstvideo",
    "ba": "bestaudio",
    "wa": "worstaudio",
    "bv*": "bestvideo*",
    "wv*": "worstvideo*",
    "ba*": "bestaudio*",
    "wa*": "worstaudio*",
}

# ---------------------------------------------------------------------------
# Filter fields
# ---------------------------------------------------------------------------

NUMERIC_FIELDS: frozenset[str] = frozenset(
    {"height", "width", "bitrate", "fps", "filesize"}
)

STRING_FIELDS: frozenset[str] = frozenset({"ext", "codec", "id"})

FIELD_ALIASES: dict[str, str] = {
    "format_id": "id",
    "tbr": "bitrate",
}

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

# Longest tokens first so that ``<=`` is never read as ``<``.
OPERATORS: tuple[str, ...] = ("<=", ">=", "!=", "^=", "$=", "*=", "=", "<", ">")

NUMERIC_OPERATORS: frozenset[str] = frozenset({"<=", ">=", "!=", "=", "<", ">"})

STRING_OPERATORS: frozenset[str] = frozenset({"=", "!=", "^=", "$=", "*="})
