"""Core / service layer — the selection engine and catalog building.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from ytd_select.core.catalog_service import CatalogService
from ytd_select.core.combination import StreamCoherencePolicy, resolve
from ytd_select.core.evaluator import select, select_format
from ytd_select.core.matcher import match
from ytd_select.core.models import (
    Combination,
    Constraint,
    FormatCatalog,
    RequestTerm,
    SelectedFormat,
    SelectorExpression,
    StreamDescriptor,
    StreamKind,
    VideoMetadata,
)
from ytd_select.core.protocols import CoherencePolicy, MetadataProvider
from ytd_select.core.ranking import pick, rank
from ytd_select.core.selector_parser import format_expression, parse

__all__: list[str] = [
    "CatalogService",
    "CoherencePolicy",
    "Combination",
    "Constraint",
    "FormatCatalog",
    "MetadataProvider",
    "RequestTerm",
    "SelectedFormat",
    "SelectorExpression",
    "StreamCoherencePolicy",
    "StreamDescriptor",
    "StreamKind",
    "VideoMetadata",
    "format_expression",
    "match",
    "parse",
    "pick",
    "rank",
    "resolve",
    "select",
    "select_format",
]
