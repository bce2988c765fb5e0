"""Fallback evaluator — the entry point of the selection engine.

Alternatives are tried strictly left to right.  The first one that
resolves wins and later alternatives are never evaluated, so the
leftmost preference always takes precedence over overlapping ones.

Guarantees
----------
* Pure — the catalog and expression are never mutated.
* Deterministic — same inputs, same :class:`SelectedFormat`.
* Only :class:`~ytd_select.exceptions.YtdSelectError` subclasses escape.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ytd_select.core.combination import resolve
from ytd_select.core.models import SelectedFormat, SelectorExpression, StreamDescriptor
from ytd_select.core.protocols import CoherencePolicy
from ytd_select.core.selector_parser import format_combination, format_expression, parse
from ytd_select.exceptions import (
    FormatSelectionError,
    IncoherentCombinationError,
    NoFormatAvailableError,
    UnresolvedTermError,
)

logger = logging.getLogger(__name__)


def select(
    expression: SelectorExpression,
    catalog: Iterable[StreamDescriptor],
    policy: CoherencePolicy | None = None,
) -> SelectedFormat:
    """Return the resolution of the first alternative that resolves.

    Raises
    ------
    NoFormatAvailableError
        When every alternative fails.  ``failures`` holds one
        :class:`UnresolvedTermError` or :class:`IncoherentCombinationError`
        per alternative, in order.
    """
    formats = tuple(catalog)
    failures: list[FormatSelectionError] = []

    for index, combination in enumerate(expression.alternatives):
        logger.debug("Trying alternative %d: %s", index, format_combination(combination))
        try:
            return resolve(combination, formats, policy, alternative_index=index)
        except (UnresolvedTermError, IncoherentCombinationError) as exc:
            logger.debug("Alternative %d failed: %s", index, exc)
            failures.append(exc)

    hint = (
        "The format catalog is empty."
        if not formats
        else "Relax the selector (e.g. append '/best') or list formats with --list."
    )
    raise NoFormatAvailableError(
        f"Requested format is not available: {format_expression(expression)}",
        failures=failures,
        hint=hint,
    )


def select_format(
    expression: str,
    catalog: Iterable[StreamDescriptor],
    policy: CoherencePolicy | None = None,
) -> SelectedFormat:
    """Parse *expression* and :func:`select` from *catalog*.

    Raises
    ------
    SelectorSyntaxError
        If *expression* is malformed; no evaluation takes place.
    NoFormatAvailableError
        If no alternative resolves.
    """
    return select(parse(expression), catalog, policy)
