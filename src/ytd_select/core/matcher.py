"""Constraint matching — which catalog entries satisfy a request term.

Pure functions only.  An empty result is a valid answer ("no
candidate"), never an error.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable

from ytd_select.core.models import Constraint, RequestTerm, StreamDescriptor
from ytd_select.utils.constants import NUMERIC_FIELDS, STRING_FIELDS

_NUMERIC_OPS: dict[str, Callable[[float, float], bool]] = {
    "<=": operator.le,
    ">=": operator.ge,
    "<": operator.lt,
    ">": operator.gt,
    "=": operator.eq,
    "!=": operator.ne,
}

_STRING_OPS: dict[str, Callable[[str, str], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "^=": str.startswith,
    "$=": str.endswith,
    "*=": operator.contains,
}


def field_value(descriptor: StreamDescriptor, field: str) -> int | float | str | None:
    """Return *descriptor*'s value for *field*, or ``None`` when absent.

    Unknown fields are looked up among the descriptor's opaque
    attributes.  Empty strings count as absent.
    """
    if field in NUMERIC_FIELDS or field in STRING_FIELDS:
        value = getattr(descriptor, field)
    else:
        value = descriptor.attribute(field)
    if value == "":
        return None
    return value


def satisfies(descriptor: StreamDescriptor, constraint: Constraint) -> bool:
    """Evaluate a single constraint against a single descriptor.

    An absent value fails the constraint unless it carries the ``?``
    flag, in which case it passes.
    """
    actual = field_value(descriptor, constraint.field)
    if actual is None:
        return constraint.optional

    if isinstance(constraint.value, int):
        if isinstance(actual, str):
            return False
        return _NUMERIC_OPS[constraint.operator](actual, constraint.value)

    compare = _STRING_OPS[constraint.operator]
    return compare(str(actual).lower(), constraint.value.lower())


def match(
    term: RequestTerm,
    catalog: Iterable[StreamDescriptor],
) -> list[StreamDescriptor]:
    """Return the descriptors of *catalog* that satisfy every constraint.

    An explicit format id bypasses filtering and yields the single
    descriptor carrying that id, or nothing.  Catalog order is kept.
    """
    if term.is_identifier:
        return [fmt for fmt in catalog if fmt.id == term.keyword]
    return [
        fmt
        for fmt in catalog
        if all(satisfies(fmt, c) for c in term.constraints)
    ]
