"""Parser and canonical printer for format-selector expressions.

Every function in this module is a **pure** transformation — no I/O,
no catalog lookups, fully deterministic.

Grammar
-------
::

    expression   := combination ('/' combination)*
    combination  := term ('+' term)*
    term         := keyword filter*
    filter       := '[' field operator '?'? value ']'

Whitespace outside brackets is insignificant.  Inside a filter the field
name is stripped and the value is kept verbatim.

The printer (:func:`format_expression`) emits the canonical form, so
``parse(format_expression(parse(s))) == parse(s)`` for any valid *s*.
"""

from __future__ import annotations

import re

from ytd_select.core.models import (
    Combination,
    Constraint,
    RequestTerm,
    SelectorExpression,
)
from ytd_select.exceptions import SelectorSyntaxError
from ytd_select.utils.constants import (
    FIELD_ALIASES,
    KEYWORD_ALIASES,
    NUMERIC_FIELDS,
    NUMERIC_OPERATORS,
    OPERATORS,
    QUALITY_KEYWORDS,
    STRING_OPERATORS,
)

__all__: list[str] = [
    "QUALITY_KEYWORDS",
    "format_combination",
    "format_constraint",
    "format_expression",
    "format_term",
    "parse",
]

_FIELD_RE = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*")

_SIZE_RE = re.compile(
    r"\s*(\d+(?:\.\d+)?)\s*([kmgt])?(i)?b?\s*",
    re.IGNORECASE,
)

_SIZE_EXPONENTS: dict[str, int] = {"k": 1, "m": 2, "g": 3, "t": 4}

# Characters that terminate a keyword token.
_DELIMITERS = frozenset("/+[]")

# Format ids and quality keywords; only star keywords may end in "*".
_KEYWORD_CHARS_RE = re.compile(r"[A-Za-z0-9_.-]+\*?")

_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class _Parser:
    """Single-pass, left-to-right recursive-descent parser."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    # -- cursor helpers --------------------------------------------------

    def _error(self, message: str, position: int | None = None) -> SelectorSyntaxError:
        return SelectorSyntaxError(
            message,
            expression=self._text,
            position=self._pos if position is None else position,
        )

    def _skip_ws(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _peek(self) -> str:
        """Return the next significant character, or ``""`` at the end."""
        self._skip_ws()
        if self._pos >= len(self._text):
            return ""
        return self._text[self._pos]

    # -- productions -----------------------------------------------------

    def parse_expression(self) -> SelectorExpression:
        if not self._text.strip():
            raise self._error("Selector expression is empty", 0)

        alternatives = [self._parse_combination()]
        while True:
            char = self._peek()
            if char == "":
                break
            if char == "]":
                raise self._error("Unbalanced ']'")
            if char != "/":
                raise self._error(f"Unexpected character {char!r}")
            slash = self._pos
            self._pos += 1
            if self._peek() == "":
                raise self._error("Dangling '/' at end of expression", slash)
            alternatives.append(self._parse_combination())

        return SelectorExpression(alternatives=tuple(alternatives))

    def _parse_combination(self) -> Combination:
        terms = [self._parse_term()]
        while self._peek() == "+":
            plus = self._pos
            self._pos += 1
            if self._peek() in ("", "/", "+"):
                raise self._error("Dangling '+' without a following term", plus)
            terms.append(self._parse_term())
        return Combination(terms=tuple(terms))

    def _parse_term(self) -> RequestTerm:
        char = self._peek()
        if char in ("", "/"):
            raise self._error("Empty alternative")
        if char == "+":
            raise self._error("Dangling '+' without a preceding term")
        if char == "[":
            raise self._error("Filter without a keyword")
        if char == "]":
            raise self._error("Unbalanced ']'")

        start = self._pos
        while (
            self._pos < len(self._text)
            and self._text[self._pos] not in _DELIMITERS
            and not self._text[self._pos].isspace()
        ):
            self._pos += 1
        token = self._text[start:self._pos]
        keyword = KEYWORD_ALIASES.get(token, token)

        match = _KEYWORD_CHARS_RE.match(token)
        if match is None or match.end() != len(token):
            bad = match.end() if match is not None else 0
            raise self._error(f"Unexpected character {token[bad]!r}", start + bad)
        if token.endswith("*") and keyword not in QUALITY_KEYWORDS:
            raise self._error(
                f"Unknown keyword {token!r}",
                start + len(token) - 1,
            )

        constraints: list[Constraint] = []
        while self._peek() == "[":
            constraints.append(self._parse_filter())

        return RequestTerm(keyword=keyword, constraints=tuple(constraints))

    def _parse_filter(self) -> Constraint:
        open_pos = self._pos
        close_pos = self._text.find("]", open_pos + 1)
        nested_pos = self._text.find("[", open_pos + 1)
        if close_pos == -1:
            raise self._error("Unbalanced '['", open_pos)
        if nested_pos != -1 and nested_pos < close_pos:
            raise self._error("Nested '[' inside a filter", nested_pos)

        body = self._text[open_pos + 1:close_pos]
        self._pos = close_pos + 1
        return _parse_constraint(body, self._text, open_pos + 1)


def _parse_constraint(body: str, expression: str, offset: int) -> Constraint:
    """Parse ``field op ?value`` (the inside of one bracket pair)."""
    field_match = _FIELD_RE.match(body)
    if field_match is None:
        raise SelectorSyntaxError(
            f"Invalid filter field in [{body}]",
            expression=expression,
            position=offset,
        )
    raw_field = field_match.group(1)
    field = FIELD_ALIASES.get(raw_field, raw_field)

    rest = body[field_match.end():]
    operator = next((op for op in OPERATORS if rest.startswith(op)), None)
    if operator is None:
        raise SelectorSyntaxError(
            f"Unknown or missing operator in [{body}]",
            expression=expression,
            position=offset + field_match.end(),
            hint="Valid operators: <=, >=, <, >, =, !=, ^=, $=, *=",
        )
    rest = rest[len(operator):]

    optional = rest.startswith("?")
    if optional:
        rest = rest[1:]

    if not rest.strip():
        raise SelectorSyntaxError(
            f"Missing value in [{body}]",
            expression=expression,
            position=offset + len(body),
        )

    value: int | str
    if field in NUMERIC_FIELDS:
        if operator not in NUMERIC_OPERATORS:
            raise SelectorSyntaxError(
                f"Operator {operator!r} is not valid for numeric field {field!r}",
                expression=expression,
                position=offset,
            )
        value = _parse_number(field, rest, body, expression, offset)
    else:
        if operator not in STRING_OPERATORS:
            raise SelectorSyntaxError(
                f"Operator {operator!r} is not valid for string field {field!r}",
                expression=expression,
                position=offset,
                hint="String fields only support =, !=, ^=, $= and *=.",
            )
        value = rest

    return Constraint(field=field, operator=operator, value=value, optional=optional)


def _parse_number(
    field: str,
    raw: str,
    body: str,
    expression: str,
    offset: int,
) -> int:
    """Parse an integer; ``filesize`` also accepts ``50M``, ``1.5GiB`` …"""
    if _INTEGER_RE.fullmatch(raw):
        return int(raw)

    if field == "filesize":
        size_match = _SIZE_RE.fullmatch(raw)
        # A fractional byte count needs a unit to scale it.
        if size_match is not None and (size_match.group(2) or "." not in raw):
            number, unit, binary = size_match.groups()
            base = 1024 if binary else 1000
            exponent = _SIZE_EXPONENTS[unit.lower()] if unit else 0
            return int(float(number) * base**exponent)

    raise SelectorSyntaxError(
        f"Expected an integer value for {field!r} in [{body}]",
        expression=expression,
        position=offset,
    )


def parse(expression: str) -> SelectorExpression:
    """Parse *expression* into a :class:`SelectorExpression` tree.

    Raises
    ------
    SelectorSyntaxError
        On unbalanced brackets, an unknown operator, an empty
        alternative, or a dangling ``+`` / ``/``.
    """
    return _Parser(expression).parse_expression()


# ---------------------------------------------------------------------------
# Canonical printer
# ---------------------------------------------------------------------------

def format_constraint(constraint: Constraint) -> str:
    flag = "?" if constraint.optional else ""
    return f"[{constraint.field}{constraint.operator}{flag}{constraint.value}]"


def format_term(term: RequestTerm) -> str:
    return term.keyword + "".join(format_constraint(c) for c in term.constraints)


def format_combination(combination: Combination) -> str:
    return "+".join(format_term(t) for t in combination.terms)


def format_expression(expression: SelectorExpression) -> str:
    """Render *expression* in canonical form (aliases expanded, no spaces)."""
    return "/".join(format_combination(c) for c in expression.alternatives)
