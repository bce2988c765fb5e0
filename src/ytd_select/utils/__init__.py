"""Shared utilities — constants, typing helpers, and cross-cutting concerns.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""

from ytd_select.utils.constants import DEFAULT_FORMAT_SPEC

__all__: list[str] = ["DEFAULT_FORMAT_SPEC"]
