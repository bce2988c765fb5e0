"""Allow ``python -m ytd_select`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m ytd_select`` behaves identically to the ``ytd-select``
console script.
"""

from __future__ import annotations

from ytd_select.cli.app import cli

if __name__ == "__main__":
    cli()
