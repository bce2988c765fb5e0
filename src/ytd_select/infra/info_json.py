"""Offline catalog source: yt-dlp ``--dump-json`` files.

Lets the selector run without network access against a previously
saved extraction.  Accepts either a full info dict or a bare JSON list
of format dicts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ytd_select.exceptions import CatalogError

logger = logging.getLogger(__name__)


def read_info_json(path: str | Path) -> dict[str, Any]:
    """Load an info dict from *path*.

    A top-level JSON list is wrapped as ``{"formats": [...]}``.

    Raises
    ------
    CatalogError
        If the file cannot be read or does not hold a JSON object/list.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(
            f"Cannot read info JSON file: {file_path}",
            hint=str(exc),
        ) from exc

    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogError(
            f"Invalid JSON in {file_path}: {exc.msg} (line {exc.lineno})",
            hint="Produce the file with: yt-dlp --dump-json URL > info.json",
        ) from exc

    if isinstance(data, list):
        logger.debug("Read bare format list (%d entries) from %s", len(data), file_path)
        return {"formats": data}
    if isinstance(data, dict):
        return data

    raise CatalogError(
        f"{file_path} must contain a JSON object or list, got {type(data).__name__}.",
    )
