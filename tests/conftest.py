"""Shared pytest fixtures and configuration for the ytd-select test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp must be mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from ytd_select.cli.console import get_rich_console


@pytest.fixture
def sample_info() -> dict[str, Any]:
    """A small yt-dlp style info dict: one video, one audio, one muxed stream."""
    return {
        "id": "abc123",
        "title": "Sample Video",
        "duration": 125,
        "webpage_url": "https://www.youtube.com/watch?v=abc123",
        "formats": [
            {
                "format_id": "137",
                "ext": "mp4",
                "height": 1080,
                "width": 1920,
                "fps": 30,
                "tbr": 4400.0,
                "vcodec": "avc1.640028",
                "acodec": "none",
            },
            {
                "format_id": "140",
                "ext": "m4a",
                "tbr": 129.5,
                "vcodec": "none",
                "acodec": "mp4a.40.2",
                "language": "en",
            },
            {
                "format_id": "18",
                "ext": "mp4",
                "height": 360,
                "width": 640,
                "fps": 30,
                "tbr": 600.0,
                "vcodec": "avc1.42001E",
                "acodec": "mp4a.40.2",
            },
        ],
    }


@pytest.fixture
def info_json_file(tmp_path: Path, sample_info: dict[str, Any]) -> Path:
    """*sample_info* saved the way ``yt-dlp --dump-json`` would."""
    path = tmp_path / "info.json"
    path.write_text(json.dumps(sample_info), encoding="utf-8")
    return path


@pytest.fixture
def fresh_console() -> Iterator[None]:
    """Drop cached Rich consoles so optional-import tests see module changes."""
    get_rich_console.cache_clear()
    yield
    get_rich_console.cache_clear()
