"""Infrastructure layer — external system integration.

This layer wraps all interaction with yt-dlp and the filesystem.  Every
raw third-party exception must be caught here and re-raised as a
:class:`~ytd_select.exceptions.YtdSelectError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytd_select.infra.info_json import read_info_json
from ytd_select.infra.ytdlp_provider import YtDlpMetadataProvider

__all__: list[str] = [
    "YtDlpMetadataProvider",
    "read_info_json",
]
