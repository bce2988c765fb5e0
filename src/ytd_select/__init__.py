"""ytd-select — yt-dlp style format-selector engine.

Parses selector expressions such as
``bestvideo[height<=1080]+bestaudio/best`` and evaluates them against a
catalog of available streams, with a strict layered architecture.
"""

from ytd_select.version import __version__

__all__: list[str] = ["__version__"]
