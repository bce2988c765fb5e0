"""Root logger configuration for the command-line entry point.

Library code only creates module-level loggers; handlers are attached
here, once, by the CLI.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> logging.Logger:
    """Configure the root logger to write to stderr.

    If *log_file* is provided, records are also appended to that file.
    Existing root handlers are replaced so repeated calls do not
    duplicate output.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # stdout is reserved for --json output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)

    return logger
