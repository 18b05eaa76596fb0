"""Logging setup: one stdout handler with the shared format, level from config."""

import logging
import sys

from alttext.core.config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty HTTP client loggers are capped at WARNING unless we are debugging.
_NOISY_LOGGERS = ("urllib3", "multipart")


def setup_logging(level: str | None = None) -> None:
    """
    Configure application logging.

    Invariants:
    - The root logger level comes from the argument, else Settings.log_level.
    - Existing root handlers are removed so repeated calls (CLI then serve) don't duplicate output.
    - Provider fallbacks log at WARNING, so they stay visible at the default INFO level.
    """
    level_name = (level or get_config().log_level).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(numeric)
    for h in root.handlers[:]:
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric)
    console.setFormatter(formatter)
    root.addHandler(console)

    if numeric > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
