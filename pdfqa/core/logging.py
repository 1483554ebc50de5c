"""Logging setup shared by the API process and the pipeline services."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# SDK loggers that log every HTTP round trip at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "urllib3")


def setup_logging(level: str = "INFO") -> None:
    """Send application logs to stdout in a pipe-separated format.

    Args:
        level: Root level name, e.g. "DEBUG" or "INFO". Third-party SDK
            loggers are held at WARNING unless the root level is DEBUG.
    """
    level = level.upper()
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    if level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)
