"""Logging bootstrap shared by the CLI and the web service."""

import logging
from typing import Iterable

from src.config import DEBUG

# Access-log lines for these paths are dropped from werkzeug's output
QUIET_PATHS = ("/healthz",)


def setup_logging(debug: bool = DEBUG, quiet_paths: Iterable[str] = QUIET_PATHS) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    paths = tuple(quiet_paths)
    access_log = logging.getLogger("werkzeug")
    for existing in list(access_log.filters):
        if getattr(existing, "quiet_paths", None) is not None:
            access_log.removeFilter(existing)

    def keep(record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(path in message for path in paths)

    keep.quiet_paths = paths
    access_log.addFilter(keep)

    for noisy in ("urllib3", "pymongo"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
