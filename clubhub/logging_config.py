"""Logging setup for the API process."""

import logging

from clubhub.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once at startup."""
    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("clubhub").setLevel(resolved)
    # firebase-admin logs every HTTP retry at INFO
    logging.getLogger("google").setLevel(logging.WARNING)
