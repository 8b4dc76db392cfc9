"""Root logger setup for the command line."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for claim commands.

    Without ``level`` the ``VENUE_CLAIMS_LOG_LEVEL`` name (``DEBUG``, ``INFO``...)
    is used, falling back to INFO when unset or unknown.
    """

    if level is None:
        name = os.getenv("VENUE_CLAIMS_LOG_LEVEL", "INFO").strip().upper()
        resolved = logging.getLevelName(name)
        level = resolved if isinstance(resolved, int) else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
