"""
Logging Configuration

All modules log through `logging.getLogger(__name__)`; this sets up the
root handler once at application start.
"""

import logging
import sys

from school_portal.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | None = None) -> None:
    """
    Configure the root logger.

    Uses DEBUG in development and INFO elsewhere unless a level is given.
    Calling it again replaces the previous handler instead of stacking them.
    """
    if level is None:
        level = logging.DEBUG if settings.is_development else logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_school_portal", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._school_portal = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level)

    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.INFO)
