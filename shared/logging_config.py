"""
Logging setup for entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers and
levels are configured once here by whichever program embeds the core.
"""

import logging
from typing import Optional

from .config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from settings.

    Debug mode forces DEBUG level regardless of ``log_level``.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
