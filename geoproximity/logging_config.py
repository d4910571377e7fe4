"""
Logging Setup
Configures the root logger from settings
"""

import logging
import os
from typing import List, Optional

from geoproximity.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> List[logging.Handler]:
    """
    Configure logging for scripts and host applications.

    In production only log to stdout. In other environments also write to
    logs/geoproximity.log when a logs directory exists.

    Args:
        level: Override for settings.log_level

    Returns:
        The handlers installed on the root logger
    """
    log_handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings.environment.lower() != "production":
        if os.path.exists("logs"):
            log_handlers.append(logging.FileHandler("logs/geoproximity.log"))

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=LOG_FORMAT,
        handlers=log_handlers,
        force=True
    )

    return log_handlers
