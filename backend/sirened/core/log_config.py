import logging
from typing import Optional

from sirened.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging for processes embedding the rating engine.

    Args:
        level: Optional level name overriding settings.LOG_LEVEL

    Returns:
        The "sirened" logger
    """
    resolved = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logger = logging.getLogger("sirened")
    logger.setLevel(resolved)
    logger.debug(f"Logging configured at level {resolved}")
    return logger
