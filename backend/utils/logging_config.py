"""Root logger setup, driven by LOG_LEVEL / LOG_FORMAT settings."""
import logging
from typing import Optional

from config.settings import settings


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Prevent duplicate handlers when uvicorn reloads the app
    if any(getattr(h, "_tripcraft", False) for h in root.handlers):
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    console_handler._tripcraft = True
    root.addHandler(console_handler)

    logging.getLogger(__name__).debug("Logging configured at %s", root.level)
