"""Logging setup for the API process."""

import logging
import logging.config

from config import LOG_LEVEL

_configured = False


def setup_logging() -> None:
    """Configure the root logger once.

    Subsequent calls are no-ops so that re-importing the app (uvicorn reload,
    test collection) does not stack handlers.
    """
    global _configured
    if _configured:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
    _configured = True
