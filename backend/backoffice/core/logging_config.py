# backend/backoffice/core/logging_config.py
import logging
from logging.config import dictConfig

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler for the app and uvicorn loggers."""
    global _configured
    if _configured:
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "backoffice": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            },
        }
    )
    _configured = True
    logging.getLogger(__name__).debug("logging configured at %s", level.upper())
