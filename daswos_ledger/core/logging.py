"""Root logger setup driven by settings."""

from __future__ import annotations

import logging.config

from daswos_ledger.core.config import Settings


def configure_logging(settings: Settings) -> None:
    level = "DEBUG" if settings.debug else settings.logging.level
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": settings.logging.format},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                # engine echo is controlled by database.echo
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
