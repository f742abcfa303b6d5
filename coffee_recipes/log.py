"""Logging helpers for coffee-recipes."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from .config import Settings

ACCESS_LOGGER = "coffee_recipes.access"


def configure_logging(settings: Settings) -> None:
    """Configure global logging based on configuration values."""

    config = settings.logging
    level = getattr(logging, settings.log_level, logging.INFO)
    log_format = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    handler_config = {
        "level": level,
        "formatter": "standard",
    }

    if config.file:
        handler_config.update(
            {
                "class": "logging.handlers.WatchedFileHandler",
                "filename": config.file,
                "encoding": "utf-8",
            }
        )
    else:
        handler_config["class"] = "logging.StreamHandler"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": log_format,
                }
            },
            "handlers": {
                "default": handler_config,
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )

    # AccessLogMiddleware writes the access log; uvicorn's own one follows the same switch
    logging.getLogger(ACCESS_LOGGER).disabled = not config.access_log
    logging.getLogger("uvicorn.access").disabled = not config.access_log
    # The openai SDK and httpx are chatty at DEBUG
    for name in ("openai", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def mask_api_key(api_key: str) -> str:
    """Mask an API key for safe logging."""
    if len(api_key) <= 8:
        return "***"
    prefix = api_key[:4]
    suffix = api_key[-4:]
    return f"{prefix}...{suffix}"


__all__ = ["ACCESS_LOGGER", "configure_logging", "mask_api_key"]
