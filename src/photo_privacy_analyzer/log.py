"""Console logging setup for the command-line entry points."""

import logging
import logging.config

from photo_privacy_analyzer.config import LOG_LEVEL


def build_logging_config(level: str = LOG_LEVEL) -> dict:
    """Return a dictConfig mapping that routes everything through rich."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {"format": "%(message)s", "datefmt": "[%X]"},
        },
        "handlers": {
            "console": {
                "class": "rich.logging.RichHandler",
                "formatter": "rich",
                "rich_tracebacks": True,
                "show_path": False,
            },
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
        "loggers": {
            # httpx logs every request line at INFO
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
            "PIL": {"level": "WARNING"},
        },
    }


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Apply the console logging configuration."""
    logging.config.dictConfig(build_logging_config(level))
