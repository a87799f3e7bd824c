"""
Logging configuration for structgen.

Core modules log through ``logging.getLogger(__name__)``; the CLI configures
the root logger once at startup. Records are rendered by rich's RichHandler
on stderr so they never mix with generated source printed to stdout.

Usage:
    import logging

    from structgen.utils.logging import configure_logging

    configure_logging(level="INFO")
    log = logging.getLogger(__name__)
    log.info("message")
"""

from __future__ import annotations

import logging
import logging.config

from rich.console import Console

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def normalize_level(level: str) -> str:
    """Return an upper-case level name, rejecting unknown names."""
    name = level.strip().upper()
    if name not in _LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    return name


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure root logging, replacing any existing configuration.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    """
    level = normalize_level(level)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "rich": {"format": "%(name)s | %(message)s"},
            },
            "handlers": {
                "default": {
                    "()": "rich.logging.RichHandler",
                    "console": Console(stderr=True),
                    "show_path": False,
                    "formatter": "rich",
                    "level": level,
                }
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )

    # Quiet the driver's topology chatter unless debugging.
    if level != "DEBUG":
        logging.getLogger("cassandra").setLevel(logging.WARNING)


__all__ = ["configure_logging", "normalize_level"]
