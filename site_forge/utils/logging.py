"""Logging configuration for site-forge."""

import logging
from typing import Optional, Union
from rich.logging import RichHandler
from rich.console import Console

from site_forge.config.settings import AppConfig

APP_LOGGER = "site_forge"

# Libraries that are chatty at INFO; they follow the app level only when debugging
NOISY_LOGGERS = ("strawberry", "asyncio")


def setup_logging(app_config: Union[AppConfig, str, None] = None,
                  rich_console: Optional[Console] = None) -> RichHandler:
    """
    Route all logging through a single Rich handler.

    Args:
        app_config: Application settings, or a bare level name
        rich_console: Console to write to (stderr when omitted)

    Returns:
        The installed handler
    """
    if not isinstance(app_config, AppConfig):
        app_config = AppConfig(log_level=app_config or "INFO")
    level = logging.getLevelName(app_config.log_level)
    debugging = level <= logging.DEBUG

    handler = RichHandler(
        console=rich_console or Console(stderr=True),
        show_time=True,
        show_path=debugging,
        rich_tracebacks=True,
        markup=False
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # A second setup (e.g. repeated CLI invocations) replaces the first
    for existing in root_logger.handlers[:]:
        if isinstance(existing, RichHandler):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger(APP_LOGGER).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if debugging else max(level, logging.WARNING))

    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger under the site_forge namespace."""
    if name.startswith(APP_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER}.{name}")
