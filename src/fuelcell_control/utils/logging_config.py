"""
Logging Configuration
Sets up the package logger for the fuel cell control system.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

PACKAGE_LOGGER = "fuelcell_control"


def setup_logging(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    simple_format: bool = False,
) -> logging.Logger:
    """
    Configure a logger, by default the root of the package namespace.

    Args:
        name: Logger name
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file
        simple_format: Print bare messages to stdout instead of rich output

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate output when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    if simple_format:
        console_handler: logging.Handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("Logging initialized.")
    return logger
