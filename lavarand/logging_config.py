"""Logging setup for the ``lavarand`` namespace."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Configure the package logger.

    Parameters
    ----------
    level:
        Logging level, e.g. ``logging.DEBUG``.
    log_file:
        Optional path; when given, records are mirrored to this file.
    """
    logger = logging.getLogger("lavarand")
    logger.setLevel(level)

    # Avoid duplicate records when the CLI is invoked repeatedly in-process.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
