"""Logging configuration shared by the CLI and library code."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from photo_curator.config import LOG_LEVEL

LOGGER_NAME = "photo_curator"


def setup_logging(verbose: bool = False, log_file: str | Path | None = None) -> logging.Logger:
    """Configure the package logger once.

    Args:
        verbose: Log at DEBUG instead of the configured level.
        log_file: Optional path that receives a detailed, timestamped log.

    Returns:
        The configured ``photo_curator`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Called again from the same process (tests, repeated CLI invocations)
    if logger.handlers:
        return logger

    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    logger.setLevel(logging.DEBUG if log_file else level)

    console = RichHandler(level=level, show_path=False, rich_tracebacks=True)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(fh)

    logging.captureWarnings(True)
    return logger
