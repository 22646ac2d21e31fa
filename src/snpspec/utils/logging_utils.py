"""Logging setup and run-parameter logging for snpspec."""

import logging
import sys
from pathlib import Path
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = "snpspec",
    log_file: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure the package logger for a command-line run.

    Messages go to stdout and, if given, to log_file as well. Calling this
    again replaces the handlers of the previous call.

    Args:
        name: Logger name
        log_file: Optional path to a log file; parent directories are created
        verbose: Log per-condition DEBUG messages

    Returns:
        Configured logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def log_parameters(logger: logging.Logger, title: str, params: Mapping[str, object]) -> None:
    """Log a title line followed by one aligned 'name: value' line per parameter."""
    logger.info(title)
    width = max((len(key) for key in params), default=0)
    for key, value in params.items():
        logger.info(f"  {key.ljust(width)} : {value}")
