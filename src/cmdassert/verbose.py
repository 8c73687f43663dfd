"""Verbose logging configuration for debug output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logger(
    debug_file: Path | None = None,
    verbose: bool = False,
    logger_name: str = "cmdassert",
) -> logging.Logger:
    """
    Configure and return a logger for suite runs.

    Writes everything to debug_file when one is given. Case results go to
    stderr; with verbose=True the debug detail goes there too.

    Args:
        debug_file: Optional path to a debug log file.
        verbose: If True, also log debug messages to stderr.
        logger_name: Name of the logger instance (must be unique per run).

    Returns:
        Configured logger instance.

    Raises:
        RuntimeError: If a logger with this name was already configured.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        raise RuntimeError(
            f"Logger '{logger_name}' already exists; use a unique name per run"
        )

    logger.disabled = False
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Create formatter with timestamp
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S"
    )

    if debug_file is not None:
        debug_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(debug_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    return logger
