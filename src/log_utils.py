"""
Logging utilities for the Cloud Functions Fleet Tool.
"""

import logging
import sys
from typing import Optional


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Log records go to stderr so that command reports on stdout stay clean.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Optional path to a log file

    Returns:
        Logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    return logging.getLogger(__name__)
