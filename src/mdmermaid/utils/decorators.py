#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Timing helpers for DEBUG-level logging."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long a block took, at DEBUG level only.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Rendering abc123.svg")

    Examples
    --------
        >>> with debug_timer(logger, "Rendering diagram"):
        ...     renderer.render(source, destination, options)

    Notes
    -----
    Nothing is measured when the logger is not enabled for DEBUG. The
    elapsed time is logged even when the block raises.

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        logger.debug("%s completed in %.2fs", operation, elapsed)
