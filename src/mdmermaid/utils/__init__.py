#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Utility helpers for file access and timing."""

from mdmermaid.utils.decorators import debug_timer
from mdmermaid.utils.io_utils import FileAccess, LocalFileAccess, write_content

__all__ = ["FileAccess", "LocalFileAccess", "debug_timer", "write_content"]
