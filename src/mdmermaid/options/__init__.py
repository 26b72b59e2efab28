#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mdmermaid.

This module provides dataclass-based configuration options. Using frozen
dataclasses provides type safety, default values, and an immutable value that
can be passed explicitly to every component of a transform pass.
"""

from __future__ import annotations

from mdmermaid.options.base import CloneFrozenMixin
from mdmermaid.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from mdmermaid.options.mermaid import MermaidOptions

__all__ = [
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "MermaidOptions",
]
