#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Renderers that serialize the document tree back to text."""

from mdmermaid.renderers.markdown import MarkdownRenderer, ast_to_markdown

__all__ = ["MarkdownRenderer", "ast_to_markdown"]
