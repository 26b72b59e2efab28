#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parsers that build the document tree from markdown text."""

from mdmermaid.parsers.markdown import MarkdownToAstConverter, markdown_to_ast

__all__ = ["MarkdownToAstConverter", "markdown_to_ast"]
