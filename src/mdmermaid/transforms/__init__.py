#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/transforms/__init__.py
"""Diagram transform passes.

- :mod:`~mdmermaid.transforms.classifier` decides which nodes are diagrams
- :mod:`~mdmermaid.transforms.summary` recognises and builds the comment-mode
  summary wrapper
- :mod:`~mdmermaid.transforms.rewriter` plans and applies the tree edits
- :mod:`~mdmermaid.transforms.transformer` runs the passes in order

Examples
--------
    >>> from mdmermaid.transforms import MermaidTransform
    >>> result = MermaidTransform(options)(document)
    >>> for diagnostic in result.diagnostics:
    ...     print(diagnostic)

"""

from mdmermaid.transforms.classifier import (
    DiagramMode,
    DiagramRequest,
    classify_code_block,
    classify_reference,
    is_diagram_language,
    is_sentinel_title,
)
from mdmermaid.transforms.rewriter import TreeRewriter, mermaid_div, split_paragraph
from mdmermaid.transforms.summary import (
    WrapperMatch,
    build_image_paragraph,
    build_wrapper,
    find_existing_wrapper,
    remove_existing_wrapper,
)
from mdmermaid.transforms.transformer import MermaidTransform, TransformResult

__all__ = [
    "DiagramMode",
    "DiagramRequest",
    "MermaidTransform",
    "TransformResult",
    "TreeRewriter",
    "WrapperMatch",
    "build_image_paragraph",
    "build_wrapper",
    "classify_code_block",
    "classify_reference",
    "find_existing_wrapper",
    "is_diagram_language",
    "is_sentinel_title",
    "mermaid_div",
    "remove_existing_wrapper",
    "split_paragraph",
]
