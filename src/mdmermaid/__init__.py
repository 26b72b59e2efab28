"""mdmermaid - render Mermaid diagrams embedded in markdown documents.

mdmermaid finds fenced code blocks whose info string mentions ``mermaid``,
and links or images titled ``"mermaid:"``, renders each diagram with the
Mermaid CLI (``mmdc``) and rewrites the document so readers see the image
instead of the source.

Key Features
------------
- Content-addressed image names: the same diagram always renders to the
  same file, so re-running a document is a fixed point
- ``inline`` modifier: embed the image as a data URI
- ``comment`` modifier: keep the diagram source in a collapsible
  ``<details>`` block, re-rendering only what changed
- Simple mode: emit ``<div class="mermaid">`` for client-side rendering
- Per-diagram failures are reported as diagnostics and never abort a run

Requirements
------------
- Python 3.10+
- ``mmdc`` from ``@mermaid-js/mermaid-cli`` (not needed in simple mode)

Examples
--------
Transform markdown text:

    >>> from mdmermaid import transform_markdown
    >>> result = transform_markdown(open("README.md").read(), image_dir="diagrams")
    >>> print(result.markdown)

Work on a parsed tree:

    >>> from mdmermaid import MermaidOptions, markdown_to_ast, transform
    >>> doc = markdown_to_ast(text)
    >>> result = transform(doc, MermaidOptions(simple=True))
    >>> for diagnostic in result.diagnostics:
    ...     print(diagnostic)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "0.3.0"

from mdmermaid.api import MarkdownResult, transform, transform_file, transform_markdown
from mdmermaid.ast import Document
from mdmermaid.diagnostics import Diagnostic, DiagnosticLevel, DiagnosticLog
from mdmermaid.diagrams import DiagramRenderer, MermaidCliRenderer, RenderedArtifact, RenderOptions
from mdmermaid.exceptions import (
    DependencyError,
    DiagramRenderError,
    FileAccessError,
    FileError,
    MdMermaidError,
    RenderingError,
    StructuralInvariantError,
    TransformError,
    ValidationError,
)
from mdmermaid.hashing import artifact_name, artifact_reference, content_digest
from mdmermaid.options import MarkdownParserOptions, MarkdownRendererOptions, MermaidOptions
from mdmermaid.parsers import markdown_to_ast
from mdmermaid.renderers import ast_to_markdown
from mdmermaid.transforms import MermaidTransform, TransformResult

__all__ = [
    "__version__",
    # API
    "transform",
    "transform_markdown",
    "transform_file",
    "MarkdownResult",
    "MermaidTransform",
    "TransformResult",
    # Tree and markdown collaborators
    "Document",
    "markdown_to_ast",
    "ast_to_markdown",
    # Rendering
    "DiagramRenderer",
    "MermaidCliRenderer",
    "RenderOptions",
    "RenderedArtifact",
    "content_digest",
    "artifact_name",
    "artifact_reference",
    # Diagnostics
    "Diagnostic",
    "DiagnosticLevel",
    "DiagnosticLog",
    # Options
    "MermaidOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    # Exceptions
    "MdMermaidError",
    "ValidationError",
    "FileError",
    "FileAccessError",
    "RenderingError",
    "DiagramRenderError",
    "TransformError",
    "StructuralInvariantError",
    "DependencyError",
]
