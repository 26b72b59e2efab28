#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/transforms/transformer.py
"""Entry point that runs every rewrite pass over one document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mdmermaid.ast.nodes import Document, Image, Link
from mdmermaid.diagnostics import Diagnostic, DiagnosticLog
from mdmermaid.diagrams import DiagramRenderer, MermaidCliRenderer
from mdmermaid.options.mermaid import MermaidOptions
from mdmermaid.transforms.rewriter import TreeRewriter
from mdmermaid.utils.decorators import debug_timer
from mdmermaid.utils.io_utils import FileAccess, LocalFileAccess

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """The rewritten document and the diagnostics produced on the way.

    Parameters
    ----------
    document : Document
        The input document, mutated in place
    diagnostics : list of Diagnostic
        One entry per processed diagram node, in document order per pass

    """

    document: Document
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


class MermaidTransform:
    """Replace Mermaid code blocks, links and images in a document.

    The transform runs three passes in a fixed order: fenced code blocks,
    then links, then images. Each pass builds its own rewrite plan against
    the tree left by the previous pass.

    Parameters
    ----------
    options : MermaidOptions or None
        Transform options
    renderer : DiagramRenderer or None
        Diagram renderer; defaults to :class:`MermaidCliRenderer`
    file_access : FileAccess or None
        Filesystem collaborator; defaults to the local filesystem
    base_dir : Path or None
        Directory of the document being transformed. Link and image paths
        are resolved against it, and images are written below it unless
        ``options.destination_dir`` says otherwise.

    Examples
    --------
        >>> from mdmermaid.parsers import markdown_to_ast
        >>> doc = markdown_to_ast("```mermaid\\ngraph TD; A-->B\\n```\\n")
        >>> result = MermaidTransform(MermaidOptions(simple=True))(doc)
        >>> result.diagnostics[0].message
        'mermaid code block replaced with div'

    """

    def __init__(
        self,
        options: Optional[MermaidOptions] = None,
        renderer: Optional[DiagramRenderer] = None,
        file_access: Optional[FileAccess] = None,
        base_dir: Optional[Path] = None,
    ) -> None:
        self.options = options or MermaidOptions()
        self.file_access: FileAccess = file_access if file_access is not None else LocalFileAccess()
        self.renderer: DiagramRenderer = (
            renderer if renderer is not None else MermaidCliRenderer(self.options, self.file_access)
        )
        self.base_dir = base_dir

    def __call__(self, document: Document) -> TransformResult:
        """Run all passes over ``document``.

        Raises
        ------
        StructuralInvariantError
            If a pass computes edits that do not fit the tree. Render and
            file failures never raise; they are reported as diagnostics.

        """
        diagnostics = DiagnosticLog()
        rewriter = TreeRewriter(
            self.options,
            self.renderer,
            file_access=self.file_access,
            diagnostics=diagnostics,
            base_dir=self.base_dir,
        )
        with debug_timer(logger, "Mermaid transform"):
            blocks = rewriter.rewrite_code_blocks(document)
            links = rewriter.rewrite_references(document, Link)
            images = rewriter.rewrite_references(document, Image)

        logger.debug(
            "Rewrote %d code block(s), %d link(s), %d image(s); %d error(s)",
            blocks,
            links,
            images,
            len(diagnostics.errors),
        )
        return TransformResult(document=document, diagnostics=diagnostics.as_list())
