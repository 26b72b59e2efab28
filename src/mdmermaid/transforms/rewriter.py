#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/transforms/rewriter.py
"""Rewrite diagram nodes in a document tree.

The rewriter runs one pass per node kind. A pass walks every child
sequence of the tree, classifies candidates, renders them, and records the
resulting edits in a :class:`~mdmermaid.ast.arena.RewritePlan` that is
applied once the walk is over. Indices seen during the walk therefore
always refer to the untouched tree.

Render and file failures are reported as error diagnostics and leave the
node (and any previous rendering around it) exactly as it was. Structural
invariant violations raised by the plan are not caught.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator, Optional, Type, Union

from mdmermaid.ast.arena import NodeArena, ParentHandle, RewritePlan
from mdmermaid.ast.nodes import (
    CodeBlock,
    Document,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    Node,
    Paragraph,
    Text,
    get_child_sequence,
    get_node_children,
)
from mdmermaid.constants import MERMAID_DIV_TEMPLATE
from mdmermaid.diagnostics import DiagnosticLog
from mdmermaid.diagrams import DiagramRenderer, RenderOptions
from mdmermaid.exceptions import DependencyError, FileAccessError, RenderingError
from mdmermaid.options.mermaid import MermaidOptions
from mdmermaid.transforms.classifier import DiagramRequest, classify_code_block, classify_reference
from mdmermaid.transforms.summary import build_image_paragraph, build_wrapper, find_existing_wrapper
from mdmermaid.utils.io_utils import FileAccess, LocalFileAccess

logger = logging.getLogger(__name__)

# Failures that are reported per node instead of aborting the pass
RECOVERABLE_ERRORS = (RenderingError, FileAccessError, DependencyError)


def mermaid_div(source: str) -> str:
    """Wrap diagram source in a client-side ``<div class="mermaid">``.

    The source is HTML-escaped and blank lines are dropped, since a blank
    line would end the HTML block when the document is read back.
    """
    lines = [line for line in source.splitlines() if line.strip()]
    return MERMAID_DIV_TEMPLATE.format(source=html.escape("\n".join(lines), quote=False))


class TreeRewriter:
    """Replace diagram code blocks, links and images in a document.

    Parameters
    ----------
    options : MermaidOptions
        Transform options shared by every pass
    renderer : DiagramRenderer
        Collaborator that turns diagram source into an image reference
    file_access : FileAccess or None
        Collaborator used to read referenced diagram files
    diagnostics : DiagnosticLog or None
        Log that receives one diagnostic per processed node
    base_dir : Path or None
        Directory that link and image paths are resolved against; defaults
        to the current directory

    """

    def __init__(
        self,
        options: MermaidOptions,
        renderer: DiagramRenderer,
        file_access: Optional[FileAccess] = None,
        diagnostics: Optional[DiagnosticLog] = None,
        base_dir: Optional[Path] = None,
    ) -> None:
        self.options = options
        self.renderer = renderer
        self.file_access: FileAccess = file_access if file_access is not None else LocalFileAccess()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.base_dir = Path(base_dir) if base_dir is not None else Path(".")

    @property
    def destination_dir(self) -> Path:
        """Directory rendered images are written to."""
        if self.options.destination_dir:
            return Path(self.options.destination_dir)
        return self.base_dir

    def _render_options(self, inline: bool) -> RenderOptions:
        return RenderOptions(inline=inline, image_dir=self.options.image_dir)

    # ------------------------------------------------------------------
    # Code blocks
    # ------------------------------------------------------------------

    def rewrite_code_blocks(self, document: Document) -> int:
        """Replace every diagram code block in ``document``.

        Returns
        -------
        int
            Number of code blocks replaced

        Raises
        ------
        StructuralInvariantError
            If the planned edits do not fit the tree

        """
        arena = NodeArena(document)
        plan = RewritePlan(arena)
        for handle, children in arena.sequences():
            for index, node in enumerate(children):
                if not isinstance(node, CodeBlock):
                    continue
                request = classify_code_block(node, self.options, self.destination_dir)
                if request is not None:
                    self._plan_code_block(plan, handle, children, index, request)
        plan.apply()
        return len(plan)

    def _plan_code_block(
        self,
        plan: RewritePlan,
        handle: ParentHandle,
        children: list[Node],
        index: int,
        request: DiagramRequest,
    ) -> None:
        mode = request.mode
        start, stop = index, index + 1
        if mode.wrap_in_comment:
            previous = find_existing_wrapper(children, index)
            if previous is not None:
                start, stop = previous.start, previous.stop
                if previous.stale:
                    logger.debug("Diagram source changed since digest %s; re-rendering", previous.digest)

        replacement: list[Node]
        if mode.render_as_div:
            replacement = [HTMLBlock(content=mermaid_div(request.source))]
            self.diagnostics.info(f"{request.info_string} code block replaced with div", request.location)
        else:
            try:
                artifact = self.renderer.render(
                    request.source, request.destination_dir or self.destination_dir, self._render_options(mode.inline)
                )
            except RECOVERABLE_ERRORS as exc:
                self.diagnostics.error(str(exc), request.location)
                return
            replacement = [build_image_paragraph(artifact.reference)]
            if mode.wrap_in_comment:
                replacement.append(build_wrapper(request.source, request.info_string))
            else:
                self.diagnostics.info(f"{request.info_string} code block replaced with graph", request.location)

        plan.splice(handle, start, stop, replacement)

    # ------------------------------------------------------------------
    # Links and images
    # ------------------------------------------------------------------

    def rewrite_references(self, document: Document, node_type: Type[Union[Link, Image]]) -> int:
        """Process every sentinel-titled node of ``node_type``.

        In reference mode the node's url is replaced by the rendered
        artifact's reference. In simple mode the paragraph holding the node
        is split around it and a ``<div class="mermaid">`` block with the
        referenced file's text goes in between (see :func:`split_paragraph`).

        Returns
        -------
        int
            Number of nodes rewritten

        """
        arena = NodeArena(document)
        plan = RewritePlan(arena)
        hosts = paragraph_hosts(arena) if self.options.simple else {}
        embeds: dict[int, tuple[ParagraphHost, dict[int, str]]] = {}
        rewritten = 0
        for _handle, children in arena.sequences():
            for node in children:
                if not isinstance(node, node_type):
                    continue
                request = classify_reference(node, self.options, self.destination_dir)
                if request is None:
                    continue
                if request.mode.render_as_div:
                    host = hosts.get(id(node))
                    if host is None:
                        self.diagnostics.error(
                            "mermaid link outside a paragraph cannot be replaced with div", request.location
                        )
                        continue
                    div = self._embed_reference(request)
                    if div is None:
                        continue
                    embeds.setdefault(id(host.paragraph), (host, {}))[1][id(node)] = div
                    rewritten += 1
                elif self._rewrite_reference(node, request):
                    rewritten += 1

        for host, divs in embeds.values():
            plan.splice(host.parent, host.index, host.index + 1, split_paragraph(host.paragraph, divs))
        plan.apply()
        return rewritten

    def _read_reference(self, request: DiagramRequest) -> str:
        return self.file_access.read_text(self.base_dir / request.source)

    def _embed_reference(self, request: DiagramRequest) -> Optional[str]:
        try:
            source = self._read_reference(request)
        except RECOVERABLE_ERRORS as exc:
            self.diagnostics.error(str(exc), request.location)
            return None
        self.diagnostics.info("mermaid link replaced with div", request.location)
        return mermaid_div(source)

    def _rewrite_reference(self, node: Union[Link, Image], request: DiagramRequest) -> bool:
        try:
            source = self._read_reference(request)
            artifact = self.renderer.render(
                source, request.destination_dir or self.destination_dir, self._render_options(False)
            )
        except RECOVERABLE_ERRORS as exc:
            self.diagnostics.error(str(exc), request.location)
            return False

        node.url = artifact.reference
        self.diagnostics.info("mermaid link replaced with link to graph", request.location)
        return True


# ----------------------------------------------------------------------
# Paragraph splitting for embedded references
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class ParagraphHost:
    """Paragraph that holds an inline node, and where it sits."""

    parent: ParentHandle
    index: int
    paragraph: Paragraph


def paragraph_hosts(arena: NodeArena) -> dict[int, ParagraphHost]:
    """Map the id of every inline node inside a paragraph to that paragraph.

    Inline nodes in headings and table cells have no entry; a block cannot
    be placed there.
    """
    hosts: dict[int, ParagraphHost] = {}
    for handle, children in arena.sequences():
        for index, child in enumerate(children):
            if not isinstance(child, Paragraph):
                continue
            host = ParagraphHost(handle, index, child)
            stack = list(child.content)
            while stack:
                node = stack.pop()
                hosts[id(node)] = host
                stack.extend(get_node_children(node))
    return hosts


def _trim(run: list[Node], leading: bool, trailing: bool) -> list[Node]:
    """Drop line breaks and whitespace at the cut edges of an inline run."""
    run = list(run)
    while leading and run:
        first = run[0]
        if isinstance(first, LineBreak):
            run.pop(0)
        elif isinstance(first, Text) and not first.content.strip():
            run.pop(0)
        else:
            if isinstance(first, Text):
                run[0] = replace(first, content=first.content.lstrip())
            break
    while trailing and run:
        last = run[-1]
        if isinstance(last, LineBreak):
            run.pop()
        elif isinstance(last, Text) and not last.content.strip():
            run.pop()
        else:
            if isinstance(last, Text):
                run[-1] = replace(last, content=last.content.rstrip())
            break
    return run


def _split_runs(nodes: list[Node], cuts: dict[int, str]) -> tuple[list[list[Node]], list[str]]:
    """Split ``nodes`` at the nodes whose ids are in ``cuts``.

    Returns ``len(divs) + 1`` inline runs and the div markup found between
    them. A container holding a cut is split into one shallow copy per run.
    """
    runs: list[list[Node]] = [[]]
    divs: list[str] = []
    for node in nodes:
        if id(node) in cuts:
            divs.append(cuts[id(node)])
            runs.append([])
            continue
        sequence = get_child_sequence(node)
        if sequence is None or not any(id(inner) in cuts for inner in _descendants(node)):
            runs[-1].append(node)
            continue
        inner_runs, inner_divs = _split_runs(sequence, cuts)
        last = len(inner_runs) - 1
        for position, run in enumerate(inner_runs):
            run = _trim(run, leading=position > 0, trailing=position < last)
            if position > 0:
                divs.append(inner_divs[position - 1])
                runs.append([])
            if run:
                runs[-1].append(replace(node, content=run))
    return runs, divs


def _descendants(node: Node) -> Iterator[Node]:
    for child in get_node_children(node):
        yield child
        yield from _descendants(child)


def split_paragraph(paragraph: Paragraph, cuts: dict[int, str]) -> list[Node]:
    """Replace embedded references in ``paragraph`` by div blocks.

    ``cuts`` maps the id of each reference node to its div markup. The
    paragraph becomes the text before the first reference, a
    :class:`HTMLBlock` per reference, and the text between and after them.
    Empty paragraphs are left out, so a reference that is the paragraph's
    only content turns into a lone div block.

    Parameters
    ----------
    paragraph : Paragraph
        Paragraph holding the references
    cuts : dict
        ``id(node) -> div markup``

    Returns
    -------
    list of Node
        Replacement blocks, in document order

    """
    runs, divs = _split_runs(paragraph.content, cuts)
    last = len(runs) - 1
    blocks: list[Node] = []
    for position, run in enumerate(runs):
        run = _trim(run, leading=position > 0, trailing=position < last)
        if run:
            blocks.append(Paragraph(content=run, source_location=paragraph.source_location if position == 0 else None))
        if position < len(divs):
            blocks.append(HTMLBlock(content=divs[position]))
    return blocks
