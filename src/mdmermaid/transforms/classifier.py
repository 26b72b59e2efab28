#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/transforms/classifier.py
"""Decide whether a node is a diagram and how it should be rendered.

Fenced code blocks are diagrams when the info string contains the word
``mermaid``; the words ``inline`` and ``comment`` anywhere in the info
string switch on data-URI output and the summary wrapper respectively.
Links and images are diagram references only when their title is exactly
``"mermaid:"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote

from mdmermaid.ast.nodes import CodeBlock, Image, Link, SourceLocation
from mdmermaid.constants import (
    ARTIFACT_NAME_PATTERN,
    COMMENT_MODIFIER_PATTERN,
    INLINE_MODIFIER_PATTERN,
    MERMAID_LANGUAGE_PATTERN,
    SENTINEL_TITLE,
)
from mdmermaid.options.mermaid import MermaidOptions

_LANGUAGE_RE = re.compile(MERMAID_LANGUAGE_PATTERN)
_INLINE_RE = re.compile(INLINE_MODIFIER_PATTERN)
_COMMENT_RE = re.compile(COMMENT_MODIFIER_PATTERN)
_ARTIFACT_RE = re.compile(ARTIFACT_NAME_PATTERN)


@dataclass(frozen=True)
class DiagramMode:
    """Rendering flags for one diagram.

    Parameters
    ----------
    render_as_div : bool
        Emit a client-side ``<div class="mermaid">`` instead of rendering
    inline : bool
        Embed the rendered image as a data URI
    wrap_in_comment : bool
        Keep the source in a collapsible summary wrapper after the image

    """

    render_as_div: bool = False
    inline: bool = False
    wrap_in_comment: bool = False


@dataclass(frozen=True)
class DiagramRequest:
    """A classified diagram node, ready to be rendered.

    For code blocks ``source`` is the diagram text. For links and images it
    is the referenced path (percent-decoded); the file is read later.
    """

    source: str
    mode: DiagramMode
    info_string: str = ""
    destination_dir: Optional[Path] = None
    image_dir: Optional[str] = None
    location: Optional[SourceLocation] = None


def is_diagram_language(info: Optional[str]) -> bool:
    """Return True when an info string declares a Mermaid diagram.

    Examples
    --------
        >>> is_diagram_language("mermaid inline comment")
        True
        >>> is_diagram_language("mermaidjs")
        False

    """
    return bool(info) and _LANGUAGE_RE.search(info) is not None  # type: ignore[arg-type]


def parse_mode(info: str, options: MermaidOptions) -> DiagramMode:
    """Read the ``inline`` and ``comment`` modifiers from an info string."""
    return DiagramMode(
        render_as_div=options.simple,
        inline=_INLINE_RE.search(info) is not None,
        wrap_in_comment=_COMMENT_RE.search(info) is not None,
    )


def diagram_source(node: CodeBlock) -> str:
    """Return the diagram text of a code block with trailing newlines removed.

    This is the text that is hashed, so the same diagram always gets the
    same name regardless of how the fence was terminated.
    """
    return node.content.rstrip("\n")


def classify_code_block(
    node: CodeBlock,
    options: MermaidOptions,
    destination_dir: Optional[Path] = None,
) -> Optional[DiagramRequest]:
    """Classify a code block.

    Parameters
    ----------
    node : CodeBlock
        Candidate node
    options : MermaidOptions
        Transform options (``simple`` and ``image_dir`` are consulted)
    destination_dir : Path or None
        Directory rendered images are written to

    Returns
    -------
    DiagramRequest or None
        None when the block is not a diagram

    """
    info = node.info_string
    if not is_diagram_language(info):
        return None
    return DiagramRequest(
        source=diagram_source(node),
        mode=parse_mode(info, options),
        info_string=info,
        destination_dir=destination_dir,
        image_dir=options.image_dir,
        location=node.source_location,
    )


def is_sentinel_title(title: Optional[str]) -> bool:
    """Return True for the exact diagram-reference title ``"mermaid:"``."""
    return title == SENTINEL_TITLE


def is_rendered_artifact(path: str) -> bool:
    """Return True when ``path`` names a content-addressed rendering."""
    return _ARTIFACT_RE.match(path.replace("\\", "/").rsplit("/", 1)[-1]) is not None


def classify_reference(
    node: Union[Link, Image],
    options: MermaidOptions,
    destination_dir: Optional[Path] = None,
) -> Optional[DiagramRequest]:
    """Classify a link or image.

    Returns
    -------
    DiagramRequest or None
        None unless the node's title is the sentinel. A node that already
        points at a rendered artifact (``<digest>.svg``) is also skipped, so
        re-running a transformed document leaves it alone. The request's
        ``source`` is the referenced path.

    """
    if not is_sentinel_title(node.title):
        return None
    path = unquote(node.url)
    if is_rendered_artifact(path):
        return None
    return DiagramRequest(
        source=path,
        mode=DiagramMode(render_as_div=options.simple),
        destination_dir=destination_dir,
        image_dir=options.image_dir,
        location=node.source_location,
    )
