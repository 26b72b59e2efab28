#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/transforms/summary.py
"""Summary wrapper handling for comment-mode diagrams.

In comment mode a rendered diagram is followed by a collapsible
``<details>`` block holding its source, so the document stays editable.
Written out and parsed back, the pair shows up as four siblings::

    [i-2] Paragraph(Image(title="`mermaid` image"))   previous rendering
    [i-1] HTMLBlock('<details ...><summary>Mermaid source</summary>')
    [i]   CodeBlock (the diagram, still marked ``comment``)
    [i+1] HTMLBlock('</details>')

On the next pass the rewriter recognises this window around the code
block and replaces all four nodes, so re-running never accumulates
duplicate images or wrappers. The wrapper records the digest of the source
it was built from; a differing digest marks the previous rendering as
stale.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from mdmermaid.ast.nodes import CodeBlock, HTMLBlock, Image, Node, Paragraph
from mdmermaid.constants import (
    DETAILS_CLOSE,
    DETAILS_OPEN_PATTERN,
    DETAILS_OPEN_TEMPLATE,
    DIGEST_ATTRIBUTE,
    DIGEST_ATTRIBUTE_PATTERN,
    RENDERED_IMAGE_TITLE,
    SUMMARY_LABEL,
)
from mdmermaid.hashing import content_digest
from mdmermaid.transforms.classifier import diagram_source

logger = logging.getLogger(__name__)

_DETAILS_OPEN_RE = re.compile(DETAILS_OPEN_PATTERN)
_DIGEST_RE = re.compile(DIGEST_ATTRIBUTE_PATTERN)


class SiblingKind(Enum):
    """Role a sibling node can play in a summary wrapper window."""

    IMAGE_PARAGRAPH = "image_paragraph"
    DETAILS_OPEN = "details_open"
    DETAILS_CLOSE = "details_close"
    OTHER = "other"


def classify_sibling(node: Node) -> SiblingKind:
    """Return the wrapper role of ``node``, or ``SiblingKind.OTHER``."""
    if isinstance(node, Paragraph):
        if len(node.content) == 1:
            only = node.content[0]
            if isinstance(only, Image) and only.title == RENDERED_IMAGE_TITLE:
                return SiblingKind.IMAGE_PARAGRAPH
        return SiblingKind.OTHER
    if isinstance(node, HTMLBlock):
        html = node.content.strip()
        if html == DETAILS_CLOSE:
            return SiblingKind.DETAILS_CLOSE
        if _DETAILS_OPEN_RE.match(html):
            return SiblingKind.DETAILS_OPEN
    return SiblingKind.OTHER


@dataclass(frozen=True)
class WrapperMatch:
    """A previous rendering found around a code block.

    Parameters
    ----------
    start : int
        Index of the image paragraph (inclusive)
    stop : int
        Index after the closing ``</details>`` (exclusive)
    digest : str or None
        Digest recorded in the wrapper, if it carried one
    stale : bool
        True when the recorded digest differs from the current source

    """

    start: int
    stop: int
    digest: Optional[str]
    stale: bool


def find_existing_wrapper(children: Sequence[Node], index: int) -> Optional[WrapperMatch]:
    """Match the three-sibling wrapper window around ``children[index]``.

    All three of ``index-2`` (image paragraph), ``index-1`` (opening
    details) and ``index+1`` (closing details) must match; a partial match
    is no match. When there are not enough siblings on either side the
    result is None.

    Parameters
    ----------
    children : sequence of Node
        Sibling list containing the code block
    index : int
        Index of the code block

    Returns
    -------
    WrapperMatch or None
        The matched window, or None

    """
    if index - 2 < 0 or index + 1 >= len(children):
        return None

    window = (
        classify_sibling(children[index - 2]),
        classify_sibling(children[index - 1]),
        classify_sibling(children[index + 1]),
    )
    if window != (SiblingKind.IMAGE_PARAGRAPH, SiblingKind.DETAILS_OPEN, SiblingKind.DETAILS_CLOSE):
        return None

    opening = children[index - 1]
    assert isinstance(opening, HTMLBlock)
    found = _DIGEST_RE.search(opening.content)
    recorded = found.group(1) if found else None

    node = children[index]
    current = content_digest(diagram_source(node)) if isinstance(node, CodeBlock) else None
    return WrapperMatch(start=index - 2, stop=index + 2, digest=recorded, stale=recorded != current)


def remove_existing_wrapper(children: list[Node], index: int) -> int:
    """Remove a previous rendering around ``children[index]`` in place.

    Returns
    -------
    int
        The code block's index after removal (``index - 2`` when a wrapper
        was removed, otherwise ``index``)

    """
    match = find_existing_wrapper(children, index)
    if match is None:
        return index
    del children[index + 1]
    del children[index - 2 : index]
    logger.debug("Removed previous rendering around index %d (stale=%s)", index, match.stale)
    return index - 2


def _fence_for(source: str, info_string: str) -> str:
    fence_char = "~" if "`" in info_string else "`"
    longest = current = 0
    for char in source:
        current = current + 1 if char == fence_char else 0
        longest = max(longest, current)
    return fence_char * max(3, longest + 1)


def build_wrapper(source: str, info_string: str, fence: Optional[str] = None) -> HTMLBlock:
    """Build the summary wrapper for a diagram as a single HTML block.

    Parameters
    ----------
    source : str
        Diagram source (without trailing newline)
    info_string : str
        Info string of the original code block, modifiers included
    fence : str or None
        Code fence to use; by default the shortest backtick fence that
        cannot be closed by the source

    Returns
    -------
    HTMLBlock
        ``<details>`` markup holding the source in a fenced block

    """
    fence = fence or _fence_for(source, info_string)
    opening = DETAILS_OPEN_TEMPLATE.format(attribute=DIGEST_ATTRIBUTE, digest=content_digest(source), label=SUMMARY_LABEL)
    return HTMLBlock(content=f"{opening}\n\n{fence}{info_string}\n{source}\n{fence}\n\n{DETAILS_CLOSE}")


def build_image_paragraph(reference: str) -> Paragraph:
    """Build the paragraph that shows a rendered diagram."""
    return Paragraph(content=[Image(url=reference, alt_text="", title=RENDERED_IMAGE_TITLE)])
