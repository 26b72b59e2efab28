#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/ast/nodes.py
"""AST node classes for markdown documents.

The diagram transform works on a mutable tree of these nodes. Containers
expose their children as plain Python lists, so a rewrite can splice a
sibling range in place without rebuilding the parent.

Node Hierarchy
--------------
Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTMLBlock

Inline nodes:
    - Text, Emphasis, Strong, Code, Strikethrough
    - Link, Image, LineBreak, HTMLInline

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

Alignment = Literal["left", "center", "right"]


@dataclass
class SourceLocation:
    """Where a node came from in the source document.

    Parameters
    ----------
    format : str
        Source format (always ``"markdown"`` for parsed documents)
    line : int or None, default = None
        1-based line number of the node's first line
    column : int or None, default = None
        1-based column number
    metadata : dict, default = empty dict
        Additional location information

    """

    format: str
    line: Optional[int] = None
    column: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.line is None:
            return self.format
        if self.column is None:
            return f"{self.line}"
        return f"{self.line}:{self.column}"


class Node(ABC):
    """Base class for all AST nodes.

    Every node carries a metadata dict and an optional source location and
    supports the visitor pattern through ``accept``.

    """

    metadata: dict[str, Any]
    source_location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Dispatch to the visitor method for this node kind.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root node of a parsed document.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in document order
    metadata : dict, default = empty dict
        Document-level metadata. Front matter values are stored here, with
        the verbatim front matter block under ``"frontmatter_raw"``.
    source_location : SourceLocation or None, default = None
        Source location information

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_document(self)``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """ATX heading (levels 1-6) with inline content."""

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_heading(self)``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph of inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_paragraph(self)``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    content : str
        Code text exactly as parsed. Fenced blocks keep their trailing
        newline; consumers that hash the text strip it first.
    language : str or None, default = None
        First word of the info string
    fence_char : str, default = '`'
        Character used for fencing (` or ~)
    fence_length : int, default = 3
        Number of fence characters in the source
    metadata : dict, default = empty dict
        Code block metadata. ``"info_string"`` holds the full info string
        (language plus any modifiers such as ``inline comment``).
    source_location : SourceLocation or None, default = None
        Source location information

    """

    content: str
    language: Optional[str] = None
    fence_char: str = "`"
    fence_length: int = 3
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    @property
    def info_string(self) -> str:
        """Full info string, falling back to the language alone."""
        info = self.metadata.get("info_string")
        if info:
            return str(info)
        return self.language or ""

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_code_block(self)``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote holding block-level children."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_block_quote(self)``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool
        True for ordered lists
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists
    tight : bool, default = True
        Whether items are separated without blank lines

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_list(self)``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item holding block-level children, optionally a task item."""

    children: list[Node] = field(default_factory=list)
    task_status: Optional[Literal["checked", "unchecked"]] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_list_item(self)``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """GFM table.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Body rows
    header : TableRow or None, default = None
        Header row
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Alignment | None] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_table(self)``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Row of table cells."""

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_table_row(self)``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell with inline content."""

    content: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_table_cell(self)``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Horizontal rule."""

    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_thematic_break(self)``."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, serialized verbatim.

    The summary wrapper written in comment mode is a single HTMLBlock whose
    content spans several markdown blocks; after a serialize/parse round
    trip it comes back as an opening HTMLBlock, a CodeBlock and a closing
    HTMLBlock.

    Parameters
    ----------
    content : str
        Raw HTML content
    metadata : dict, default = empty dict
        HTML block metadata
    source_location : SourceLocation or None, default = None
        Source location information

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_html_block(self)``."""
        return visitor.visit_html_block(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_text(self)``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_emphasis(self)``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strongly emphasized (bold) inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_strong(self)``."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code span."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_code(self)``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink.

    A link whose title is exactly ``"mermaid:"`` is a diagram reference:
    its url names a diagram source file.

    Parameters
    ----------
    url : str
        Link destination
    content : list of Node, default = empty list
        Inline nodes representing link text
    title : str or None, default = None
        Optional link title

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_link(self)``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Embedded image.

    Parameters
    ----------
    url : str
        Image source path, URL or data URI
    alt_text : str, default = ''
        Alternative text
    title : str or None, default = None
        Optional image title. ``"mermaid:"`` marks a diagram reference;
        ``"`mermaid` image"`` marks a previously rendered code block.

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_image(self)``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break; soft breaks are plain newlines in the source."""

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_line_break(self)``."""
        return visitor.visit_line_break(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough inline content (GFM extension)."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_strikethrough(self)``."""
        return visitor.visit_strikethrough(self)


@dataclass
class HTMLInline(Node):
    """Raw inline HTML, serialized verbatim."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_html_inline(self)``."""
        return visitor.visit_html_inline(self)


# ============================================================================
# Child access helpers
# ============================================================================

_BLOCK_CONTAINERS = (Document, BlockQuote, ListItem)
_INLINE_CONTAINERS = (Heading, Paragraph, Emphasis, Strong, Strikethrough, Link, TableCell)


def get_child_sequence(node: Node) -> Optional[list[Node]]:
    """Return the node's own, mutable list of children.

    Edits made to the returned list change the tree. A Table's header row is
    held outside this list (only body rows are returned); use
    :func:`get_node_children` to enumerate every child.

    Parameters
    ----------
    node : Node
        Any node

    Returns
    -------
    list of Node or None
        The live child list, or None for leaf nodes

    """
    if isinstance(node, _BLOCK_CONTAINERS):
        return node.children
    if isinstance(node, _INLINE_CONTAINERS):
        return node.content
    if isinstance(node, List):
        return node.items  # type: ignore[return-value]
    if isinstance(node, Table):
        return node.rows  # type: ignore[return-value]
    if isinstance(node, TableRow):
        return node.cells  # type: ignore[return-value]
    return None


def get_node_children(node: Node) -> list[Node]:
    """Get a copy of all child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes in document order (empty list for leaves)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, Table):
        children: list[Node] = []
        if node.header is not None:
            children.append(node.header)
        children.extend(node.rows)
        return children

    sequence = get_child_sequence(node)
    return list(sequence) if sequence is not None else []
