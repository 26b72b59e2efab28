#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/ast/__init__.py
"""Abstract Syntax Tree for markdown documents.

The tree is produced by :mod:`mdmermaid.parsers.markdown`, rewritten in
place by :mod:`mdmermaid.transforms`, and serialized back to markdown by
:mod:`mdmermaid.renderers.markdown`.

Examples
--------
>>> from mdmermaid.ast import Document, CodeBlock
>>> doc = Document(children=[CodeBlock(content="graph TD; A-->B\\n", language="mermaid")])

"""

from mdmermaid.ast.arena import NodeArena, ParentHandle, RewritePlan, Splice
from mdmermaid.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    SourceLocation,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    get_child_sequence,
    get_node_children,
)
from mdmermaid.ast.visitors import NodeVisitor

__all__ = [
    # Base classes
    "Node",
    "SourceLocation",
    "NodeVisitor",
    # Block nodes
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTMLBlock",
    # Inline nodes
    "Text",
    "Emphasis",
    "Strong",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "Strikethrough",
    "HTMLInline",
    # Helpers
    "get_child_sequence",
    "get_node_children",
    # Rewriting
    "NodeArena",
    "ParentHandle",
    "RewritePlan",
    "Splice",
]
