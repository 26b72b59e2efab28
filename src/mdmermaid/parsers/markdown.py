#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/parsers/markdown.py
"""Markdown to AST converter.

This module turns markdown text into the mutable tree that the diagram
transform rewrites, using mistune's token stream (``renderer=None``).
Fenced code blocks keep their fence and full info string, diagram-capable
nodes carry line numbers, and a leading YAML front matter block is lifted
into document metadata so it can be written back unchanged.

"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Literal, Optional, Union

import mistune
import yaml

from mdmermaid.ast import (
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
)
from mdmermaid.exceptions import FileAccessError
from mdmermaid.options.markdown import MarkdownParserOptions

logger = logging.getLogger(__name__)

_FRONTMATTER_FENCE = "---"


class MarkdownToAstConverter:
    r"""Convert Markdown to AST representation.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> converter = MarkdownToAstConverter()
        >>> doc = converter.parse("# Hello\\n\\n```mermaid\\ngraph TD; A-->B\\n```\\n")

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        self.options: MarkdownParserOptions = options or MarkdownParserOptions()
        self._source = ""
        self._cursor = 0
        self._line_offset = 0

    def parse(self, input_data: Union[str, Path]) -> Document:
        """Parse Markdown input into an AST Document.

        Parameters
        ----------
        input_data : str or Path
            Markdown text, or a Path to a markdown file

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        FileAccessError
            If ``input_data`` is a Path that cannot be read

        """
        if isinstance(input_data, Path):
            try:
                markdown_content = input_data.read_text(encoding="utf-8")
            except OSError as exc:
                raise FileAccessError(str(input_data), original_error=exc) from exc
        else:
            markdown_content = input_data

        markdown_content = markdown_content.replace("\r\n", "\n").replace("\r", "\n")

        metadata: dict[str, Any] = {}
        markdown_content = self._extract_frontmatter(markdown_content, metadata)

        # Line lookups run sequentially over the body, in token order.
        self._source = markdown_content
        self._cursor = 0

        plugins: list[str] = ["table", "task_lists"]
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")

        markdown = mistune.create_markdown(plugins=plugins, renderer=None)  # type: ignore[arg-type]
        tokens, _state = markdown.parse(markdown_content)

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        return Document(children=children, metadata=metadata)

    def _extract_frontmatter(self, content: str, metadata: dict[str, Any]) -> str:
        """Split a leading ``---`` YAML block off ``content``.

        The verbatim block is stored under ``metadata["frontmatter_raw"]`` and
        its parsed mapping under ``metadata["frontmatter"]``. Returns the
        remaining markdown.

        """
        self._line_offset = 0
        if not self.options.parse_frontmatter or not content.startswith(_FRONTMATTER_FENCE + "\n"):
            return content

        lines = content.splitlines(keepends=True)
        end_index = -1
        for i in range(1, len(lines)):
            if lines[i].rstrip("\n") == _FRONTMATTER_FENCE:
                end_index = i
                break

        if end_index <= 0:
            return content

        raw_block = "".join(lines[: end_index + 1])
        yaml_content = "".join(lines[1:end_index])
        metadata["frontmatter_raw"] = raw_block.rstrip("\n")
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as exc:
            logger.warning("Front matter is not valid YAML, keeping it verbatim: %s", exc)
            data = None
        metadata["frontmatter"] = data if isinstance(data, dict) else {}

        self._line_offset = end_index + 1
        return "".join(lines[end_index + 1 :])

    def _locate(self, pattern: re.Pattern[str]) -> Optional[SourceLocation]:
        """Find ``pattern`` at or after the cursor and return its location.

        The cursor advances past the match so that repeated identical
        constructs resolve to successive occurrences.

        """
        match = pattern.search(self._source, self._cursor)
        if match is None:
            return None
        line_start = self._source.rfind("\n", 0, match.start()) + 1
        line = self._source.count("\n", 0, match.start()) + 1 + self._line_offset
        self._cursor = match.end()
        return SourceLocation(format="markdown", line=line, column=match.start() - line_start + 1)

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of block-level mistune tokens into AST nodes."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single block-level mistune token.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node or None
            Resulting AST node, or None for tokens with no tree counterpart
            (blank lines)

        """
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return Paragraph(content=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))

        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs", {})
        level = attrs.get("level", 1) if isinstance(attrs, dict) else 1
        if not isinstance(level, int) or not 1 <= level <= 6:
            level = 1
        return Heading(level=level, content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process a code block token.

        Fenced blocks keep their marker character and length plus the full
        info string; the language is its first word.

        Parameters
        ----------
        token : dict
            Code block token with 'raw', optional 'marker' and 'attrs'

        Returns
        -------
        CodeBlock
            Code block AST node

        """
        code_content = token.get("raw", "")
        attrs = token.get("attrs") or {}
        info_string = (attrs.get("info") or "").strip()
        marker = token.get("marker") or ""

        metadata: dict[str, Any] = {}
        language = None
        if info_string:
            metadata["info_string"] = info_string
            language = info_string.split(maxsplit=1)[0]

        location = None
        if marker:
            pattern = re.compile(r"^ {0,3}" + re.escape(marker) + r"[ \t]*" + re.escape(info_string), re.M)
            location = self._locate(pattern)
        else:
            metadata["indented"] = True

        return CodeBlock(
            content=code_content,
            language=language,
            fence_char=marker[0] if marker else "`",
            fence_length=len(marker) if marker else 3,
            metadata=metadata,
            source_location=location,
        )

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}

        children = token.get("children", [])
        if not isinstance(children, list):
            children = []

        items = [self._process_list_item(child) for child in children if isinstance(child, dict)]
        return List(
            ordered=attrs.get("ordered", False),
            items=items,
            start=attrs.get("start", 1),
            tight=token.get("tight", attrs.get("tight", True)),
        )

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        task_status: Literal["checked", "unchecked"] | None = None
        if token.get("type") == "task_list_item":
            attrs = token.get("attrs", {})
            task_status = "checked" if attrs.get("checked") else "unchecked"
        return ListItem(children=self._process_tokens(token.get("children", [])), task_status=task_status)

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process table token (header row plus body rows)."""
        header = None
        rows: list[TableRow] = []
        alignments: list[Any] = []

        for row_token in token.get("children", []):
            row_type = row_token.get("type", "")
            if row_type == "table_head":
                cells = self._process_table_cells(row_token)
                header = TableRow(cells=cells, is_header=True)
                alignments = [cell.alignment for cell in cells]
            elif row_type == "table_body":
                for body_row_token in row_token.get("children", []):
                    rows.append(TableRow(cells=self._process_table_cells(body_row_token)))

        return Table(header=header, rows=rows, alignments=alignments)

    def _process_table_cells(self, row_token: dict[str, Any]) -> list[TableCell]:
        cells = []
        for cell_token in row_token.get("children", []):
            attrs = cell_token.get("attrs", {})
            cells.append(
                TableCell(
                    content=self._process_inline_tokens(cell_token.get("children", [])),
                    alignment=attrs.get("align"),
                )
            )
        return cells

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of Node
            Inline AST nodes

        """
        nodes: list[Node] = []
        if not isinstance(tokens, list):
            return nodes
        for token in tokens:
            node = self._process_inline_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _reference_location(self, title: Optional[str]) -> Optional[SourceLocation]:
        """Locate a link or image destination by its title, when it has one."""
        if not title:
            return None
        return self._locate(re.compile(r"\]\([^\n]*?" + re.escape(title)))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        """Handle link token."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        title = attrs.get("title")
        content = self._process_inline_tokens(token.get("children", []))
        return Link(
            url=attrs.get("url", ""),
            content=content,
            title=title,
            source_location=self._reference_location(title),
        )

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token; alt text is flattened from the children."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        title = attrs.get("title")
        return Image(
            url=attrs.get("url", ""),
            alt_text=_flatten_text(token.get("children", [])),
            title=title,
            source_location=self._reference_location(title),
        )

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=token.get("raw", ""))

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        """Dispatch a single inline token to its handler."""
        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "strikethrough": self._handle_strikethrough_token,
            "inline_html": self._handle_inline_html_token,
        }

        handler = handler_map.get(token.get("type", ""))
        if handler:
            return handler(token)
        return None


def _flatten_text(tokens: list[dict[str, Any]]) -> str:
    parts: list[str] = []
    for child in tokens:
        if not isinstance(child, dict):
            continue
        if "raw" in child and child.get("type") in ("text", "codespan"):
            parts.append(child["raw"])
        elif child.get("children"):
            parts.append(_flatten_text(child["children"]))
    return "".join(parts)


def markdown_to_ast(markdown_content: str, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert Markdown string to AST.

    Parameters
    ----------
    markdown_content : str
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> from mdmermaid.parsers.markdown import markdown_to_ast
    >>> doc = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownToAstConverter(options).parse(markdown_content)
