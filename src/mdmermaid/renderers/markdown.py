#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/renderers/markdown.py
"""Markdown rendering from AST.

This module serializes a document tree back to markdown text. Output is
deterministic (the same tree always produces the same text) and raw HTML
is written verbatim, which is what makes a transformed document a fixed
point: parsing and re-rendering it leaves it unchanged, so the content
digests recorded in it stay valid.

Container blocks (block quotes, list items) render their children to a
string first and then prefix every line, so multi-line children such as
fenced code blocks and HTML wrappers keep their structure at any depth.

"""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Union

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
    NodeVisitor,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdmermaid.options.markdown import MarkdownRendererOptions
from mdmermaid.utils.io_utils import write_content

_URL_NEEDS_BRACKETS = re.compile(r"[\s()]")


def _longest_run(text: str, char: str) -> int:
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _prefix_lines(text: str, first: str, rest: str, blank: str = "") -> str:
    """Prefix the first line with ``first`` and later lines with ``rest``.

    Blank lines after the first become ``blank``.

    """
    lines = text.split("\n")
    out = [first + lines[0] if lines[0] else first.rstrip()]
    for line in lines[1:]:
        out.append(rest + line if line else blank)
    return "\n".join(out)


class MarkdownRenderer(NodeVisitor):
    """Render AST nodes to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from mdmermaid.ast import Document, Heading, Text
        >>> renderer = MarkdownRenderer()
        >>> renderer.render_to_string(Document(children=[Heading(level=1, content=[Text(content="Title")])]))
        '# Title\\n'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        self.options: MarkdownRendererOptions = options or MarkdownRendererOptions()
        self._output: list[str] = []
        self._list_depth: int = 0

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to a markdown string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text ending with exactly one newline, or an empty
            string for an empty document

        """
        self._output = []
        self._list_depth = 0

        document.accept(self)
        result = "".join(self._output).rstrip("\n")
        self._output.clear()
        return result + "\n" if result else ""

    def render(self, doc: Document, output: Union[str, Path, IO[str]]) -> None:
        """Render AST to markdown and write to a file path or text stream."""
        write_content(self.render_to_string(doc), output)

    def _capture(self, node: Node) -> str:
        """Render a single node into a string without touching the main output."""
        saved_output = self._output
        self._output = []
        node.accept(self)
        captured = "".join(self._output)
        self._output = saved_output
        return captured

    def _render_blocks(self, children: list[Node], separator: str = "\n\n") -> str:
        parts = [self._capture(child) for child in children]
        return separator.join(part for part in parts if part)

    def _render_inline_content(self, nodes: list[Node]) -> str:
        return "".join(self._capture(node) for node in nodes)

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        Backslash, backticks, asterisks, braces and brackets are always
        escaped; ``#`` only at the start of the text, ``<`` only where it
        could open a tag, and ``_`` only at word boundaries (``snake_case``
        is left alone).

        """
        if not self.options.escape_special:
            return text

        always_escape = "\\`*{}[]"
        escaped_chars = []
        for i, char in enumerate(text):
            if char in always_escape:
                escaped_chars.append("\\" + char)
            elif char == "#" and i == 0:
                escaped_chars.append("\\#")
            elif char == "<" and i < len(text) - 1 and (text[i + 1].isalpha() or text[i + 1] in "/!?"):
                escaped_chars.append("\\<")
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                escaped_chars.append(char if prev_alnum and next_alnum else "\\_")
            else:
                escaped_chars.append(char)
        return "".join(escaped_chars)

    def _format_destination(self, url: str, title: str | None) -> str:
        destination = f"<{url}>" if not url or _URL_NEEDS_BRACKETS.search(url) else url
        if title is not None and title != "":
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'{destination} "{escaped_title}"'
        return destination

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render front matter (if any) followed by the block children."""
        frontmatter = self._render_frontmatter(node)
        body = self._render_blocks(node.children)
        if frontmatter and body:
            self._output.append(f"{frontmatter}\n\n{body}")
        else:
            self._output.append(frontmatter or body)

    def _render_frontmatter(self, node: Document) -> str:
        """Return the verbatim front matter block, or dump parsed front matter."""
        raw = node.metadata.get("frontmatter_raw")
        if raw:
            return str(raw).rstrip("\n")
        data = node.metadata.get("frontmatter")
        if data:
            dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
            return f"---\n{dumped}\n---"
        return ""

    def visit_heading(self, node: Heading) -> None:
        content = self._render_inline_content(node.content)
        self._output.append(f"{'#' * node.level} {content}".rstrip())

    def visit_paragraph(self, node: Paragraph) -> None:
        self._output.append(self._render_inline_content(node.content))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a fenced block.

        The fence is longer than any run of the fence character inside the
        content, and the full info string (language plus modifiers) is kept.

        Parameters
        ----------
        node : CodeBlock
            Code block to render

        """
        info = node.info_string
        fence_char = self.options.code_fence_char
        if fence_char == "`" and "`" in info:
            # Backtick fences cannot carry an info string containing backticks
            fence_char = "~"

        fence_length = max(self.options.code_fence_min, _longest_run(node.content, fence_char) + 1)
        fence = fence_char * fence_length

        body = node.content
        if body and not body.endswith("\n"):
            body += "\n"
        self._output.append(f"{fence}{info}\n{body}{fence}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        quoted = self._render_blocks(node.children)
        self._output.append(_prefix_lines(quoted, "> ", "> ", blank=">") if quoted else ">")

    def visit_list(self, node: List) -> None:
        """Render a List node; nested lists cycle through the bullet symbols."""
        symbols = self.options.bullet_symbols
        bullet = symbols[self._list_depth % len(symbols)]
        separator = "\n" if node.tight else "\n\n"

        self._list_depth += 1
        rendered_items = []
        for i, item in enumerate(node.items):
            marker = f"{node.start + i}. " if node.ordered else f"{bullet} "
            rendered_items.append(self._render_list_item(item, marker, node.tight))
        self._list_depth -= 1

        self._output.append(separator.join(rendered_items))

    def _render_list_item(self, item: ListItem, marker: str, tight: bool) -> str:
        # Continuation lines align with the item content, which starts before the checkbox
        indent = " " * max(len(marker), self.options.list_indent_width)
        if item.task_status:
            marker = f"{marker}[{'x' if item.task_status == 'checked' else ' '}] "
        body = self._render_blocks(item.children, "\n" if tight else "\n\n")
        if not body:
            return marker.rstrip()
        return _prefix_lines(body, marker, indent)

    def visit_list_item(self, node: ListItem) -> None:
        # Reached only when a ListItem is rendered outside a List
        self._output.append(self._render_list_item(node, f"{self.options.bullet_symbols[0]} ", True))

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a GFM pipe table."""
        rows = ([node.header] if node.header is not None else []) + list(node.rows)
        if not rows:
            return
        num_cols = max(len(row.cells) for row in rows)
        if num_cols == 0:
            return

        def render_row(row: TableRow) -> str:
            cells = [self._capture(cell) for cell in row.cells]
            cells.extend([""] * (num_cols - len(cells)))
            return "| " + " | ".join(cells) + " |"

        alignments = list(node.alignments) + [None] * (num_cols - len(node.alignments))
        separators = {"left": ":---", "center": ":---:", "right": "---:"}
        align_row = "| " + " | ".join(separators.get(a or "", "---") for a in alignments[:num_cols]) + " |"

        header = node.header if node.header is not None else TableRow(cells=[TableCell() for _ in range(num_cols)])
        lines = [render_row(header), align_row]
        lines.extend(render_row(row) for row in node.rows)
        self._output.append("\n".join(lines))

    def visit_table_row(self, node: TableRow) -> None:
        self._output.append(" | ".join(self._capture(cell) for cell in node.cells))

    def visit_table_cell(self, node: TableCell) -> None:
        self._output.append(self._render_inline_content(node.content).replace("|", "\\|").replace("\n", " "))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        # "---" at the top of a document would be read back as front matter
        self._output.append("***")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Write raw HTML verbatim, minus trailing newlines."""
        self._output.append(node.content.rstrip("\n"))

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._output.append(self._escape_markdown(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        symbol = self.options.emphasis_symbol
        self._output.append(f"{symbol}{self._render_inline_content(node.content)}{symbol}")

    def visit_strong(self, node: Strong) -> None:
        symbol = self.options.emphasis_symbol * 2
        self._output.append(f"{symbol}{self._render_inline_content(node.content)}{symbol}")

    def visit_code(self, node: Code) -> None:
        """Render inline code with a delimiter longer than any backtick run inside."""
        backticks = "`" * (_longest_run(node.content, "`") + 1)
        content = node.content
        if content.startswith("`") or content.endswith("`"):
            content = f" {content} "
        self._output.append(f"{backticks}{content}{backticks}")

    def visit_link(self, node: Link) -> None:
        content = self._render_inline_content(node.content)
        self._output.append(f"[{content}]({self._format_destination(node.url, node.title)})")

    def visit_image(self, node: Image) -> None:
        alt = node.alt_text.replace("[", "\\[").replace("]", "\\]")
        self._output.append(f"![{alt}]({self._format_destination(node.url, node.title)})")

    def visit_line_break(self, node: LineBreak) -> None:
        self._output.append("\n" if node.soft else "\\\n")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        self._output.append(f"~~{self._render_inline_content(node.content)}~~")

    def visit_html_inline(self, node: HTMLInline) -> None:
        self._output.append(node.content)


def ast_to_markdown(document: Document, options: MarkdownRendererOptions | None = None) -> str:
    """Serialize a document tree to markdown text.

    Parameters
    ----------
    document : Document
        Tree to serialize
    options : MarkdownRendererOptions or None, default = None
        Rendering options

    Returns
    -------
    str
        Markdown text

    """
    return MarkdownRenderer(options).render_to_string(document)
