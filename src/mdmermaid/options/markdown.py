#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering.

These options drive the markdown collaborators that surround the diagram
transform: the mistune-based parser and the AST-to-markdown serializer.
"""
# src/mdmermaid/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from mdmermaid.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_LIST_INDENT_WIDTH,
    DEFAULT_PARSE_FRONTMATTER,
    DEFAULT_PARSE_STRIKETHROUGH,
    CodeFenceChar,
    EmphasisSymbol,
)
from mdmermaid.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class MarkdownParserOptions(CloneFrozenMixin):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    parse_frontmatter : bool, default True
        Whether to split a leading YAML front matter block (``---``) off the
        document and expose it as document metadata.
    parse_strikethrough : bool, default True
        Whether to parse strikethrough syntax (~~text~~).

    """

    parse_frontmatter: bool = field(
        default=DEFAULT_PARSE_FRONTMATTER,
        metadata={"help": "Parse YAML front matter into document metadata", "cli_name": "no-parse-frontmatter"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={"help": "Parse strikethrough syntax (~~text~~)", "cli_name": "no-parse-strikethrough"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(CloneFrozenMixin):
    r"""Markdown rendering options for converting AST to Markdown text.

    Parameters
    ----------
    escape_special : bool, default True
        Whether to escape special Markdown characters in text content.
    emphasis_symbol : {"\*", "\_"}, default "\*"
        Symbol to use for emphasis/italic formatting.
    bullet_symbols : str, default "-\*+"
        Characters to cycle through for nested bullet lists.
    list_indent_width : int, default 2
        Spaces per nesting level for list continuation lines.
    code_fence_char : {"`", "~"}, default "`"
        Character used for code fences.
    code_fence_min : int, default 3
        Minimum fence length. Fences grow past any run of the fence
        character found in the block.

    """

    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape special Markdown characters in text", "cli_name": "no-escape-special"},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol for emphasis/italic formatting", "choices": ["*", "_"]},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Bullet characters for nested lists"},
    )
    list_indent_width: int = field(
        default=DEFAULT_LIST_INDENT_WIDTH,
        metadata={"help": "Spaces per list nesting level", "type": int},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character for code fences", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges for renderer options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
        if self.list_indent_width < 1:
            raise ValueError(f"list_indent_width must be positive, got {self.list_indent_width}")
        if not self.bullet_symbols:
            raise ValueError("bullet_symbols must not be empty")
