#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for mdmermaid.

This module centralizes the fixed markers, bit-exact wrapper markup pieces and
default configuration values used across the package.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Diagram Markers - strings that identify diagram nodes and prior renderings
3. Mermaid CLI Defaults - settings for the external renderer
4. Markdown Formatting - settings for the markdown serializer
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

DiagramFormat = Literal["svg", "png"]
CodeFenceChar = Literal["`", "~"]
EmphasisSymbol = Literal["*", "_"]

# =============================================================================
# Diagram Markers
# =============================================================================

# Name reported as the origin of every diagnostic.
PLUGIN_NAME = "mdmermaid"

# HMAC key for content digests. Changing it renames every rendered artifact.
DIGEST_KEY = "remark-mermaid"

# Language token that marks a fenced code block as a diagram.
MERMAID_LANGUAGE_PATTERN = r"\bmermaid\b"
INLINE_MODIFIER_PATTERN = r"\binline\b"
COMMENT_MODIFIER_PATTERN = r"\bcomment\b"

# Title a link or image must carry (exactly) to be treated as a diagram reference.
SENTINEL_TITLE = "mermaid:"

# File name of a rendered diagram ("<digest>.<format>"); references to one are already done.
ARTIFACT_NAME_PATTERN = r"^[0-9a-f]{40}\.(svg|png)$"

# Title of the image node that replaces a rendered code block.
RENDERED_IMAGE_TITLE = "`mermaid` image"

# Summary wrapper markup.
SUMMARY_LABEL = "Mermaid source"
DIGEST_ATTRIBUTE = "data-mermaid-hash"
DETAILS_OPEN_TEMPLATE = '<details {attribute}="{digest}"><summary>{label}</summary>'
DETAILS_CLOSE = "</details>"
DETAILS_OPEN_PATTERN = r"^<details.*?><summary>Mermaid source</summary>$"
DIGEST_ATTRIBUTE_PATTERN = r'data-mermaid-hash="([0-9a-f]*)"'

# Client-side rendering container.
MERMAID_DIV_TEMPLATE = '<div class="mermaid">\n{source}\n</div>'

# =============================================================================
# Mermaid CLI Defaults
# =============================================================================

DEFAULT_MMDC_EXECUTABLE = "mmdc"
DEFAULT_DIAGRAM_FORMAT: DiagramFormat = "svg"
DEFAULT_BACKGROUND = "transparent"
DEFAULT_RENDER_TIMEOUT = 60.0
MMDC_ENV_VAR = "MDMERMAID_MMDC"

DIAGRAM_MEDIA_TYPES: dict[str, str] = {
    "svg": "image/svg+xml",
    "png": "image/png",
}

# =============================================================================
# Markdown Formatting
# =============================================================================

DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_BULLET_SYMBOLS = "-*+"
DEFAULT_LIST_INDENT_WIDTH = 2
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_PARSE_FRONTMATTER = True
DEFAULT_PARSE_STRIKETHROUGH = True

MARKDOWN_EXTENSIONS = [".md", ".markdown", ".mdown", ".mkd", ".mkdn"]
