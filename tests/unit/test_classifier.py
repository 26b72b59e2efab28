#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for diagram node classification."""

from pathlib import Path

import pytest

from mdmermaid.ast import CodeBlock, Image, Link, SourceLocation, Text
from mdmermaid.options import MermaidOptions
from mdmermaid.transforms.classifier import (
    DiagramMode,
    classify_code_block,
    classify_reference,
    diagram_source,
    is_diagram_language,
    is_rendered_artifact,
    is_sentinel_title,
    parse_mode,
)


def mermaid_block(info: str, content: str = "graph TD; A-->B\n") -> CodeBlock:
    return CodeBlock(
        content=content,
        language=info.split()[0] if info else None,
        metadata={"info_string": info} if info else {},
    )


@pytest.mark.unit
class TestLanguageMatching:
    """Test word-boundary matching of the language token."""

    @pytest.mark.parametrize(
        "info",
        ["mermaid", "mermaid inline", "mermaid comment inline", "diagram mermaid", "mermaid{theme=dark}"],
    )
    def test_matches(self, info):
        assert is_diagram_language(info)

    @pytest.mark.parametrize("info", ["", None, "python", "mermaidjs", "notmermaid", "mermaid_v2", "mermaid9"])
    def test_does_not_match(self, info):
        assert not is_diagram_language(info)


@pytest.mark.unit
class TestModeParsing:
    """Test modifier parsing."""

    def test_plain(self):
        assert parse_mode("mermaid", MermaidOptions()) == DiagramMode()

    def test_inline_modifier(self):
        mode = parse_mode("mermaid inline", MermaidOptions())
        assert mode.inline and not mode.wrap_in_comment

    def test_comment_modifier(self):
        mode = parse_mode("mermaid comment", MermaidOptions())
        assert mode.wrap_in_comment and not mode.inline

    def test_modifiers_in_any_order(self):
        mode = parse_mode("mermaid comment inline", MermaidOptions())
        assert mode.inline and mode.wrap_in_comment

    def test_modifier_needs_word_boundary(self):
        mode = parse_mode("mermaid inlined commentary", MermaidOptions())
        assert not mode.inline
        assert not mode.wrap_in_comment

    def test_simple_option_sets_div(self):
        assert parse_mode("mermaid", MermaidOptions(simple=True)).render_as_div


@pytest.mark.unit
class TestClassifyCodeBlock:
    """Test code block classification."""

    def test_non_diagram_returns_none(self):
        assert classify_code_block(mermaid_block("python"), MermaidOptions()) is None

    def test_block_without_info_returns_none(self):
        assert classify_code_block(CodeBlock(content="graph TD; A-->B\n"), MermaidOptions()) is None

    def test_request_fields(self):
        node = mermaid_block("mermaid inline", "graph TD; A-->B\n\n")
        node.source_location = SourceLocation(format="markdown", line=7)
        request = classify_code_block(node, MermaidOptions(image_dir="img"), Path("out"))

        assert request is not None
        assert request.source == "graph TD; A-->B"
        assert request.info_string == "mermaid inline"
        assert request.mode.inline
        assert request.destination_dir == Path("out")
        assert request.image_dir == "img"
        assert request.location.line == 7

    def test_diagram_source_strips_only_trailing_newlines(self):
        node = CodeBlock(content="  graph TD\n    A-->B\n\n")
        assert diagram_source(node) == "  graph TD\n    A-->B"

    def test_language_falls_back_when_no_info_metadata(self):
        node = CodeBlock(content="graph TD; A-->B\n", language="mermaid")
        request = classify_code_block(node, MermaidOptions())
        assert request is not None
        assert request.info_string == "mermaid"


@pytest.mark.unit
class TestClassifyReference:
    """Test link and image classification."""

    def test_sentinel_title_is_exact(self):
        assert is_sentinel_title("mermaid:")
        assert not is_sentinel_title("mermaid")
        assert not is_sentinel_title(" mermaid:")
        assert not is_sentinel_title("Mermaid:")
        assert not is_sentinel_title(None)

    def test_link_with_sentinel(self):
        link = Link(url="diagrams/flow.mmd", content=[Text(content="flow")], title="mermaid:")
        request = classify_reference(link, MermaidOptions())
        assert request is not None
        assert request.source == "diagrams/flow.mmd"
        assert not request.mode.render_as_div

    def test_image_without_sentinel(self):
        image = Image(url="flow.mmd", alt_text="flow", title="A flow chart")
        assert classify_reference(image, MermaidOptions()) is None

    def test_rendered_artifact_is_skipped(self):
        digest = "0123456789abcdef0123456789abcdef01234567"
        assert is_rendered_artifact(f"images/{digest}.svg")
        assert not is_rendered_artifact("images/flow.svg")
        link = Link(url=f"{digest}.png", content=[Text(content="flow")], title="mermaid:")
        assert classify_reference(link, MermaidOptions()) is None

    def test_url_is_percent_decoded(self):
        image = Image(url="my%20diagram.mmd", title="mermaid:")
        request = classify_reference(image, MermaidOptions(simple=True))
        assert request.source == "my diagram.mmd"
        assert request.mode.render_as_div
