#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the markdown parser and renderer collaborators."""

from pathlib import Path

import pytest

from mdmermaid.ast import (
    BlockQuote,
    CodeBlock,
    Document,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Table,
    Text,
)
from mdmermaid.exceptions import FileAccessError
from mdmermaid.options import MarkdownParserOptions
from mdmermaid.parsers import MarkdownToAstConverter, markdown_to_ast
from mdmermaid.renderers import MarkdownRenderer, ast_to_markdown


def roundtrip(text: str) -> str:
    return ast_to_markdown(markdown_to_ast(text))


@pytest.mark.unit
class TestParser:
    """Test markdown parsing."""

    def test_fenced_code_block_keeps_info_string(self):
        doc = markdown_to_ast("```mermaid inline comment\ngraph TD; A-->B\n```\n")
        block = doc.children[0]

        assert isinstance(block, CodeBlock)
        assert block.language == "mermaid"
        assert block.info_string == "mermaid inline comment"
        assert block.content == "graph TD; A-->B\n"
        assert block.fence_char == "`"
        assert block.fence_length == 3

    def test_tilde_fence(self):
        block = markdown_to_ast("~~~~mermaid\ngraph TD; A-->B\n~~~~\n").children[0]
        assert block.fence_char == "~"
        assert block.fence_length == 4

    def test_code_block_line_numbers(self):
        text = "# Title\n\nText\n\n```mermaid\ngraph TD; A-->B\n```\n\n```mermaid\ngraph TD; A-->B\n```\n"
        blocks = [c for c in markdown_to_ast(text).children if isinstance(c, CodeBlock)]
        assert [b.source_location.line for b in blocks] == [5, 9]

    def test_line_numbers_account_for_front_matter(self):
        text = "---\ntitle: Doc\n---\n\n```mermaid\ngraph TD; A-->B\n```\n"
        block = markdown_to_ast(text).children[0]
        assert block.source_location.line == 5

    def test_front_matter(self):
        text = "---\ntitle: Doc\ntags: [a, b]\n---\n\nBody\n"
        doc = markdown_to_ast(text)
        assert doc.metadata["frontmatter"] == {"title": "Doc", "tags": ["a", "b"]}
        assert doc.metadata["frontmatter_raw"] == "---\ntitle: Doc\ntags: [a, b]\n---"

    def test_invalid_front_matter_is_kept_verbatim(self):
        text = "---\ntitle: [unclosed\n---\n\nBody\n"
        doc = markdown_to_ast(text)
        assert doc.metadata["frontmatter"] == {}
        assert roundtrip(text) == text

    def test_front_matter_disabled(self):
        doc = MarkdownToAstConverter(MarkdownParserOptions(parse_frontmatter=False)).parse("Body\n")
        assert "frontmatter" not in doc.metadata

    def test_link_and_image_titles(self):
        doc = markdown_to_ast('A [flow](flow.mmd "mermaid:") and ![seq](seq.mmd "mermaid:")\n')
        paragraph = doc.children[0]
        link = next(n for n in paragraph.content if isinstance(n, Link))
        image = next(n for n in paragraph.content if isinstance(n, Image))

        assert link.url == "flow.mmd"
        assert link.title == "mermaid:"
        assert link.source_location.line == 1
        assert image.alt_text == "seq"
        assert image.title == "mermaid:"

    def test_soft_break(self):
        paragraph = markdown_to_ast("one\ntwo\n").children[0]
        assert any(isinstance(n, LineBreak) and n.soft for n in paragraph.content)

    def test_html_block(self):
        doc = markdown_to_ast('<div class="note">\nhello\n</div>\n')
        assert isinstance(doc.children[0], HTMLBlock)

    def test_nested_containers(self):
        doc = markdown_to_ast("> - item\n>\n>   ```mermaid\n>   graph TD; A-->B\n>   ```\n")
        quote = doc.children[0]
        assert isinstance(quote, BlockQuote)
        assert isinstance(quote.children[0], List)

    def test_task_list_items(self):
        doc = markdown_to_ast("- [x] done\n- [ ] todo\n- plain\n")
        items = doc.children[0].items
        assert [item.task_status for item in items] == ["checked", "unchecked", None]
        assert isinstance(items[0], ListItem)
        assert items[0].children[0].content[0].content == "done"

    def test_table(self):
        doc = markdown_to_ast("| a | b |\n|---|:-:|\n| 1 | 2 |\n")
        table = doc.children[0]
        assert isinstance(table, Table)
        assert table.alignments == [None, "center"]
        assert len(table.rows) == 1

    def test_crlf_line_endings(self):
        doc = markdown_to_ast("```mermaid\r\ngraph TD; A-->B\r\n```\r\n")
        assert doc.children[0].content == "graph TD; A-->B\n"

    def test_parse_path(self, temp_dir):
        path = temp_dir / "doc.md"
        path.write_text("# Hi\n", encoding="utf-8")
        assert len(MarkdownToAstConverter().parse(path).children) == 1

    def test_parse_missing_path(self, temp_dir):
        with pytest.raises(FileAccessError):
            MarkdownToAstConverter().parse(Path(temp_dir / "missing.md"))


@pytest.mark.unit
class TestRenderer:
    """Test markdown serialization."""

    def test_empty_document(self):
        assert ast_to_markdown(Document()) == ""

    def test_single_trailing_newline(self):
        assert ast_to_markdown(Document(children=[Paragraph(content=[Text(content="x")])])) == "x\n"

    def test_code_block_uses_full_info_string(self):
        block = CodeBlock(content="graph TD; A-->B\n", language="mermaid", metadata={"info_string": "mermaid comment"})
        assert ast_to_markdown(Document(children=[block])) == "```mermaid comment\ngraph TD; A-->B\n```\n"

    def test_code_fence_longer_than_content_run(self):
        block = CodeBlock(content="```\ninner\n```\n", language="markdown")
        assert ast_to_markdown(Document(children=[block])).startswith("````markdown\n")

    def test_html_is_verbatim(self):
        html = '<div class="mermaid">\ngraph TD; A--&gt;B\n</div>'
        assert ast_to_markdown(Document(children=[HTMLBlock(content=html + "\n\n")])) == html + "\n"

    def test_image_title_escaping(self):
        image = Image(url="a b.svg", alt_text="", title='say "hi"')
        text = ast_to_markdown(Document(children=[Paragraph(content=[image])]))
        assert text == '![](<a b.svg> "say \\"hi\\"")\n'

    def test_render_to_file(self, temp_dir):
        target = temp_dir / "out.md"
        MarkdownRenderer().render(Document(children=[Paragraph(content=[Text(content="x")])]), target)
        assert target.read_text(encoding="utf-8") == "x\n"


@pytest.mark.unit
class TestRoundTrip:
    """Rendering a parsed document and parsing it again is stable."""

    @pytest.mark.parametrize(
        "text",
        [
            "# Title\n\nSome *emphasis* and **strong** text.\n",
            "```mermaid comment\ngraph TD; A-->B\n```\n",
            "- one\n- two\n  - nested\n",
            "1. first\n2. second\n",
            "> quoted\n>\n> ```mermaid\n> graph TD; A-->B\n> ```\n",
            '![](abc.svg "`mermaid` image")\n',
            "---\ntitle: Doc\n---\n\nBody\n",
            "Text\n\n***\n\nMore\n",
            "| a | b |\n| --- | --- |\n| 1 | 2 |\n",
            "* [x] shipped\n* [ ] *pending* work\n  - [ ] nested\n",
        ],
    )
    def test_normalized_output_is_fixed_point(self, text):
        once = roundtrip(text)
        assert roundtrip(once) == once

    def test_canonical_documents_are_unchanged(self):
        text = "# Title\n\n```mermaid comment\ngraph TD; A-->B\n```\n\n- a\n- b\n"
        assert roundtrip(text) == text

    def test_task_list_is_unchanged(self):
        text = "- [x] done\n- [ ] todo\n"
        assert roundtrip(text) == text

    def test_nested_list_under_task_item_stays_nested(self):
        text = "- [ ] parent\n  * [x] child\n"
        assert roundtrip(text) == text
        nested = markdown_to_ast(text).children[0].items[0].children[1]
        assert isinstance(nested, List)
        assert nested.items[0].task_status == "checked"
