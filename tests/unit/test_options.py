#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for option dataclasses and diagnostics."""

import dataclasses
import logging

import pytest

from mdmermaid.ast import SourceLocation
from mdmermaid.diagnostics import Diagnostic, DiagnosticLevel, DiagnosticLog
from mdmermaid.exceptions import ValidationError
from mdmermaid.options import MarkdownParserOptions, MarkdownRendererOptions, MermaidOptions


@pytest.mark.unit
class TestMermaidOptions:
    """Test MermaidOptions defaults and validation."""

    def test_defaults(self):
        options = MermaidOptions()
        assert options.simple is False
        assert options.image_dir is None
        assert options.output_format == "svg"
        assert options.background == "transparent"
        assert options.timeout == 60.0
        assert options.media_type == "image/svg+xml"

    def test_frozen(self):
        options = MermaidOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.simple = True  # type: ignore[misc]

    def test_create_updated(self):
        options = MermaidOptions(image_dir="img")
        updated = options.create_updated(simple=True)
        assert updated.simple is True
        assert updated.image_dir == "img"
        assert options.simple is False

    def test_create_updated_validates(self):
        with pytest.raises(ValidationError):
            MermaidOptions().create_updated(timeout=-1)

    def test_invalid_format(self):
        with pytest.raises(ValidationError) as exc_info:
            MermaidOptions(output_format="gif")  # type: ignore[arg-type]
        assert exc_info.value.parameter_name == "output_format"

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValidationError):
            MermaidOptions(timeout=timeout)

    @pytest.mark.parametrize("image_dir", ["/abs/images", "../images", "docs/../../images", "C:\\images"])
    def test_image_dir_must_be_relative(self, image_dir):
        with pytest.raises(ValidationError):
            MermaidOptions(image_dir=image_dir)

    @pytest.mark.parametrize("image_dir", ["images", "docs/images", "./images"])
    def test_relative_image_dir_accepted(self, image_dir):
        assert MermaidOptions(image_dir=image_dir).image_dir == image_dir

    def test_fields_carry_help(self):
        for field in dataclasses.fields(MermaidOptions):
            assert field.metadata.get("help"), field.name


@pytest.mark.unit
class TestMarkdownOptions:
    """Test markdown collaborator options."""

    def test_parser_defaults(self):
        options = MarkdownParserOptions()
        assert options.parse_frontmatter
        assert options.parse_strikethrough

    def test_renderer_defaults(self):
        options = MarkdownRendererOptions()
        assert options.code_fence_char == "`"
        assert options.code_fence_min == 3


@pytest.mark.unit
class TestDiagnostics:
    """Test diagnostic records and the log."""

    def test_str_with_location(self):
        diagnostic = Diagnostic(DiagnosticLevel.ERROR, "boom", SourceLocation("markdown", line=3, column=1))
        assert str(diagnostic) == "3:1: error: boom [mdmermaid]"

    def test_str_without_location(self):
        assert str(Diagnostic(DiagnosticLevel.INFO, "done")) == "info: done [mdmermaid]"

    def test_log_collects_in_order(self):
        log = DiagnosticLog()
        log.info("first")
        log.error("second")
        log.info("third")

        assert [d.message for d in log] == ["first", "second", "third"]
        assert len(log) == 3
        assert log.has_errors
        assert [d.message for d in log.errors] == ["second"]

    def test_empty_log(self):
        log = DiagnosticLog()
        assert not log.has_errors
        assert log.as_list() == []

    def test_diagnostics_are_logged(self, caplog):
        log = DiagnosticLog()
        with caplog.at_level(logging.INFO, logger="mdmermaid.diagnostics"):
            log.info("rendered")
            log.error("failed")

        levels = [record.levelno for record in caplog.records if record.name == "mdmermaid.diagnostics"]
        assert levels == [logging.INFO, logging.ERROR]

    def test_snapshot_is_a_copy(self):
        log = DiagnosticLog()
        log.info("x")
        snapshot = log.as_list()
        log.info("y")
        assert len(snapshot) == 1
