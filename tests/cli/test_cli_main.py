#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the mdmermaid command line entry point.

``mmdc`` is never run: tests either use ``--simple`` or replace
``subprocess.run`` with :class:`utils.FakeMmdc`.
"""

from unittest.mock import patch

import pytest
from utils import FAKE_SVG, FakeMmdc, cleanup_test_dir, create_test_temp_dir

from mdmermaid.cli import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_FILE_ERROR,
    EXIT_RENDER_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    main,
)
from mdmermaid.exceptions import StructuralInvariantError
from mdmermaid.hashing import artifact_name

DOCUMENT = "# Doc\n\n```mermaid\ngraph TD; A-->B\n```\n"
SOURCE = "graph TD; A-->B"

pytestmark = pytest.mark.usefixtures("restore_root_logger")


@pytest.mark.cli
class TestCLIOutput:
    """Where the transformed markdown goes."""

    def setup_method(self):
        self.temp_dir = create_test_temp_dir()
        self.doc = self.temp_dir / "doc.md"
        self.doc.write_text(DOCUMENT, encoding="utf-8")

    def teardown_method(self):
        cleanup_test_dir(self.temp_dir)

    def test_stdout_by_default(self, capsys):
        assert main([str(self.doc), "--simple"]) == EXIT_SUCCESS

        captured = capsys.readouterr()
        assert captured.out.startswith("# Doc\n\n<div class=\"mermaid\">\ngraph TD; A--&gt;B\n</div>")
        assert "info: mermaid code block replaced with div [mdmermaid]" in captured.err
        assert self.doc.read_text(encoding="utf-8") == DOCUMENT

    def test_out_file(self, capsys):
        out = self.temp_dir / "out.md"
        assert main([str(self.doc), "--simple", "-o", str(out)]) == EXIT_SUCCESS

        assert capsys.readouterr().out == ""
        assert '<div class="mermaid">' in out.read_text(encoding="utf-8")

    def test_in_place(self):
        assert main([str(self.doc), "--simple", "--in-place"]) == EXIT_SUCCESS
        assert '<div class="mermaid">' in self.doc.read_text(encoding="utf-8")

    def test_check_reports_pending_changes(self, capsys):
        assert main([str(self.doc), "--simple", "--check"]) == EXIT_RENDER_ERROR
        assert "would be changed" in capsys.readouterr().err
        assert self.doc.read_text(encoding="utf-8") == DOCUMENT

    def test_check_passes_on_transformed_document(self):
        assert main([str(self.doc), "--simple", "--in-place"]) == EXIT_SUCCESS
        assert main([str(self.doc), "--simple", "--check"]) == EXIT_SUCCESS

    def test_rich_diagnostics(self, capsys):
        assert main([str(self.doc), "--simple", "--rich"]) == EXIT_SUCCESS
        err = capsys.readouterr().err
        assert "Diagrams in" in err
        assert "Location" in err

    def test_diagnostics_not_repeated_as_log_records(self, capsys):
        assert main([str(self.doc), "--simple", "--log-level", "INFO"]) == EXIT_SUCCESS
        err = capsys.readouterr().err
        assert err.count("mermaid code block replaced with div") == 1
        assert "Transforming" in err

    def test_log_file(self):
        log_file = self.temp_dir / "run.log"
        assert main([str(self.doc), "--simple", "--log-level", "INFO", "--log-file", str(log_file)]) == EXIT_SUCCESS
        assert "Transforming" in log_file.read_text(encoding="utf-8")


@pytest.mark.cli
class TestCLIRendering:
    """Runs that call the Mermaid CLI."""

    def setup_method(self):
        self.temp_dir = create_test_temp_dir()
        self.doc = self.temp_dir / "doc.md"
        self.doc.write_text(DOCUMENT, encoding="utf-8")

    def teardown_method(self):
        cleanup_test_dir(self.temp_dir)

    def test_images_written_next_to_output(self, monkeypatch):
        fake = FakeMmdc()
        monkeypatch.setattr("mdmermaid.diagrams.subprocess.run", fake)
        site = self.temp_dir / "site"
        site.mkdir()

        exit_code = main(
            [str(self.doc), "-o", str(site / "doc.md"), "--image-dir", "img", "--mmdc", "/opt/mmdc", "--theme", "dark"]
        )

        assert exit_code == EXIT_SUCCESS
        assert (site / "img" / artifact_name(SOURCE, "svg")).read_bytes() == FAKE_SVG
        assert f"img/{artifact_name(SOURCE, 'svg')}" in (site / "doc.md").read_text(encoding="utf-8")
        assert fake.commands[0][0] == "/opt/mmdc"
        assert "-t" in fake.commands[0]

    def test_mmdc_from_environment(self, monkeypatch):
        fake = FakeMmdc()
        monkeypatch.setattr("mdmermaid.diagrams.subprocess.run", fake)
        monkeypatch.setenv("MDMERMAID_MMDC", "/env/bin/mmdc")

        assert main([str(self.doc), "--in-place"]) == EXIT_SUCCESS
        assert fake.commands[0][0] == "/env/bin/mmdc"

    def test_render_failure(self, monkeypatch, capsys):
        fake = FakeMmdc(returncode=1, stderr="Parse error on line 1", write_output=False)
        monkeypatch.setattr("mdmermaid.diagrams.subprocess.run", fake)

        assert main([str(self.doc), "--in-place", "--mmdc", "/opt/mmdc"]) == EXIT_RENDER_ERROR

        err = capsys.readouterr().err
        assert ":3:" in err
        assert "error:" in err
        assert self.doc.read_text(encoding="utf-8") == DOCUMENT

    def test_missing_mmdc(self, monkeypatch, capsys):
        monkeypatch.delenv("MDMERMAID_MMDC", raising=False)
        monkeypatch.setattr("mdmermaid.diagrams.shutil.which", lambda name: None)

        assert main([str(self.doc)]) == EXIT_DEPENDENCY_ERROR
        assert "mermaid-cli" in capsys.readouterr().err

    def test_missing_mmdc_irrelevant_in_simple_mode(self, monkeypatch):
        monkeypatch.delenv("MDMERMAID_MMDC", raising=False)
        monkeypatch.setattr("mdmermaid.diagrams.shutil.which", lambda name: None)

        assert main([str(self.doc), "--simple"]) == EXIT_SUCCESS


@pytest.mark.cli
class TestCLIErrors:
    """Exit codes for invalid invocations."""

    def setup_method(self):
        self.temp_dir = create_test_temp_dir()
        self.doc = self.temp_dir / "doc.md"
        self.doc.write_text(DOCUMENT, encoding="utf-8")

    def teardown_method(self):
        cleanup_test_dir(self.temp_dir)

    def test_missing_input(self, capsys):
        assert main([str(self.temp_dir / "nope.md"), "--simple"]) == EXIT_FILE_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_unwritable_log_file(self, capsys):
        log_file = self.temp_dir / "missing" / "run.log"
        assert main([str(self.doc), "--simple", "--log-file", str(log_file)]) == EXIT_FILE_ERROR
        assert "Could not open log file" in capsys.readouterr().err

    def test_invalid_image_dir(self, capsys):
        assert main([str(self.doc), "--image-dir", "../outside"]) == EXIT_VALIDATION_ERROR
        assert "Error:" in capsys.readouterr().err

    @pytest.mark.parametrize("timeout", ["0", "-1", "soon"])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(SystemExit) as exc_info:
            main([str(self.doc), "--timeout", timeout])
        assert exc_info.value.code == 2

    def test_output_modes_are_exclusive(self):
        with pytest.raises(SystemExit) as exc_info:
            main([str(self.doc), "--check", "--in-place"])
        assert exc_info.value.code == 2

    def test_transform_error(self, capsys):
        with patch("mdmermaid.cli.transform_file", side_effect=StructuralInvariantError("bad edit")):
            assert main([str(self.doc), "--simple"]) == EXIT_RENDER_ERROR
        assert "bad edit" in capsys.readouterr().err
