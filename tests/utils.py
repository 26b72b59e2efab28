"""Test utilities for the mdmermaid test suite.

This module provides stand-in collaborators (renderers and file access) so
transform tests never need the real Mermaid CLI, plus small helpers for
building and inspecting documents.
"""

import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mdmermaid.ast import CodeBlock, Document, Node, get_node_children
from mdmermaid.diagrams import RenderedArtifact, RenderOptions
from mdmermaid.exceptions import DiagramRenderError, FileAccessError
from mdmermaid.hashing import artifact_reference, content_digest


@dataclass
class RenderCall:
    """One recorded call to a fake renderer."""

    source: str
    destination_dir: Path
    options: RenderOptions


@dataclass
class FakeRenderer:
    """Renderer that never runs a program.

    References are the real content-addressed names, so documents produced
    with it behave exactly like documents produced with ``mmdc``. Sources
    containing any string in ``fail_on`` raise ``DiagramRenderError``.
    """

    fail_on: tuple[str, ...] = ()
    calls: list[RenderCall] = field(default_factory=list)

    def render(self, source: str, destination_dir: Path, options: RenderOptions) -> RenderedArtifact:
        self.calls.append(RenderCall(source, Path(destination_dir), options))
        for marker in self.fail_on:
            if marker in source:
                raise DiagramRenderError("mmdc exited with status 1", source=source, underlying_output="Parse error")
        if options.inline:
            return RenderedArtifact(
                reference=f"data:image/svg+xml;base64,{content_digest(source)}", inline=True, media_type="image/svg+xml"
            )
        return RenderedArtifact(
            reference=artifact_reference(source, "svg", options.image_dir), inline=False, media_type="image/svg+xml"
        )

    @property
    def sources(self) -> list[str]:
        return [call.source for call in self.calls]


class InMemoryFileAccess:
    """File access backed by a dict of POSIX path strings to text."""

    def __init__(self, files: Optional[dict[str, str]] = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.directories: list[Path] = []

    def read_text(self, path: Path) -> str:
        key = Path(path).as_posix()
        if key not in self.files:
            raise FileAccessError(key, original_error=FileNotFoundError(key))
        return self.files[key]

    def write_text(self, path: Path, text: str) -> None:
        self.files[Path(path).as_posix()] = text

    def ensure_directory(self, path: Path) -> None:
        self.directories.append(Path(path))


def iter_nodes(node: Node):
    """Yield ``node`` and all of its descendants in pre-order."""
    yield node
    for child in get_node_children(node):
        yield from iter_nodes(child)


def code_blocks(document: Document) -> list[CodeBlock]:
    return [node for node in iter_nodes(document) if isinstance(node, CodeBlock)]


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


FAKE_SVG = b"<svg xmlns='http://www.w3.org/2000/svg'></svg>"


class FakeMmdc:
    """Stand-in for ``subprocess.run`` that mimics ``mmdc``."""

    def __init__(self, returncode=0, stderr="", write_output=True, exception=None):
        self.returncode = returncode
        self.stderr = stderr
        self.write_output = write_output
        self.exception = exception
        self.commands: list[list[str]] = []
        self.inputs: list[tuple[Path, str]] = []

    def __call__(self, command, **kwargs):
        self.commands.append(command)
        input_path = Path(command[command.index("-i") + 1])
        self.inputs.append((input_path, input_path.read_text(encoding="utf-8")))
        if self.exception is not None:
            raise self.exception
        if self.write_output:
            Path(command[command.index("-o") + 1]).write_bytes(FAKE_SVG)
        return subprocess.CompletedProcess(command, self.returncode, stdout="", stderr=self.stderr)
