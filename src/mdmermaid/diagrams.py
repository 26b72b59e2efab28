#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Diagram renderer contract and the Mermaid CLI implementation.

The transform only depends on the :class:`DiagramRenderer` protocol: given
diagram source text, a destination directory and per-diagram options, a
renderer returns a :class:`RenderedArtifact` or raises
:class:`~mdmermaid.exceptions.DiagramRenderError`.

:class:`MermaidCliRenderer` fulfils the contract by shelling out to
``mmdc`` (``@mermaid-js/mermaid-cli``).
"""

from __future__ import annotations

import base64
import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from mdmermaid.constants import DEFAULT_MMDC_EXECUTABLE
from mdmermaid.exceptions import DependencyError, DiagramRenderError, FileAccessError
from mdmermaid.hashing import artifact_name, artifact_reference, content_digest
from mdmermaid.options.mermaid import MermaidOptions
from mdmermaid.utils.decorators import debug_timer
from mdmermaid.utils.io_utils import FileAccess, LocalFileAccess

logger = logging.getLogger(__name__)

MMDC_INSTALL_HINT = "npm install -g @mermaid-js/mermaid-cli"


@dataclass(frozen=True)
class RenderOptions:
    """Per-diagram rendering choices.

    Parameters
    ----------
    inline : bool, default False
        Return the image as a ``data:`` URI instead of writing a file
    image_dir : str or None, default None
        Folder below the destination directory for written images

    """

    inline: bool = False
    image_dir: Optional[str] = None


@dataclass(frozen=True)
class RenderedArtifact:
    """Result of rendering one diagram.

    ``reference`` is a relative POSIX path when ``inline`` is False, and a
    self-contained ``data:`` URI when it is True.
    """

    reference: str
    inline: bool
    media_type: str


@runtime_checkable
class DiagramRenderer(Protocol):
    """Anything that can turn diagram source into an image reference."""

    def render(self, source: str, destination_dir: Path, options: RenderOptions) -> RenderedArtifact:
        """Render ``source``.

        Raises
        ------
        DiagramRenderError
            If the diagram could not be rendered. The message carries the
            source and the renderer's own output.
        DependencyError
            If the rendering program is not available

        """
        ...


def _decode_output(stream: Union[str, bytes, None]) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace").strip()
    return stream.strip()


class MermaidCliRenderer:
    """Render diagrams with the Mermaid CLI (``mmdc``).

    Each render writes the source to ``<digest>.mmd`` in a private
    temporary directory, runs ``mmdc`` on it and always removes the
    temporary files, whether or not the render succeeded.

    Parameters
    ----------
    options : MermaidOptions or None
        Executable path, output format, theme, background, configuration
        files and timeout
    file_access : FileAccess or None
        Used to create the image directory; defaults to the local filesystem

    Examples
    --------
        >>> renderer = MermaidCliRenderer(MermaidOptions(output_format="svg"))
        >>> artifact = renderer.render("graph TD; A-->B", Path("docs"), RenderOptions(image_dir="images"))
        >>> artifact.reference  # doctest: +SKIP
        'images/6f0b...e1.svg'

    """

    def __init__(self, options: MermaidOptions | None = None, file_access: FileAccess | None = None):
        self.options = options or MermaidOptions()
        self.file_access: FileAccess = file_access or LocalFileAccess()

    def executable(self) -> str:
        """Return the ``mmdc`` executable to run.

        Raises
        ------
        DependencyError
            If no executable was configured and none is found on PATH

        """
        if self.options.mmdc_path:
            return self.options.mmdc_path
        found = shutil.which(DEFAULT_MMDC_EXECUTABLE)
        if found is None:
            raise DependencyError(DEFAULT_MMDC_EXECUTABLE, install_hint=MMDC_INSTALL_HINT)
        return found

    def build_command(self, executable: str, input_path: Path, output_path: Path) -> list[str]:
        """Assemble the ``mmdc`` argument vector."""
        command = [executable, "-i", str(input_path), "-o", str(output_path), "-b", self.options.background]
        if self.options.theme:
            command += ["-t", self.options.theme]
        if self.options.mermaid_config:
            command += ["-c", self.options.mermaid_config]
        if self.options.puppeteer_config:
            command += ["-p", self.options.puppeteer_config]
        return command

    def render(self, source: str, destination_dir: Path, options: RenderOptions) -> RenderedArtifact:
        """Render ``source`` to a file below ``destination_dir`` or to a data URI.

        Parameters
        ----------
        source : str
            Diagram source text
        destination_dir : Path
            Directory images are written to (ignored in inline mode)
        options : RenderOptions
            Inline flag and image folder

        Returns
        -------
        RenderedArtifact
            Relative reference or data URI

        Raises
        ------
        DependencyError
            If ``mmdc`` cannot be found or started
        DiagramRenderError
            If ``mmdc`` fails, times out or produces no image
        FileAccessError
            If the image cannot be written to the destination

        """
        fmt = self.options.output_format
        name = artifact_name(source, fmt)
        executable = self.executable()

        with tempfile.TemporaryDirectory(prefix="mdmermaid-") as workdir:
            input_path = Path(workdir) / f"{content_digest(source)}.mmd"
            output_path = Path(workdir) / name
            input_path.write_text(source, encoding="utf-8")
            command = self.build_command(executable, input_path, output_path)
            logger.debug("Running %s", " ".join(command))

            try:
                with debug_timer(logger, f"Rendering {name}"):
                    result = subprocess.run(
                        command,
                        capture_output=True,
                        text=True,
                        timeout=self.options.timeout,
                        check=False,
                    )
            except FileNotFoundError as exc:
                raise DependencyError(
                    executable,
                    message=f"Could not start '{executable}': {exc}",
                    install_hint=MMDC_INSTALL_HINT,
                ) from exc
            except subprocess.TimeoutExpired as exc:
                raise DiagramRenderError(
                    f"mmdc timed out after {self.options.timeout:g}s",
                    source=source,
                    underlying_output=_decode_output(exc.stderr) or _decode_output(exc.stdout),
                    original_error=exc,
                ) from exc
            finally:
                input_path.unlink(missing_ok=True)

            if result.returncode != 0 or not output_path.exists():
                output = _decode_output(result.stderr) or _decode_output(result.stdout)
                reason = (
                    f"mmdc exited with status {result.returncode}"
                    if result.returncode != 0
                    else "mmdc produced no image"
                )
                raise DiagramRenderError(reason, source=source, underlying_output=output)

            if options.inline:
                encoded = base64.b64encode(output_path.read_bytes()).decode("ascii")
                return RenderedArtifact(
                    reference=f"data:{self.options.media_type};base64,{encoded}",
                    inline=True,
                    media_type=self.options.media_type,
                )

            target_dir = Path(destination_dir) / options.image_dir if options.image_dir else Path(destination_dir)
            self.file_access.ensure_directory(target_dir)
            target = target_dir / name
            try:
                shutil.copyfile(output_path, target)
            except OSError as exc:
                raise FileAccessError(str(target), original_error=exc) from exc

        logger.debug("Rendered diagram to %s", target)
        return RenderedArtifact(
            reference=artifact_reference(source, fmt, options.image_dir),
            inline=False,
            media_type=self.options.media_type,
        )
