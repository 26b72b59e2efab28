#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the diagram transform.

A single immutable ``MermaidOptions`` value is handed to every component of a
transform pass (classifier, rewriter, renderer); no component reads global
state.
"""
# src/mdmermaid/options/mermaid.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

from mdmermaid.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_DIAGRAM_FORMAT,
    DEFAULT_RENDER_TIMEOUT,
    DIAGRAM_MEDIA_TYPES,
    DiagramFormat,
)
from mdmermaid.exceptions import ValidationError
from mdmermaid.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class MermaidOptions(CloneFrozenMixin):
    """Configuration for one diagram transform pass.

    Parameters
    ----------
    simple : bool, default False
        Emit ``<div class="mermaid">`` containers for client-side rendering
        instead of rendering images. Applies to code blocks and to
        sentinel-titled links and images.
    image_dir : str or None, default None
        Relative folder (below ``destination_dir``) that rendered images are
        written to and referenced from.
    destination_dir : str or None, default None
        Directory rendered images are written to. When None, the caller's
        base directory (usually the markdown file's directory) is used.
    mmdc_path : str or None, default None
        Path to the Mermaid CLI executable. When None, ``mmdc`` is looked up
        on PATH.
    output_format : {"svg", "png"}, default "svg"
        Image format produced by the renderer.
    background : str, default "transparent"
        Background colour passed to the renderer.
    theme : str or None, default None
        Mermaid theme passed to the renderer.
    mermaid_config : str or None, default None
        Path to a Mermaid JSON configuration file.
    puppeteer_config : str or None, default None
        Path to a puppeteer JSON configuration file.
    timeout : float, default 60.0
        Seconds a single render may take before it is reported as failed.

    """

    simple: bool = field(
        default=False,
        metadata={"help": "Replace diagrams with <div class=\"mermaid\"> containers instead of images"},
    )
    image_dir: Optional[str] = field(
        default=None,
        metadata={"help": "Relative folder for rendered images"},
    )
    destination_dir: Optional[str] = field(
        default=None,
        metadata={"help": "Directory rendered images are written to"},
    )
    mmdc_path: Optional[str] = field(
        default=None,
        metadata={"help": "Path to the Mermaid CLI executable (mmdc)"},
    )
    output_format: DiagramFormat = field(
        default=DEFAULT_DIAGRAM_FORMAT,
        metadata={"help": "Rendered image format", "choices": ["svg", "png"]},
    )
    background: str = field(
        default=DEFAULT_BACKGROUND,
        metadata={"help": "Background colour for rendered images"},
    )
    theme: Optional[str] = field(
        default=None,
        metadata={"help": "Mermaid theme (default, forest, dark, neutral)"},
    )
    mermaid_config: Optional[str] = field(
        default=None,
        metadata={"help": "Mermaid JSON configuration file"},
    )
    puppeteer_config: Optional[str] = field(
        default=None,
        metadata={"help": "Puppeteer JSON configuration file"},
    )
    timeout: float = field(
        default=DEFAULT_RENDER_TIMEOUT,
        metadata={"help": "Seconds allowed per diagram render", "type": float},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValidationError
            If the output format is unknown, the timeout is not positive, or
            the image folder is not a plain relative path.

        """
        if self.output_format not in DIAGRAM_MEDIA_TYPES:
            raise ValidationError(
                f"output_format must be one of {sorted(DIAGRAM_MEDIA_TYPES)}, got {self.output_format!r}",
                parameter_name="output_format",
                parameter_value=self.output_format,
            )
        if self.timeout <= 0:
            raise ValidationError(
                f"timeout must be positive, got {self.timeout}",
                parameter_name="timeout",
                parameter_value=self.timeout,
            )
        if self.image_dir is not None:
            posix = PurePosixPath(self.image_dir.replace("\\", "/"))
            if posix.is_absolute() or PureWindowsPath(self.image_dir).is_absolute() or ".." in posix.parts:
                raise ValidationError(
                    f"image_dir must be a relative path inside the destination, got {self.image_dir!r}",
                    parameter_name="image_dir",
                    parameter_value=self.image_dir,
                )

    @property
    def media_type(self) -> str:
        """MIME type of the configured output format."""
        return DIAGRAM_MEDIA_TYPES[self.output_format]
