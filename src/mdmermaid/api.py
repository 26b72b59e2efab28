#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/api.py
"""Public entry points for transforming markdown documents.

Three levels are offered:

- :func:`transform` rewrites an already parsed :class:`~mdmermaid.ast.Document`
- :func:`transform_markdown` parses markdown text, transforms it and
  serializes it back
- :func:`transform_file` does the same for a file on disk and writes the
  result

Keyword arguments that name :class:`~mdmermaid.options.MermaidOptions`
fields override the corresponding field of ``options``.

Examples
--------
    >>> from mdmermaid import transform_markdown
    >>> result = transform_markdown(text, simple=True)
    >>> print(result.markdown)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import IO, Any, Optional, Union

from mdmermaid.ast.nodes import Document
from mdmermaid.diagnostics import Diagnostic
from mdmermaid.diagrams import DiagramRenderer
from mdmermaid.exceptions import ValidationError
from mdmermaid.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from mdmermaid.options.mermaid import MermaidOptions
from mdmermaid.parsers.markdown import MarkdownToAstConverter
from mdmermaid.renderers.markdown import MarkdownRenderer
from mdmermaid.transforms.transformer import MermaidTransform, TransformResult
from mdmermaid.utils.io_utils import FileAccess, LocalFileAccess, write_content

logger = logging.getLogger(__name__)

_OPTION_FIELDS = frozenset(f.name for f in fields(MermaidOptions))


@dataclass
class MarkdownResult:
    """Transformed markdown text and the diagnostics of the pass.

    Parameters
    ----------
    markdown : str
        Serialized document after the transform
    diagnostics : list of Diagnostic
        Diagnostics in the order they were produced
    changed : bool
        Whether the transform altered the document. Formatting differences
        introduced by serialization alone do not count.

    """

    markdown: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    changed: bool = False

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


def _resolve_options(options: Optional[MermaidOptions], overrides: dict[str, Any]) -> MermaidOptions:
    unknown = set(overrides) - _OPTION_FIELDS
    if unknown:
        raise ValidationError(
            f"Unknown option(s): {', '.join(sorted(unknown))}",
            parameter_name=sorted(unknown)[0],
        )
    base = options or MermaidOptions()
    return base.create_updated(**overrides) if overrides else base


def transform(
    document: Document,
    options: Optional[MermaidOptions] = None,
    *,
    renderer: Optional[DiagramRenderer] = None,
    file_access: Optional[FileAccess] = None,
    base_dir: Optional[Union[str, Path]] = None,
    **kwargs: Any,
) -> TransformResult:
    """Rewrite every diagram in ``document`` in place.

    Parameters
    ----------
    document : Document
        Parsed document; it is mutated
    options : MermaidOptions, optional
        Transform options
    renderer : DiagramRenderer, optional
        Diagram renderer; defaults to the Mermaid CLI
    file_access : FileAccess, optional
        Filesystem collaborator
    base_dir : str or Path, optional
        Directory the document lives in
    kwargs : Any
        Overrides for individual ``MermaidOptions`` fields

    Returns
    -------
    TransformResult
        The same document and the diagnostics

    Raises
    ------
    ValidationError
        If an option is unknown or invalid
    StructuralInvariantError
        If the computed tree edits do not fit the document

    """
    resolved = _resolve_options(options, kwargs)
    transformer = MermaidTransform(
        resolved,
        renderer=renderer,
        file_access=file_access,
        base_dir=Path(base_dir) if base_dir is not None else None,
    )
    return transformer(document)


def transform_markdown(
    text: str,
    options: Optional[MermaidOptions] = None,
    *,
    renderer: Optional[DiagramRenderer] = None,
    file_access: Optional[FileAccess] = None,
    base_dir: Optional[Union[str, Path]] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> MarkdownResult:
    """Parse markdown text, rewrite its diagrams and serialize it back.

    Returns
    -------
    MarkdownResult
        Markdown text, diagnostics and whether anything changed

    """
    document = MarkdownToAstConverter(parser_options).parse(text)
    markdown_renderer = MarkdownRenderer(renderer_options)
    before = markdown_renderer.render_to_string(document)

    result = transform(
        document,
        options,
        renderer=renderer,
        file_access=file_access,
        base_dir=base_dir,
        **kwargs,
    )
    after = markdown_renderer.render_to_string(result.document)
    return MarkdownResult(markdown=after, diagnostics=result.diagnostics, changed=after != before)


def transform_file(
    path: Union[str, Path],
    output: Optional[Union[str, Path, IO[str], IO[bytes]]] = None,
    options: Optional[MermaidOptions] = None,
    *,
    renderer: Optional[DiagramRenderer] = None,
    file_access: Optional[FileAccess] = None,
    base_dir: Optional[Union[str, Path]] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> MarkdownResult:
    """Transform a markdown file.

    Links and images are resolved relative to the input file. Rendered
    images are written next to the output file (or the input file when no
    output path is given) unless ``destination_dir`` is set.

    Parameters
    ----------
    path : str or Path
        Markdown file to read
    output : str, Path, IO or None
        Where to write the result; None leaves writing to the caller
    options : MermaidOptions, optional
        Transform options
    kwargs : Any
        Overrides for individual ``MermaidOptions`` fields

    Returns
    -------
    MarkdownResult
        Markdown text, diagnostics and whether anything changed

    Raises
    ------
    FileAccessError
        If the input cannot be read or the output cannot be written

    """
    source_path = Path(path)
    access = file_access if file_access is not None else LocalFileAccess()
    text = access.read_text(source_path)

    resolved = _resolve_options(options, kwargs)
    if resolved.destination_dir is None:
        anchor = Path(output) if isinstance(output, (str, Path)) else source_path
        resolved = resolved.create_updated(destination_dir=str(anchor.parent))

    logger.info("Transforming %s", source_path)
    result = transform_markdown(
        text,
        resolved,
        renderer=renderer,
        file_access=access,
        base_dir=base_dir if base_dir is not None else source_path.parent,
        parser_options=parser_options,
        renderer_options=renderer_options,
    )

    if output is not None:
        write_content(result.markdown, output)
    return result
