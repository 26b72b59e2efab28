#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdmermaid/utils/io_utils.py
"""I/O utilities for reading diagram sources and writing documents.

The transform reads referenced diagram files through a :class:`FileAccess`
collaborator, so tests (and embedders) can substitute an in-memory store
for the local filesystem.

"""

from __future__ import annotations

import io
import logging
from io import StringIO
from pathlib import Path
from typing import IO, Protocol, Union, runtime_checkable

from mdmermaid.exceptions import FileAccessError

logger = logging.getLogger(__name__)


@runtime_checkable
class FileAccess(Protocol):
    """Read and write access to files named relative to a document."""

    def read_text(self, path: Path) -> str:
        """Return the UTF-8 text of ``path``, raising FileAccessError on failure."""
        ...

    def write_text(self, path: Path, text: str) -> None:
        """Write ``text`` to ``path``, raising FileAccessError on failure."""
        ...

    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and its parents if missing."""
        ...


class LocalFileAccess:
    """FileAccess backed by the local filesystem."""

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file.

        Raises
        ------
        FileAccessError
            If the file is missing, unreadable or not valid UTF-8

        """
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileAccessError(str(path), original_error=exc) from exc

    def write_text(self, path: Path, text: str) -> None:
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise FileAccessError(str(path), original_error=exc) from exc
        logger.debug("Wrote %d characters to %s", len(text), path)

    def ensure_directory(self, path: Path) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileAccessError(str(path), original_error=exc) from exc


def write_content(content: str, output: Union[str, Path, IO[str], IO[bytes], None]) -> Union[StringIO, None]:
    """Write markdown text to an output destination or return it as a stream.

    Parameters
    ----------
    content : str
        Text to write
    output : str, Path, IO[str], IO[bytes], or None
        Output destination:
        - None: returns the content as a StringIO
        - str or Path: writes the content to that file (UTF-8)
        - file-like object: writes text, or UTF-8 bytes for binary streams

    Returns
    -------
    StringIO or None
        StringIO when ``output`` is None, otherwise None

    Raises
    ------
    FileAccessError
        If a file path cannot be written
    TypeError
        If ``output`` is not a supported destination

    Examples
    --------
        >>> write_content("Hello", None).read()
        'Hello'

    """
    if output is None:
        return StringIO(content)

    if isinstance(output, (str, Path)):
        LocalFileAccess().write_text(Path(output), content)
        return None

    if hasattr(output, "write"):
        if isinstance(output, StringIO) or isinstance(output, io.TextIOBase):
            is_binary_mode = False
        elif isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
            is_binary_mode = True
        else:
            mode = getattr(output, "mode", "")
            is_binary_mode = isinstance(mode, str) and "b" in mode

        if is_binary_mode:
            output.write(content.encode("utf-8"))  # type: ignore[arg-type]
        else:
            output.write(content)  # type: ignore[arg-type]
        return None

    raise TypeError(f"Unsupported output type: {type(output).__name__}")
