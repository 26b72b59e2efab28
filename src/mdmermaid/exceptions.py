#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdmermaid library.

This module defines specialized exception classes for the error conditions
that can occur while rewriting diagram nodes in a markdown document.

Exception Hierarchy
-------------------
- MdMermaidError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (file access and I/O)
    - FileAccessError (unreadable or unwritable referenced files)

  - RenderingError (diagram generation failures)
    - DiagramRenderError (the external renderer rejected a diagram)

  - TransformError (tree rewriting failures)
    - StructuralInvariantError (the tree is not shaped as computed)

  - DependencyError (missing external executable)

Render and file errors are recovered per node by the rewriter and reported
as diagnostics. Structural invariant errors always propagate.

"""

from typing import Any


class MdMermaidError(Exception):
    """Base exception class for all mdmermaid-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MdMermaidError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(MdMermaidError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileAccessError(FileError):
    """Exception raised when a file cannot be read or written.

    Parameters
    ----------
    file_path : str
        Path to the file that could not be accessed
    message : str, optional
        Custom error message. If not provided, a default message is built
    original_error : Exception, optional
        The underlying OSError

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file access error."""
        if message is None:
            message = f"Cannot access file: {file_path}"
            if original_error is not None:
                message += f" ({original_error})"
        super().__init__(message, file_path=file_path, original_error=original_error)


class RenderingError(MdMermaidError):
    """Exception raised when diagram generation fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class DiagramRenderError(RenderingError):
    """Exception raised when the external renderer fails on a diagram.

    The message always contains the diagram source and whatever the renderer
    printed, so a diagnostic built from it tells the user exactly which
    diagram failed and why.

    Parameters
    ----------
    message : str
        Short description of the failure
    source : str, optional
        Diagram source text that was being rendered
    underlying_output : str, optional
        Captured stderr/stdout of the renderer process
    original_error : Exception, optional
        The underlying exception

    Attributes
    ----------
    source : str
        Diagram source text
    underlying_output : str
        Renderer output

    """

    def __init__(
        self,
        message: str,
        source: str = "",
        underlying_output: str = "",
        original_error: Exception | None = None,
    ):
        """Initialize the diagram render error."""
        full_message = message
        if source:
            full_message += f"\n\nDiagram source:\n{source}"
        if underlying_output:
            full_message += f"\n\nRenderer output:\n{underlying_output}"
        super().__init__(full_message, rendering_stage="mermaid-cli", original_error=original_error)
        self.source = source
        self.underlying_output = underlying_output


class TransformError(MdMermaidError):
    """Exception raised when tree rewriting fails.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


class StructuralInvariantError(TransformError):
    """Exception raised when a planned tree edit does not match the tree.

    This signals a programming error (an expected node is not where it was
    computed to be, or two edits claim the same siblings). The pass is
    aborted rather than risking a corrupted tree.

    """

    def __init__(self, message: str):
        """Initialize the structural invariant error."""
        super().__init__(message, transform_name="mermaid")


class DependencyError(MdMermaidError):
    """Exception raised when a required external program is not available.

    Parameters
    ----------
    package : str
        Name of the missing program or package
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    install_hint : str, optional
        Suggested installation command

    """

    def __init__(self, package: str, message: str | None = None, install_hint: str = ""):
        """Initialize the dependency error."""
        if message is None:
            message = f"Required program '{package}' was not found"
            if install_hint:
                message += f". Install with: {install_hint}"
        super().__init__(message)
        self.package = package
        self.install_hint = install_hint


__all__ = [
    "MdMermaidError",
    "ValidationError",
    "FileError",
    "FileAccessError",
    "RenderingError",
    "DiagramRenderError",
    "TransformError",
    "StructuralInvariantError",
    "DependencyError",
]
