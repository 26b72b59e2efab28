#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Diagnostics reported by a transform pass.

Diagnostics are immutable records accumulated in a mutable
:class:`DiagnosticLog` while a pass runs. They are returned to the caller
alongside the rewritten document and are never stored in the tree. Each
recorded diagnostic is also emitted through :mod:`logging`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from mdmermaid.ast.nodes import SourceLocation
from mdmermaid.constants import PLUGIN_NAME

logger = logging.getLogger(__name__)


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One message about one node.

    Parameters
    ----------
    level : DiagnosticLevel
        Severity
    message : str
        Human-readable message. Render failures include the diagram source
        and the renderer's own output.
    location : SourceLocation or None
        Where the node came from, when known
    source : str, default "mdmermaid"
        Name of the component that produced the diagnostic

    """

    level: DiagnosticLevel
    message: str
    location: Optional[SourceLocation] = None
    source: str = PLUGIN_NAME

    @property
    def is_error(self) -> bool:
        return self.level is DiagnosticLevel.ERROR

    def __str__(self) -> str:
        where = f"{self.location}: " if self.location is not None and self.location.line is not None else ""
        return f"{where}{self.level.value}: {self.message} [{self.source}]"


class DiagnosticLog:
    """Ordered, append-only collection of diagnostics for one pass."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> Diagnostic:
        self._items.append(diagnostic)
        log_level = logging.ERROR if diagnostic.is_error else logging.INFO
        logger.log(log_level, "%s", diagnostic)
        return diagnostic

    def info(self, message: str, location: Optional[SourceLocation] = None) -> Diagnostic:
        """Record an informational diagnostic."""
        return self.add(Diagnostic(DiagnosticLevel.INFO, message, location))

    def error(self, message: str, location: Optional[SourceLocation] = None) -> Diagnostic:
        """Record an error diagnostic."""
        return self.add(Diagnostic(DiagnosticLevel.ERROR, message, location))

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.is_error]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> list[Diagnostic]:
        """Return a snapshot of the recorded diagnostics."""
        return list(self._items)
