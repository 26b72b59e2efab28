#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the mdmermaid command line.

Every :class:`~mdmermaid.diagnostics.Diagnostic` recorded during a pass is
also emitted as a log record on the ``mdmermaid.diagnostics`` logger. The
CLI prints diagnostics itself, so below DEBUG the console handler drops
those records; a log file, when requested, always keeps them.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from mdmermaid.exceptions import FileAccessError, ValidationError

DIAGNOSTICS_LOGGER = "mdmermaid.diagnostics"

LOG_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DiagnosticRecordFilter(logging.Filter):
    """Drop records emitted for diagnostics.

    Attached to handlers whose output would duplicate the diagnostics the
    CLI prints at the end of a run.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name != DIAGNOSTICS_LOGGER and not record.name.startswith(DIAGNOSTICS_LOGGER + ".")


def resolve_level(log_level: int | str) -> int:
    """Return the numeric level for a level name or number.

    Raises
    ------
    ValidationError
        If ``log_level`` is not a known level name

    """
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).upper())
    if not isinstance(resolved, int):
        raise ValidationError(
            f"Unknown log level: {log_level}",
            parameter_name="log_level",
            parameter_value=log_level,
        )
    return resolved


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    echo_diagnostics: Optional[bool] = None,
) -> logging.Logger:
    """Configure root logging handlers for the CLI.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Also write every record, diagnostics included, to this file.
    trace_mode : bool, default False
        When true, emit timestamps and logger names for debugging traces.
    echo_diagnostics : bool, optional
        Whether diagnostic records reach the console. Defaults to True at
        DEBUG and below, False otherwise.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    Raises
    ------
    ValidationError
        If the level name is unknown
    FileAccessError
        If the log file cannot be opened

    """
    level = resolve_level(log_level)
    if echo_diagnostics is None:
        echo_diagnostics = level <= logging.DEBUG

    formatter = (
        logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(LOG_FORMAT)
    )

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stderr)
    if not echo_diagnostics:
        console_handler.addFilter(DiagnosticRecordFilter())
    handlers.append(console_handler)

    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            raise FileAccessError(
                log_file, message=f"Could not open log file {log_file}: {exc}", original_error=exc
            ) from exc

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if log_file:
        root_logger.debug("Logging to file: %s", log_file)
    return root_logger
