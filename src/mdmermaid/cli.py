#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command line interface for mdmermaid.

Render the Mermaid diagrams of a markdown file and print the result:

    $ mdmermaid README.md

Rewrite the file in place, writing images to ``docs/diagrams``:

    $ mdmermaid README.md --in-place --image-dir diagrams

Emit client-side ``<div class="mermaid">`` blocks instead of images:

    $ mdmermaid README.md --simple -o README.out.md

Fail when a document still contains unrendered diagrams (for CI):

    $ mdmermaid README.md --check

Exit codes: 0 success, 1 at least one diagram failed (or ``--check`` found
changes), 2 invalid arguments, 3 file error, 4 missing ``mmdc``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from mdmermaid.api import MarkdownResult, transform_file
from mdmermaid.constants import DEFAULT_BACKGROUND, DEFAULT_RENDER_TIMEOUT, MMDC_ENV_VAR
from mdmermaid.diagnostics import Diagnostic
from mdmermaid.diagrams import MermaidCliRenderer
from mdmermaid.exceptions import DependencyError, FileError, MdMermaidError, ValidationError
from mdmermaid.logging_utils import configure_logging
from mdmermaid.options.mermaid import MermaidOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_RENDER_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3
EXIT_DEPENDENCY_ERROR = 4


def _get_version() -> str:
    """Get the version of the mdmermaid package."""
    try:
        return version("mdmermaid")
    except PackageNotFoundError:
        return "unknown"


def positive_float(value: str) -> float:
    """Validate a positive number for argparse."""
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value} is not a valid number") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive number")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mdmermaid",
        description="Replace Mermaid diagram sources in markdown with rendered images.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Markdown file to transform")
    parser.add_argument("--version", action="version", version=f"mdmermaid {_get_version()}")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--out", "-o", help="Write the transformed markdown to this file (default: stdout)")
    output.add_argument("--in-place", "-i", action="store_true", help="Overwrite the input file")
    output.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit with status 1 if the document would change",
    )

    mermaid = parser.add_argument_group("diagram options")
    mermaid.add_argument(
        "--simple",
        action="store_true",
        help='Emit <div class="mermaid"> blocks for client-side rendering instead of images',
    )
    mermaid.add_argument("--image-dir", help="Folder below the destination directory for rendered images")
    mermaid.add_argument(
        "--destination-dir",
        help="Directory rendered images are written to (default: directory of the output file)",
    )
    mermaid.add_argument(
        "--mmdc",
        default=os.environ.get(MMDC_ENV_VAR),
        help=f"Path to the Mermaid CLI executable (default: ${MMDC_ENV_VAR} or mmdc on PATH)",
    )
    mermaid.add_argument("--format", choices=["svg", "png"], default="svg", help="Rendered image format")
    mermaid.add_argument("--theme", help="Mermaid theme (default, forest, dark, neutral)")
    mermaid.add_argument("--background", default=DEFAULT_BACKGROUND, help="Background colour of rendered images")
    mermaid.add_argument("--config-file", help="Mermaid JSON configuration file")
    mermaid.add_argument("--puppeteer-config", help="Puppeteer JSON configuration file")
    mermaid.add_argument(
        "--timeout",
        type=positive_float,
        default=DEFAULT_RENDER_TIMEOUT,
        help="Seconds a single diagram may take to render",
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    logs.add_argument("--verbose", "-v", action="store_true", help="Shorthand for --log-level DEBUG")
    logs.add_argument("--trace", action="store_true", help="Log with timestamps and logger names")
    logs.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--rich", action="store_true", help="Print diagnostics as a rich table")
    return parser


def build_options(parsed_args: argparse.Namespace) -> MermaidOptions:
    """Map parsed arguments to ``MermaidOptions``.

    Raises
    ------
    ValidationError
        If the combination of arguments is invalid

    """
    return MermaidOptions(
        simple=parsed_args.simple,
        image_dir=parsed_args.image_dir,
        destination_dir=parsed_args.destination_dir,
        mmdc_path=parsed_args.mmdc,
        output_format=parsed_args.format,
        background=parsed_args.background,
        theme=parsed_args.theme,
        mermaid_config=parsed_args.config_file,
        puppeteer_config=parsed_args.puppeteer_config,
        timeout=parsed_args.timeout,
    )


def print_diagnostics(diagnostics: Sequence[Diagnostic], path: str, use_rich: bool) -> None:
    """Print diagnostics to stderr, one line each or as a table."""
    if not diagnostics:
        return
    if not use_rich:
        for diagnostic in diagnostics:
            print(f"{path}:{diagnostic}", file=sys.stderr)
        return

    table = Table(title=f"Diagrams in {path}")
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Level")
    table.add_column("Message")
    for diagnostic in diagnostics:
        location = str(diagnostic.location) if diagnostic.location is not None else ""
        level = "[red]error[/red]" if diagnostic.is_error else "[green]info[/green]"
        table.add_row(location, level, diagnostic.message)
    Console(stderr=True).print(table)


def _failure_exit_code(options: MermaidOptions) -> int:
    """Return 4 when failures are explained by a missing ``mmdc``, else 1."""
    if options.simple:
        return EXIT_RENDER_ERROR
    try:
        MermaidCliRenderer(options).executable()
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR
    return EXIT_RENDER_ERROR


def main(args: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = "DEBUG" if parsed_args.verbose else parsed_args.log_level
    try:
        configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)
    except FileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        options = build_options(parsed_args)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    input_path = Path(parsed_args.input)
    if parsed_args.in_place:
        output: Optional[Path] = input_path
    elif parsed_args.out:
        output = Path(parsed_args.out)
    else:
        output = None

    try:
        # --check and stdout runs still place images relative to the input
        result: MarkdownResult = transform_file(
            input_path,
            output=None if parsed_args.check else output,
            options=options,
        )
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except FileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR
    except MdMermaidError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RENDER_ERROR

    print_diagnostics(result.diagnostics, str(input_path), parsed_args.rich)

    if parsed_args.check:
        if result.changed:
            print(f"{input_path} would be changed", file=sys.stderr)
            return EXIT_RENDER_ERROR
        return _failure_exit_code(options) if result.has_errors else EXIT_SUCCESS

    if output is None:
        sys.stdout.write(result.markdown)
    else:
        logger.info("Wrote %s", output)

    if result.has_errors:
        return _failure_exit_code(options)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
