"""Command line wrapper around the blueprint compiler.

Compiles a document (or every document matching a glob pattern), optionally
exports a single compiled document, and prints a summary table. All work is
delegated to :func:`blot.runner.compile_to_destination`.

Examples
--------
>>> # In shell
>>> python -m blot docs/api.apib -o dist/api.json --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blot.blueprint import CompiledArtifact
from blot.exceptions import AppError
from blot.runner import compile_to_destination, configure_logging
from blot.settings import BlotSettings

logger = logging.getLogger(__name__)


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments with attributes ``source``, ``output``, ``log_level``,
        ``seed``, ``locale`` and ``root``.
    """
    parser = argparse.ArgumentParser(
        prog="blot", description="Compile API blueprint documents and their fixtures."
    )
    parser.add_argument("source", help="Blueprint path or glob pattern.")
    parser.add_argument("-o", "--output", default=None, help="Export destination.")
    parser.add_argument(
        "--log-level", default=os.environ.get("BLOT_LOG_LEVEL", "INFO")
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--locale", default=None)
    parser.add_argument("--root", default=None)
    return parser.parse_args(argv)


def render_summary(
    results: list[tuple[str, CompiledArtifact]], console: Console | None = None
) -> None:
    """Print one row per compiled document with its fixture count."""
    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Source", style="bold")
    table.add_column("Fixtures", justify="right")
    for path, artifact in results:
        table.add_row(str(path), str(len(artifact.fixtures)))
    (console or Console()).print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line entrypoint.

    Returns
    -------
    int
        ``0`` on success, ``1`` when compilation or export failed.
    """
    args = parse_arguments(argv)
    configure_logging(args.log_level, enable_file=False)
    console = Console(stderr=True)
    try:
        settings = BlotSettings(args.root)
        if args.seed is not None:
            settings.faker_seed = args.seed
        if args.locale:
            settings.faker_locale = args.locale
        results = asyncio.run(
            compile_to_destination(args.source, args.output, settings=settings)
        )
    except AppError as exc:
        logger.debug("Compilation failed: %s", exc.to_dict())
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return 1
    render_summary(results)
    if args.output:
        console.print(f"[green]Wrote {args.output}[/green]")
    return 0


__all__ = ["main", "parse_arguments", "render_summary"]
