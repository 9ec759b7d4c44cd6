"""kexplode CLI — Typer + Rich terminal interface.

Splits a merged kubeconfig into one standalone kubeconfig per context.
YAML goes to stdout (with --stdout); diagnostics go to stderr.
"""

from __future__ import annotations

import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from kexplode import __version__
from kexplode.errors import KexplodeError, UsageError
from kexplode.loader import load_kubeconfig
from kexplode.output.writer import ExportResult, WriteOutcome, export_contexts, make_sink
from kexplode.schemas.explode import ExplodeOptions, OutputMode
from kexplode.schemas.kubeconfig import RECOMMENDED_CONFIG_DIR
from kexplode.selection import resolve_contexts

err_console = Console(stderr=True)

app = typer.Typer(
    name="kexplode",
    help="Explode a multi-context kubeconfig into single-context kubeconfig files.",
    no_args_is_help=False,
    rich_markup_mode="rich",
    add_completion=False,
)


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        err_console.print(f"kexplode {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Attach a stderr Rich handler to the package logger once per process."""
    pkg_logger = logging.getLogger("kexplode")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(
            RichHandler(console=err_console, show_time=False, show_path=False)
        )


def _print_summary(results: list[ExportResult], output_dir: Path) -> None:
    counts = Counter(r.outcome for r in results)
    exported = counts[WriteOutcome.WRITTEN] + counts[WriteOutcome.OVERWRITTEN]
    parts = [
        f"{counts[outcome]} {outcome.value}"
        for outcome in (WriteOutcome.WRITTEN, WriteOutcome.OVERWRITTEN, WriteOutcome.SKIPPED)
        if counts[outcome]
    ]
    detail = f" ({', '.join(parts)})" if parts else ""
    err_console.print(
        f"[green]Exported {exported} of {len(results)} contexts[/green] "
        f"to {escape(str(output_dir))}{detail}",
        soft_wrap=True,
    )


# ── kexplode ─────────────────────────────────────────────────────


@app.command()
def explode(
    contexts: Optional[list[str]] = typer.Argument(
        None, help="Context names to export (required unless --all)",
        show_default=False,
    ),
    all_contexts: bool = typer.Option(
        False, "--all",
        help="Explode all contexts into separate files",
    ),
    stdout: bool = typer.Option(
        False, "--stdout",
        help="Write exploded contexts to stdout instead of files",
    ),
    force: bool = typer.Option(
        False, "--force", "-f",
        help="Force overwriting of destination files. Ignored when --stdout is used",
    ),
    kubeconfig: Optional[Path] = typer.Option(
        None, "--kubeconfig",
        envvar="KEXPLODE_KUBECONFIG",
        help="Path to the source kubeconfig (default: $KUBECONFIG or ~/.kube/config)",
        show_default=False,
    ),
    output_dir: Path = typer.Option(
        RECOMMENDED_CONFIG_DIR, "--output-dir", "-o",
        envvar="KEXPLODE_OUTPUT_DIR",
        help="Directory for exploded files",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Extract named contexts into standalone kubeconfig files.

    Each output holds one context with the cluster and user it references,
    and its current-context set to that context.
    """
    _configure_logging(verbose)

    options = ExplodeOptions(
        contexts=tuple(contexts or ()),
        all_contexts=all_contexts,
        output_mode=OutputMode.STDOUT if stdout else OutputMode.FILES,
        force=force,
        kubeconfig=kubeconfig,
        output_dir=output_dir,
    )

    try:
        results = run(options)
    except KexplodeError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1) from None

    if options.output_mode == OutputMode.FILES:
        _print_summary(results, options.output_dir.expanduser())


def run(options: ExplodeOptions) -> list[ExportResult]:
    """Load, select and export according to options.

    Raises:
        KexplodeError: On any load, selection, projection or write failure.
    """
    # Checked before loading so a bare invocation never touches the filesystem
    if not options.all_contexts and not options.contexts:
        raise UsageError("must specify context names or --all")

    config = load_kubeconfig(options.kubeconfig)
    names = resolve_contexts(config, options)
    return export_contexts(config, names, make_sink(options, sys.stdout))