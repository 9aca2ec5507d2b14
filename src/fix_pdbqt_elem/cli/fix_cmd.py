#!/usr/bin/env python3
"""CLI for fixing unknown element columns in PDBQT files."""

from __future__ import annotations

import io
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, TextIO

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fix_pdbqt_elem import __version__
from fix_pdbqt_elem.cli._common import console, err_console, print_issue
from fix_pdbqt_elem.fix import (
    DEFAULT_OUTPUT_TEMPLATE,
    ENCODING,
    fix_files,
    fix_stream,
    render_output_path,
)
from fix_pdbqt_elem.models import FixResult, GuessPolicy, RepairStats

app = typer.Typer(
    name="fix-pdbqt-elem",
    help="Fix PDBQT files by inferring AutoDock element types for unknown (?) elements.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__version__} (2021-05-21)")
        raise typer.Exit()


def display_summary(totals: RepairStats) -> None:
    """Display line and file statistics of a run."""
    summary_text = (
        f"[bold]Lines:[/] fixed [green]{totals.modified_lines}[/], "
        f"untouched [yellow]{totals.skipped_lines}[/], "
        f"error [red]{totals.failed_lines}[/]\n"
        f"[bold]Files:[/] fixed [green]{totals.modified_files}[/], "
        f"untouched [yellow]{totals.skipped_files}[/], "
        f"error [red]{totals.failed_files}[/]"
    )
    err_console.print(
        Panel(summary_text, title="[bold blue]Fix Summary", border_style="blue")
    )


def display_results(results: list[FixResult]) -> None:
    """Display a per-file table of a multi-file run."""
    table = Table(title="Files", show_lines=False)
    table.add_column("Input", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Fixed", justify="right", style="green")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Output", style="dim")

    styles = {"modified": "green", "skipped": "yellow", "failed": "red"}
    display_entries = results[:20]
    for result in display_entries:
        table.add_row(
            escape(Path(result.input_path).name),
            f"[{styles[result.status]}]{result.status}[/]",
            str(result.stats.modified_lines),
            str(result.stats.failed_lines),
            escape(result.output_path) if result.written else "-",
        )

    if len(results) > 20:
        table.add_row(f"... and {len(results) - 20} more", "", "", "", "", style="dim")

    err_console.print(table)


def _report_file(result: FixResult, quiet: bool) -> None:
    for issue in result.stats.issues:
        print_issue(issue)

    if result.error:
        err_console.print(f"[red]ERROR:[/] {escape(result.error)}", soft_wrap=True)
    elif quiet:
        return
    elif result.written:
        err_console.print(
            f"INFO: written to file '{escape(result.output_path)}'", soft_wrap=True
        )
    elif not result.success:
        err_console.print(
            f"INFO: skipped failed file '{escape(result.input_path)}'", soft_wrap=True
        )


def _colliding_outputs(files: list[Path], template: str) -> list[Path]:
    """Return output paths the template renders for more than one input."""
    seen: set[Path] = set()
    collisions: list[Path] = []
    for file_path in files:
        output_path = render_output_path(template, file_path).resolve()
        if output_path in seen and output_path not in collisions:
            collisions.append(output_path)
        seen.add(output_path)
    return collisions


@contextmanager
def _byte_columns(stream: TextIO) -> Iterator[TextIO]:
    """Rewrap a standard stream so one byte is one character, as for files."""
    wrapper = io.TextIOWrapper(stream.buffer, encoding=ENCODING, newline="")
    try:
        yield wrapper
    finally:
        wrapper.flush()
        wrapper.detach()


def _result_to_dict(results: list[FixResult], totals: RepairStats) -> dict:
    return {
        "lines": {
            "fixed": totals.modified_lines,
            "untouched": totals.skipped_lines,
            "error": totals.failed_lines,
        },
        "files": {
            "fixed": totals.modified_files,
            "untouched": totals.skipped_files,
            "error": totals.failed_files,
        },
        "results": [
            {
                "input_path": r.input_path,
                "output_path": r.output_path,
                "status": r.status,
                "written": r.written,
                "fixed_lines": r.stats.modified_lines,
                "failed_lines": [i.line_number for i in r.stats.errors],
                "error": r.error,
            }
            for r in results
        ],
    }


@app.command()
def main(
    files: Annotated[
        list[Path] | None,
        typer.Argument(
            help="One or more PDBQT files to be fixed (default: read stdin)",
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help=(
                "Output file name template: {name} or @ is the original file name "
                "(no extension), {path} or @@ its directory (no trailing slash)"
            ),
        ),
    ] = DEFAULT_OUTPUT_TEMPLATE,
    inplace: Annotated[
        bool,
        typer.Option(
            "--inplace",
            "-a",
            help="Fix files in place without generating new files (ignores --output)",
        ),
    ] = False,
    backup: Annotated[
        bool,
        typer.Option(
            "--backup",
            help="Create .bak backup when modifying in place",
        ),
    ] = False,
    guesses: Annotated[
        GuessPolicy,
        typer.Option(
            "--guesses",
            help="Ambiguous elements (C, H, S, unqualified N): fail, write or skip",
            case_sensitive=False,
        ),
    ] = GuessPolicy.FAIL,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output results as JSON",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only report errors",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version information and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Fix PDBQT files whose element column is marked unknown with a question mark (?).

    AutoDock element types are inferred from the atom name and residue name.

    [bold]Examples:[/]

        # Write 1abc_fixed.pdbqt next to the input
        [cyan]fix-pdbqt-elem 1abc.pdbqt[/]

        # Write into another directory
        [cyan]fix-pdbqt-elem *.pdbqt -o 'fixed/{name}.pdbqt'[/]

        # Fix in place with backup
        [cyan]fix-pdbqt-elem 1abc.pdbqt --inplace --backup[/]

        # Filter a stream
        [cyan]cat 1abc.pdbqt | fix-pdbqt-elem > 1abc_fixed.pdbqt[/]
    """
    if not files:
        if json_output:
            err_console.print("[red]Error:[/] --json requires input files")
            raise typer.Exit(code=2)
        sys.stdout.flush()
        with _byte_columns(sys.stdin) as src, _byte_columns(sys.stdout) as dst:
            result = fix_stream(src, dst, guesses)
        _report_file(result, quiet=True)
        if not quiet:
            display_summary(result.stats)
        if not result.success:
            raise typer.Exit(code=1)
        return

    collisions = [] if inplace else _colliding_outputs(files, output)
    if collisions:
        err_console.print(
            f"[red]Error:[/] --output renders the same file for several inputs: "
            f"{escape(str(collisions[0]))}",
            soft_wrap=True,
        )
        raise typer.Exit(code=2)

    run = fix_files(
        files,
        None if inplace else output,
        backup=backup,
        guesses=guesses,
        on_result=None if json_output else lambda r: _report_file(r, quiet),
    )
    results, totals = run.results, run.totals

    if json_output:
        console.print_json(data=_result_to_dict(results, totals))
    elif not quiet:
        if len(results) > 1:
            display_results(results)
        display_summary(totals)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
