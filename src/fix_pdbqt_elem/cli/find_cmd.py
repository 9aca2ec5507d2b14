#!/usr/bin/env python3
"""CLI for finding unknown element columns in PDBQT files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fix_pdbqt_elem.cli._common import (
    DEFAULT_WORKERS,
    console,
    create_progress,
    err_console,
)
from fix_pdbqt_elem.find import result_to_dict, scan_files
from fix_pdbqt_elem.models import ScanResult

app = typer.Typer(
    name="find-unknown-elem",
    help="Detect PDBQT files with unknown (?) element columns.",
    add_completion=False,
    rich_markup_mode="rich",
)


def display_summary(result: ScanResult) -> None:
    """Display a rich summary of scan results."""
    summary_text = (
        f"[bold]Scan Date:[/] {result.scan_date}\n"
        f"[bold]Total Scanned:[/] {result.total_scanned:,}\n"
        f"[bold]Affected Files:[/] {result.affected_files:,}"
    )

    if result.affected_files > 0:
        percentage = (result.affected_files / result.total_scanned) * 100
        summary_text += f" ([yellow]{percentage:.2f}%[/])"

    err_console.print(
        Panel(summary_text, title="[bold blue]Scan Summary", border_style="blue")
    )

    if result.entries:
        table = Table(title="Unknown Elements Found", show_lines=True)
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Unknown", justify="right", style="yellow")
        table.add_column("Fixable", justify="right", style="green")
        table.add_column("Codes", style="magenta")

        display_entries = result.entries[:20]
        for entry in display_entries:
            codes = sorted({r.code for r in entry.records})
            table.add_row(
                escape(Path(entry.file_path).name),
                str(len(entry.records)),
                str(entry.fixable),
                ", ".join(codes),
            )

        if len(result.entries) > 20:
            table.add_row(
                f"... and {len(result.entries) - 20} more",
                "",
                "",
                "",
                style="dim",
            )

        err_console.print(table)


@app.command()
def main(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="PDBQT files to scan",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output JSON file (default: stdout)",
        ),
    ] = None,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-w",
            help="Number of parallel workers",
            min=1,
            max=32,
        ),
    ] = DEFAULT_WORKERS,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output raw JSON only (no rich formatting)",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            help="Limit scan to N randomly sampled files",
            min=1,
        ),
    ] = None,
) -> None:
    """Detect unknown (?) element columns in PDBQT files.

    Lists every ATOM/HETATM/ANISOU record whose element is unknown together
    with the AutoDock type that fix-pdbqt-elem would write. Nothing is modified.

    [bold]Examples:[/]

        # Scan specific files
        [cyan]find-unknown-elem 1abc.pdbqt 2xyz.pdbqt[/]

        # Scan 100 random files and save the report
        [cyan]find-unknown-elem ligands/*.pdbqt --limit 100 -o report.json[/]
    """
    if not json_output:
        config_text = (
            f"[bold]Workers:[/] {workers}\n[bold]Output:[/] {output or 'stdout'}"
        )
        if limit:
            config_text += f"\n[bold]Limit:[/] {limit:,} files (random sample)"
        err_console.print(
            Panel(
                config_text,
                title="[bold green]Configuration",
                border_style="green",
            )
        )

    if json_output:
        scan_result = scan_files(files, workers=workers, limit=limit)
    else:
        with create_progress() as progress:
            task = progress.add_task("[cyan]Scanning files...", total=None)

            def _advance(current: int, total: int) -> None:
                progress.update(task, completed=current, total=total)

            scan_result = scan_files(
                files, workers=workers, limit=limit, progress_callback=_advance
            )

    json_str = json.dumps(result_to_dict(scan_result), indent=2)

    if output:
        output.write_text(json_str)
        if not json_output:
            err_console.print(f"[green]Results written to {escape(str(output))}[/]")
    else:
        console.print(json_str, markup=False, highlight=False, soft_wrap=True)

    if not json_output:
        display_summary(scan_result)


if __name__ == "__main__":
    app()
