"""File-level repair of PDBQT files with unknown element columns."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from fix_pdbqt_elem.models import FixResult, GuessPolicy, RepairStats, RunResult
from fix_pdbqt_elem.repair import repair

DEFAULT_OUTPUT_TEMPLATE = "@@/@_fixed.pdbqt"

# PDBQT is ASCII; latin-1 maps every byte to one character, so columns
# stay byte columns and unrelated bytes round-trip untouched.
ENCODING = "latin-1"


def render_output_path(template: str, input_path: str | Path) -> Path:
    """Expand an output file name template for one input file.

    Supported substitutions (first occurrence only, bracketed form wins):
        {path} or @@: parent directory of the input, no trailing slash.
        {name} or @: input file name without its extension.

    Args:
        template: Output file name template.
        input_path: Path of the input file.

    Returns:
        The output path.
    """
    input_path = Path(input_path)
    parent = str(input_path.parent).rstrip("/")

    path_token = "{path}" if "{path}" in template else "@@"
    path_at = template.find(path_token)
    taken = range(path_at, path_at + len(path_token)) if path_at >= 0 else range(0)

    if "{name}" in template:
        name_token, name_at = "{name}", template.find("{name}")
    else:
        name_token = "@"
        name_at = next(
            (i for i, c in enumerate(template) if c == "@" and i not in taken), -1
        )

    # Substitute both in one pass so expanded text is never rescanned
    substitutions = sorted(
        (at, token, value)
        for at, token, value in [
            (path_at, path_token, parent),
            (name_at, name_token, input_path.stem),
        ]
        if at >= 0
    )
    pieces = []
    pos = 0
    for at, token, value in substitutions:
        pieces.append(template[pos:at])
        pieces.append(value)
        pos = at + len(token)
    pieces.append(template[pos:])

    return Path("".join(pieces))


@contextmanager
def scratch_file(target: Path) -> Iterator[Path]:
    """Provide a scratch path next to target, removed on exit.

    Args:
        target: File the scratch output will eventually replace.

    Yields:
        Path of an empty scratch file in target's directory.
    """
    fd, name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    os.close(fd)
    scratch = Path(name)
    try:
        yield scratch
    finally:
        scratch.unlink(missing_ok=True)


def _open_input(path: Path) -> TextIO:
    return open(path, encoding=ENCODING, newline="")


def _open_output(path: Path) -> TextIO:
    return open(path, "w", encoding=ENCODING, newline="")


def _fix_in_place(
    input_path: Path, backup: bool, guesses: GuessPolicy
) -> tuple[RepairStats, bool]:
    stats = RepairStats()
    with scratch_file(input_path) as scratch:
        with _open_input(input_path) as src, _open_output(scratch) as dst:
            ok = repair(src, dst, stats, str(input_path), guesses)
        if not ok:
            return stats, False
        if backup:
            backup_path = input_path.with_suffix(input_path.suffix + ".bak")
            shutil.copy2(input_path, backup_path)
        shutil.copymode(input_path, scratch)
        os.replace(scratch, input_path)
    return stats, True


def fix_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    backup: bool = False,
    guesses: GuessPolicy = GuessPolicy.FAIL,
) -> FixResult:
    """Repair unknown element columns of one PDBQT file.

    With a distinct output path the repaired text is always written there,
    failed lines included (they keep their "?"). Without an output path,
    or when it points at the input, the file is rewritten in place through
    a scratch file, and only when every "?" record could be repaired.

    Args:
        input_path: PDBQT file to repair.
        output_path: Destination file. If None, repairs in place.
        backup: If True and repairing in place, keep a .bak copy.
        guesses: How to treat ambiguous element guesses.

    Returns:
        FixResult with the per-file statistics.
    """
    input_path = Path(input_path)
    in_place = output_path is None or _same_file(input_path, Path(output_path))
    output_path = input_path if in_place else Path(output_path)

    try:
        if in_place:
            stats, written = _fix_in_place(input_path, backup, guesses)
        else:
            stats = RepairStats()
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with _open_input(input_path) as src, _open_output(output_path) as dst:
                repair(src, dst, stats, str(input_path), guesses)
            written = True
    except OSError as e:
        return FixResult(
            input_path=str(input_path),
            output_path=str(output_path),
            success=False,
            written=False,
            stats=RepairStats(failed_files=1),
            error=f"Error processing file: {e}",
        )

    return FixResult(
        input_path=str(input_path),
        output_path=str(output_path),
        success=stats.failed_files == 0,
        written=written,
        stats=stats,
    )


def _same_file(a: Path, b: Path) -> bool:
    if a.exists() and b.exists():
        return a.samefile(b)
    return a.resolve() == b.resolve()


def fix_stream(
    src: TextIO,
    dst: TextIO,
    guesses: GuessPolicy = GuessPolicy.FAIL,
) -> FixResult:
    """Repair a PDBQT stream, e.g. standard input to standard output."""
    stats = RepairStats()
    repair(src, dst, stats, "", guesses)
    return FixResult(
        input_path="-",
        output_path="-",
        success=stats.failed_files == 0,
        written=True,
        stats=stats,
    )


def fix_files(
    input_paths: list[Path],
    output_template: str | None = DEFAULT_OUTPUT_TEMPLATE,
    backup: bool = False,
    guesses: GuessPolicy = GuessPolicy.FAIL,
    on_result: Callable[[FixResult], None] | None = None,
) -> RunResult:
    """Repair several files one after another.

    Args:
        input_paths: Files to repair.
        output_template: Output name template; None repairs in place.
        backup: Keep .bak copies of files repaired in place.
        guesses: How to treat ambiguous element guesses.
        on_result: Optional callback invoked after each file.

    Returns:
        RunResult with per-file results and the aggregated statistics.
    """
    results: list[FixResult] = []
    totals = RepairStats()

    for input_path in input_paths:
        output_path = (
            render_output_path(output_template, input_path)
            if output_template is not None
            else None
        )
        result = fix_file(input_path, output_path, backup=backup, guesses=guesses)
        results.append(result)
        totals.merge(result.stats)
        if on_result:
            on_result(result)

    return RunResult(results=results, totals=totals)
