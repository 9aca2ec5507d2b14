"""Line-level repair of unknown element columns in PDBQT text."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from typing import TextIO

from fix_pdbqt_elem.elements import classify
from fix_pdbqt_elem.models import (
    Classification,
    GuessPolicy,
    LineIssue,
    RepairStats,
    Resolution,
)

RECORD_TAGS = frozenset({"ATOM  ", "HETATM", "ANISOU"})
MIN_RECORD_LENGTH = 78
UNKNOWN_ELEMENT = "?"

# 0-based slices of the fixed-width fields
ATOM_NAME = slice(12, 14)
RESIDUE_NAME = slice(17, 20)
ELEMENT = slice(77, 79)


def iter_lines(source: Iterable[str]) -> Iterator[str]:
    """Yield lines with their terminators removed.

    Recognizes "\\n", "\\r\\n" and "\\r" endings. Input that ends with a
    terminator yields a final empty line, and empty input yields a single
    empty line, so joining the result with "\\n" reproduces the line
    structure of the input.

    Args:
        source: Text stream (open with newline="" to see every ending)
            or any iterable of strings.
    """
    terminated = True
    for raw in source:
        if raw.endswith("\r\n"):
            yield raw[:-2]
            terminated = True
        elif raw.endswith(("\n", "\r")):
            yield raw[:-1]
            terminated = True
        else:
            yield raw
            terminated = False
    if terminated:
        yield ""


def unknown_element_fields(line: str) -> tuple[str, str] | None:
    """Return (atom_name, residue) if line is a record with an unknown element.

    Returns None for short lines, other record types and records whose
    element column holds anything but the unknown marker.
    """
    if len(line) < MIN_RECORD_LENGTH or line[:6] not in RECORD_TAGS:
        return None
    if line[ELEMENT].rstrip() != UNKNOWN_ELEMENT:
        return None
    return line[ATOM_NAME], line[RESIDUE_NAME]


def patch_element(line: str, code: str) -> str:
    """Write code into the element columns of line.

    The line is cut after column 77 and the code appended. A line that
    runs past column 79 keeps its tail with the code padded to the
    two-column field.
    """
    if len(line) > ELEMENT.stop:
        return line[: ELEMENT.start] + code.ljust(2) + line[ELEMENT.stop :]
    return line[: ELEMENT.start] + code


def _should_write(result: Classification, guesses: GuessPolicy) -> bool:
    if result.confident:
        return True
    return result.resolution is Resolution.GUESS and guesses is GuessPolicy.WRITE


def repair(
    lines: Iterable[str],
    output: TextIO,
    stats: RepairStats,
    source: str = "",
    guesses: GuessPolicy = GuessPolicy.FAIL,
) -> bool:
    """Repair unknown element columns line by line.

    Every input line is written to output, patched or verbatim, joined by
    "\\n" with no terminator after the last line. Counters in stats are
    updated as lines are seen, and the whole input is finally counted as
    one modified, failed or skipped file.

    Args:
        lines: Input lines, with or without terminators.
        output: Sink receiving the repaired text.
        stats: Counters to update.
        source: Label (usually the file path) attached to diagnostics.
        guesses: How to treat classifications that are only a guess.

    Returns:
        True if at least one line was modified and none failed.
    """
    modified = failed = False

    for line_number, line in enumerate(iter_lines(lines), start=1):
        fields = unknown_element_fields(line)
        if fields is not None:
            atom_name, residue = fields
            result = classify(atom_name, residue)

            if _should_write(result, guesses):
                line = patch_element(line, result.code)
                stats.modified_lines += 1
                modified = True
                if result.warning:
                    stats.issues.append(
                        LineIssue(
                            line_number=line_number,
                            atom_name=atom_name,
                            residue=residue,
                            code=result.code,
                            resolution=result.resolution,
                            source=source,
                            fatal=False,
                            message=result.warning,
                        )
                    )
            elif result.resolution is Resolution.GUESS and guesses is GuessPolicy.SKIP:
                stats.skipped_lines += 1
                stats.issues.append(
                    LineIssue(
                        line_number=line_number,
                        atom_name=atom_name,
                        residue=residue,
                        code=result.code,
                        resolution=result.resolution,
                        source=source,
                        fatal=False,
                        message=f"left ambiguous element {result.code} unset",
                    )
                )
            else:
                stats.failed_lines += 1
                failed = True
                stats.issues.append(
                    LineIssue(
                        line_number=line_number,
                        atom_name=atom_name,
                        residue=residue,
                        code=result.code,
                        resolution=result.resolution,
                        source=source,
                    )
                )

        if line_number > 1:
            output.write("\n")
        output.write(line)

    if failed:
        stats.failed_files += 1
    elif modified:
        stats.modified_files += 1
    else:
        stats.skipped_files += 1

    return modified and not failed


def repair_text(
    text: str,
    source: str = "",
    guesses: GuessPolicy = GuessPolicy.FAIL,
) -> tuple[str, RepairStats]:
    """Repair a whole PDBQT text held in memory.

    Returns:
        Tuple of (repaired text, stats for this text).
    """
    stats = RepairStats()
    output = io.StringIO()
    repair(io.StringIO(text, newline=""), output, stats, source, guesses)
    return output.getvalue(), stats
