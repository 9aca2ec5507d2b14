"""Detection of unknown element columns in PDBQT files."""

from __future__ import annotations

import multiprocessing
import random
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from fix_pdbqt_elem.elements import classify
from fix_pdbqt_elem.fix import ENCODING
from fix_pdbqt_elem.models import ScanResult, UnknownElementResult, UnknownRecord
from fix_pdbqt_elem.repair import iter_lines, unknown_element_fields

if TYPE_CHECKING:
    from collections.abc import Callable


def find_unknown_elements(file_path: str) -> UnknownElementResult | None:
    """List the records of one file whose element column is unknown.

    Args:
        file_path: Path to the PDBQT file to analyze.

    Returns:
        UnknownElementResult if unknown elements are found, None otherwise
        (including files that cannot be read).
    """
    records: list[UnknownRecord] = []
    try:
        with open(file_path, encoding=ENCODING, newline="") as f:
            for line_number, line in enumerate(iter_lines(f), start=1):
                fields = unknown_element_fields(line)
                if fields is None:
                    continue
                atom_name, residue = fields
                result = classify(atom_name, residue)
                records.append(
                    UnknownRecord(
                        line_number=line_number,
                        atom_name=atom_name,
                        residue=residue,
                        code=result.code,
                        resolution=result.resolution,
                    )
                )
    except OSError:
        return None

    if not records:
        return None

    return UnknownElementResult(file_path=file_path, records=records)


def _process_file(file_path: str) -> UnknownElementResult | None:
    """Wrapper for multiprocessing (accepts string path directly)."""
    return find_unknown_elements(file_path)


def scan_files(
    file_list: list[Path],
    workers: int = 4,
    limit: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> ScanResult:
    """Scan PDBQT files for unknown element columns.

    Files are scanned in parallel, each file by a single worker.

    Args:
        file_list: Files to scan.
        workers: Number of parallel workers.
        limit: If set, randomly sample this many files from the list.
        progress_callback: Optional callback(current, total) for progress updates.

    Returns:
        ScanResult containing all findings, sorted by file path.
    """
    files = [str(f) for f in file_list]

    if limit is not None and limit < len(files):
        files = random.sample(files, limit)

    results: list[UnknownElementResult] = []

    with multiprocessing.Pool(processes=workers) as pool:
        for i, result in enumerate(pool.imap_unordered(_process_file, files)):
            if result is not None:
                results.append(result)
            if progress_callback:
                progress_callback(i + 1, len(files))

    results.sort(key=lambda r: r.file_path)

    return ScanResult(
        scan_date=date.today().isoformat(),
        total_scanned=len(files),
        affected_files=len(results),
        entries=results,
    )


def result_to_dict(result: ScanResult) -> dict:
    """Convert ScanResult to a JSON-serializable dictionary."""
    return {
        "scan_date": result.scan_date,
        "total_scanned": result.total_scanned,
        "affected_files": result.affected_files,
        "entries": [
            {
                "file_path": entry.file_path,
                "unknown_count": len(entry.records),
                "fixable_count": entry.fixable,
                "records": [
                    {
                        "line": record.line_number,
                        "atom_name": record.atom_name,
                        "residue": record.residue,
                        "code": record.code,
                        "resolution": record.resolution.value,
                    }
                    for record in entry.records
                ],
            }
            for entry in result.entries
        ],
    }
