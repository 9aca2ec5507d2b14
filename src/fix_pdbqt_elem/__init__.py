"""Fix unknown element columns in PDBQT files.

This package infers AutoDock element types for PDBQT atom records whose
element column is marked unknown with a question mark (?), and rewrites
that column in place.
"""

from fix_pdbqt_elem.elements import classify
from fix_pdbqt_elem.find import find_unknown_elements, scan_files
from fix_pdbqt_elem.fix import fix_file, fix_files, render_output_path
from fix_pdbqt_elem.models import (
    Classification,
    FixResult,
    GuessPolicy,
    LineIssue,
    RepairStats,
    Resolution,
    RunResult,
    ScanResult,
    UnknownElementResult,
    UnknownRecord,
)
from fix_pdbqt_elem.repair import repair, repair_text

__version__ = "1.0.1"

__all__ = [
    "classify",
    "repair",
    "repair_text",
    "fix_file",
    "fix_files",
    "render_output_path",
    "find_unknown_elements",
    "scan_files",
    "Classification",
    "FixResult",
    "GuessPolicy",
    "LineIssue",
    "RepairStats",
    "Resolution",
    "RunResult",
    "ScanResult",
    "UnknownElementResult",
    "UnknownRecord",
]
