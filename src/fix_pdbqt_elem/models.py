"""Data models for fix_pdbqt_elem."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Resolution(str, Enum):
    """How reliably an element code was inferred."""

    CONFIDENT = "confident"
    GUESS = "guess"
    UNRESOLVED = "unresolved"


class GuessPolicy(str, Enum):
    """What the repair loop does with a GUESS classification.

    UNRESOLVED classifications always fail, whatever the policy.
    """

    FAIL = "fail"
    WRITE = "write"
    SKIP = "skip"


@dataclass(frozen=True)
class Classification:
    """Inferred docking element code for one atom record."""

    code: str
    resolution: Resolution
    warning: str | None = None

    @property
    def confident(self) -> bool:
        return self.resolution is Resolution.CONFIDENT


@dataclass
class LineIssue:
    """A diagnostic raised for a single record line."""

    line_number: int
    atom_name: str
    residue: str
    code: str
    resolution: Resolution
    source: str = ""
    fatal: bool = True
    message: str = ""

    def describe(self) -> str:
        """Render the issue the way the command line reports it."""
        if self.fatal:
            text = f"unsupported element {self.code} on line {self.line_number}"
        else:
            text = f"{self.message or 'element ' + self.code} on line {self.line_number}"
        if self.source:
            text += f" in {self.source}"
        return text


@dataclass
class RepairStats:
    """Line and file counters accumulated while repairing."""

    modified_lines: int = 0
    failed_lines: int = 0
    skipped_lines: int = 0
    modified_files: int = 0
    failed_files: int = 0
    skipped_files: int = 0
    issues: list[LineIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[LineIssue]:
        return [i for i in self.issues if i.fatal]

    @property
    def warnings(self) -> list[LineIssue]:
        return [i for i in self.issues if not i.fatal]

    def merge(self, other: RepairStats) -> None:
        """Add the counters and issues of another stats object to this one."""
        self.modified_lines += other.modified_lines
        self.failed_lines += other.failed_lines
        self.skipped_lines += other.skipped_lines
        self.modified_files += other.modified_files
        self.failed_files += other.failed_files
        self.skipped_files += other.skipped_files
        self.issues.extend(other.issues)


@dataclass
class FixResult:
    """Result of repairing a single file or stream."""

    input_path: str
    output_path: str
    success: bool
    written: bool
    stats: RepairStats = field(default_factory=RepairStats)
    error: str | None = None

    @property
    def status(self) -> str:
        if not self.success:
            return "failed"
        if self.stats.modified_lines:
            return "modified"
        return "skipped"


@dataclass
class RunResult:
    """Result of repairing a batch of files."""

    results: list[FixResult]
    totals: RepairStats


@dataclass
class UnknownRecord:
    """A record whose element column holds the unknown marker."""

    line_number: int
    atom_name: str
    residue: str
    code: str
    resolution: Resolution


@dataclass
class UnknownElementResult:
    """Unknown-element records found in a single file."""

    file_path: str
    records: list[UnknownRecord] = field(default_factory=list)

    @property
    def fixable(self) -> int:
        return sum(1 for r in self.records if r.resolution is Resolution.CONFIDENT)


@dataclass
class ScanResult:
    """Result of scanning multiple files."""

    scan_date: str
    total_scanned: int
    affected_files: int
    entries: list[UnknownElementResult]
