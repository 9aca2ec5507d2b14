"""Pytest fixtures for fix_pdbqt_elem tests."""

from pathlib import Path

import pytest


def pdbqt_line(
    atom: str = " N  ",
    residue: str = "ALA",
    element: str = "?",
    tag: str = "ATOM  ",
    serial: int = 1,
) -> str:
    """Build a fixed-width record with the element field at offset 77."""
    return (
        f"{tag}{serial:>5} {atom:<4} {residue:>3} A{1:>4}    "
        f"{11.104:8.3f}{6.134:8.3f}{-6.504:8.3f}{1.0:6.2f}{0.0:6.2f}    "
        f"{-0.351:+6.3f} {element}"
    )


@pytest.fixture
def make_line():
    """Factory for PDBQT record lines."""
    return pdbqt_line


@pytest.fixture
def fixable_text() -> str:
    """PDBQT text whose unknown elements can all be inferred."""
    return "\n".join(
        [
            "REMARK  test ligand",
            pdbqt_line(" N  ", "LYS", serial=1),
            pdbqt_line(" O  ", "LYS", serial=2),
            pdbqt_line("ZN  ", "ZN ", tag="HETATM", serial=3),
            pdbqt_line(" C  ", "LYS", element="C", serial=4),
            "TER",
        ]
    )


@pytest.fixture
def ambiguous_text() -> str:
    """PDBQT text with one fixable and one ambiguous unknown element."""
    return "\n".join(
        [
            pdbqt_line(" O  ", "ALA", serial=1),
            pdbqt_line(" C  ", "ALA", serial=2),
        ]
    )


@pytest.fixture
def fixable_pdbqt(tmp_path: Path, fixable_text: str) -> Path:
    """Create a PDBQT file whose unknown elements can all be fixed."""
    path = tmp_path / "ligand.pdbqt"
    path.write_text(fixable_text)
    return path


@pytest.fixture
def ambiguous_pdbqt(tmp_path: Path, ambiguous_text: str) -> Path:
    """Create a PDBQT file containing an element that cannot be inferred."""
    path = tmp_path / "ambiguous.pdbqt"
    path.write_text(ambiguous_text)
    return path


@pytest.fixture
def clean_pdbqt(tmp_path: Path) -> Path:
    """Create a PDBQT file with no unknown elements."""
    path = tmp_path / "clean.pdbqt"
    path.write_text(
        "\n".join(
            [
                pdbqt_line(" N  ", "ALA", element="N", serial=1),
                pdbqt_line(" O  ", "ALA", element="OA", serial=2),
            ]
        )
    )
    return path
