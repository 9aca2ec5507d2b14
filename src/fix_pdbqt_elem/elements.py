"""Element tables and docking element inference for PDBQT atom names."""

from __future__ import annotations

import string

import gemmi

from fix_pdbqt_elem.models import Classification, Resolution

# AutoDock types that only exist as the plain one-letter element
PLAIN_TYPES = frozenset("PFIKUB")

# Guessable from the atom name, but may really be an acceptor/aromatic type
AMBIGUOUS_TYPES = frozenset("CHS")

# Elements AutoDock Vina refuses even though AutoDock4 knows them
VINA_UNSUPPORTED = frozenset("VB")

# Two-letter AutoDock types (metals and halogens)
METAL_TYPES = frozenset(
    {
        "Se", "Cl", "Br", "Zn", "Fe", "Mg", "Ca", "Mn", "Cu", "Na",
        "Hg", "Ni", "Co", "Cd", "As", "Sr", "Cs", "Mo", "Si", "Pt",
        "Li", "Sb", "Bi", "Ti", "Sn", "Ra", "Tl", "Cr",
    }
)  # fmt: skip

ACCEPTOR_N_RESIDUES = frozenset({"LYS", "ARG"})
PLAIN_N_RESIDUES = frozenset({"ASN", "GLN"})


def is_element_symbol(symbol: str) -> bool:
    """Return True if symbol names a periodic-table element.

    Args:
        symbol: Element symbol, any case.

    Returns:
        True when gemmi resolves the symbol to a real element.
    """
    if not symbol.isalpha():
        return False
    return gemmi.Element(symbol).atomic_number > 0


def _classify_single(letter: str, residue: str) -> Classification:
    if letter in PLAIN_TYPES:
        return Classification(letter, Resolution.CONFIDENT)
    if letter == "O":
        return Classification("OA", Resolution.CONFIDENT)
    if letter == "N":
        if residue in ACCEPTOR_N_RESIDUES:
            return Classification("NA", Resolution.CONFIDENT)
        if residue in PLAIN_N_RESIDUES:
            return Classification("N", Resolution.CONFIDENT)
        return Classification("N", Resolution.GUESS)
    if letter in AMBIGUOUS_TYPES:
        return Classification(letter, Resolution.GUESS)
    if letter in VINA_UNSUPPORTED:
        return Classification(
            letter,
            Resolution.CONFIDENT,
            warning=f"AutoDock Vina does not support element {letter}",
        )
    return Classification(letter, Resolution.UNRESOLVED)


def classify(atom_name: str, residue: str) -> Classification:
    """Infer the docking element code from an atom name field.

    A leading blank or digit (" N", "1H") marks a single-letter element
    in the second column. Anything else is read as a two-letter symbol
    and normalized to title case ("ZN" -> "Zn").

    Args:
        atom_name: The two-character atom name field (columns 13-14).
        residue: The three-character residue name (columns 18-20).

    Returns:
        Classification holding the code and how reliable it is.

    Raises:
        ValueError: If atom_name is not exactly two characters.
    """
    if len(atom_name) != 2:
        raise ValueError(f"Atom name field must be 2 characters, got {atom_name!r}")

    first, second = atom_name
    if first in string.whitespace or first in string.digits:
        return _classify_single(second.upper(), residue)

    symbol = first.upper() + second.lower()
    if symbol in METAL_TYPES:
        return Classification(symbol, Resolution.CONFIDENT)
    if is_element_symbol(symbol):
        return Classification(symbol, Resolution.GUESS)
    return Classification(symbol, Resolution.UNRESOLVED)
