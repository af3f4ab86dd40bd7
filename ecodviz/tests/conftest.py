#!/usr/bin/env python3
"""
Shared fixtures for ecodviz tests

Structures are synthesized either directly as atom records (fast, for the
analyzer and styler) or as PDB text parsed through Biopython (for the loader
and the end-to-end paths).
"""

import pytest
from typing import Dict, Iterable, List, Optional, Tuple
from unittest.mock import Mock

from ecodviz.models.domain import DomainDescriptor
from ecodviz.models.structure import AtomRecord
from ecodviz.structure.viewer import AtomIndex, HeadlessViewer

PROTEIN_ATOMS = ('N', 'CA', 'C', 'O')
NUCLEIC_ATOMS = ('P', "C4'", 'N1')

# chain id -> (residue numbers, 'protein' | 'nucleic' | 'ligand')
ChainLayout = Dict[str, Tuple[Iterable[int], str]]


def build_atoms(layout: ChainLayout) -> List[AtomRecord]:
    """Atom records for the given chains, serials in chain order"""
    atoms = []
    serial = 0
    for chain_id, (residues, kind) in layout.items():
        if kind == 'protein':
            names, resn, hetero = PROTEIN_ATOMS, 'ALA', False
        elif kind == 'nucleic':
            names, resn, hetero = NUCLEIC_ATOMS, 'DA', False
        else:
            names, resn, hetero = ('C1', 'O1'), 'LIG', True
        for resi in residues:
            for name in names:
                serial += 1
                atoms.append(AtomRecord(serial, chain_id, resi, name, resn, hetero))
    return atoms


def build_pdb_text(layout: ChainLayout) -> str:
    """Fixed-column PDB text for the given chains"""
    lines = []
    for atom in build_atoms(layout):
        record = 'HETATM' if atom.hetero else 'ATOM  '
        name = atom.atom if len(atom.atom) == 4 else f" {atom.atom:<3}"
        element = atom.atom[0]
        x, y, z = atom.serial * 0.5, atom.resi * 0.25, 1.0
        lines.append(
            f"{record}{atom.serial:>5} {name} {atom.resn:>3} {atom.chain}{atom.resi:>4}    "
            f"{x:8.3f}{y:8.3f}{z:8.3f}{1.0:6.2f}{0.0:6.2f}          {element:>2}"
        )
    lines.append("END")
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_viewer():
    """Factory for a headless viewer over a synthetic structure"""
    def _make(layout: ChainLayout, structure_id: str = 'test') -> HeadlessViewer:
        return HeadlessViewer(AtomIndex(build_atoms(layout), structure_id))
    return _make


@pytest.fixture
def protein_dna_viewer(make_viewer):
    """Chain A: 300 protein residues; chain B: 5 nucleotides"""
    return make_viewer({
        'A': (range(1, 301), 'protein'),
        'B': (range(1, 6), 'nucleic'),
    })


@pytest.fixture
def offset_viewer(make_viewer):
    """Single protein chain A numbered 159-400"""
    return make_viewer({'A': (range(159, 401), 'protein')})


@pytest.fixture
def pdb_text():
    """PDB text with a protein chain A (1-120) and a DNA chain B (1-12)"""
    return build_pdb_text({
        'A': (range(1, 121), 'protein'),
        'B': (range(1, 13), 'nucleic'),
    })


@pytest.fixture
def make_domain():
    """Factory for domain descriptors"""
    def _make(domain_id: str, start: int, end: int, **kwargs) -> DomainDescriptor:
        return DomainDescriptor(id=domain_id, start=start, end=end, **kwargs)
    return _make


@pytest.fixture
def mock_db():
    """DBManager stand-in answering execute_dict_query"""
    db = Mock()
    db.execute_dict_query.return_value = []
    return db


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML configuration and return its path"""
    def _write(content: str, name: str = 'config.yml') -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return _write
