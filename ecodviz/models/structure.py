#!/usr/bin/env python3
"""
Structure models for ecodviz

Atoms as seen through a viewer, per-chain composition, and the chain and
residue numbering chosen for domain display.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, FrozenSet

from ecodviz.exceptions import StructureError

CHAIN_TYPE_PROTEIN = 'protein'
CHAIN_TYPE_NUCLEIC_ACID = 'nucleic acid'
CHAIN_TYPE_UNKNOWN = 'unknown'

PROTEIN_MARKER_ATOM = 'CA'
NUCLEIC_ACID_MARKER_ATOM = 'P'


@dataclass(frozen=True)
class AtomRecord:
    """One atom of a loaded structure"""
    serial: int
    chain: str
    resi: int
    atom: str
    resn: str = ''
    hetero: bool = False


@dataclass(frozen=True)
class ChainDescriptor:
    """Atom composition of one chain"""
    chain_id: str
    atom_count: int
    ca_count: int
    p_count: int
    residues: FrozenSet[int]
    atom_names: FrozenSet[str]
    protein_threshold: int = 10
    nucleic_acid_threshold: int = 5

    @classmethod
    def from_atoms(cls, chain_id: str, atoms: List[AtomRecord],
                   protein_threshold: int = 10,
                   nucleic_acid_threshold: int = 5) -> 'ChainDescriptor':
        return cls(
            chain_id=chain_id,
            atom_count=len(atoms),
            ca_count=sum(1 for a in atoms if a.atom == PROTEIN_MARKER_ATOM),
            p_count=sum(1 for a in atoms if a.atom == NUCLEIC_ACID_MARKER_ATOM),
            residues=frozenset(a.resi for a in atoms),
            atom_names=frozenset(a.atom for a in atoms),
            protein_threshold=protein_threshold,
            nucleic_acid_threshold=nucleic_acid_threshold,
        )

    @property
    def residue_count(self) -> int:
        return len(self.residues)

    @property
    def is_protein(self) -> bool:
        return self.ca_count > self.protein_threshold

    @property
    def is_nucleic_acid(self) -> bool:
        return self.p_count > self.nucleic_acid_threshold

    @property
    def protein_score(self) -> float:
        return self.ca_count / max(self.atom_count, 1)

    @property
    def nucleic_acid_score(self) -> float:
        return self.p_count / max(self.atom_count, 1)

    @property
    def chain_type(self) -> str:
        if self.is_protein:
            return CHAIN_TYPE_PROTEIN
        if self.is_nucleic_acid:
            return CHAIN_TYPE_NUCLEIC_ACID
        return CHAIN_TYPE_UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'chain': self.chain_id,
            'atom_count': self.atom_count,
            'ca_count': self.ca_count,
            'p_count': self.p_count,
            'residue_count': self.residue_count,
            'is_protein': self.is_protein,
            'is_nucleic_acid': self.is_nucleic_acid,
            'protein_score': round(self.protein_score, 4),
            'nucleic_acid_score': round(self.nucleic_acid_score, 4),
        }


@dataclass
class StructureInfo:
    """Chain chosen for display and its residue numbering"""
    actual_chain: str
    original_chain: Optional[str]
    residue_list: List[int]
    all_chains: List[str]
    chain_type: str
    chains: List[ChainDescriptor] = field(default_factory=list)
    warnings: List[StructureError] = field(default_factory=list)

    def __post_init__(self):
        self.residue_list = sorted(set(self.residue_list))
        if self.actual_chain not in self.all_chains:
            raise StructureError(f"Chain {self.actual_chain} not found",
                                 {"actual_chain": self.actual_chain,
                                  "all_chains": list(self.all_chains)})

    @property
    def min_residue(self) -> Optional[int]:
        return self.residue_list[0] if self.residue_list else None

    @property
    def max_residue(self) -> Optional[int]:
        return self.residue_list[-1] if self.residue_list else None

    @property
    def total_residues(self) -> int:
        return len(self.residue_list)

    @property
    def chain_fallback(self) -> bool:
        """True when the requested chain was not the one selected"""
        return self.original_chain is not None and self.original_chain != self.actual_chain

    def contains(self, start: int, end: int) -> bool:
        """Whether [start, end] lies within the chain's residue bounds"""
        if not self.residue_list:
            return False
        return self.min_residue <= start and end <= self.max_residue

    def chain(self, chain_id: str) -> Optional[ChainDescriptor]:
        for descriptor in self.chains:
            if descriptor.chain_id == chain_id:
                return descriptor
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'actual_chain': self.actual_chain,
            'original_chain': self.original_chain,
            'min_residue': self.min_residue,
            'max_residue': self.max_residue,
            'total_residues': self.total_residues,
            'all_chains': list(self.all_chains),
            'chain_type': self.chain_type,
            'warnings': [w.message for w in self.warnings],
        }


MAP_EXPLICIT_RANGE = 'explicit_range'
MAP_EXPLICIT_BOUNDS = 'explicit_bounds'
MAP_DIRECT = 'direct'
MAP_OFFSET = 'offset'


@dataclass(frozen=True)
class MappedRange:
    """A domain range resolved into structure residue numbering"""
    range_str: str
    method: str
    offset: int = 0

    def __str__(self) -> str:
        return self.range_str
