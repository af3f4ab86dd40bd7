#!/usr/bin/env python3
"""
Domain models for ecodviz
Defines the domain descriptors handed to the structure viewer
"""
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from ecodviz.exceptions import ValidationError
from ecodviz.utils.range_utils import range_chain, range_span

# Colours assigned to domains of a protein page, in domain order
PROTEIN_DOMAIN_COLORS = ['#4285F4', '#EA4335', '#FBBC05', '#34A853', '#9C27B0', '#FF9800']

# e<pdb id><chain><domain number>, e.g. e4ubpA1
_ECOD_DOMAIN_ID_RE = re.compile(r'^e\w{4}([A-Za-z0-9]+?)(\d+)$')


def chain_from_domain_id(domain_id: str) -> Optional[str]:
    """Extract the chain from an ECOD domain id

    Args:
        domain_id: Domain id such as ``e4ubpA1``

    Returns:
        Chain id, or None if the id does not follow the ECOD pattern
    """
    if not domain_id:
        return None
    match = _ECOD_DOMAIN_ID_RE.match(domain_id)
    return match.group(1) if match else None


@dataclass(frozen=True)
class DomainClassification:
    """ECOD hierarchy assignment of a domain"""
    x_group: Optional[str] = None
    h_group: Optional[str] = None
    t_group: Optional[str] = None
    f_group: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x_group': self.x_group,
            'h_group': self.h_group,
            't_group': self.t_group,
            'f_group': self.f_group,
        }


@dataclass(frozen=True)
class DomainDescriptor:
    """A classified domain to be projected onto a structure chain

    ``start``/``end`` are in sequence numbering. ``pdb_range`` (or the
    ``pdb_start``/``pdb_end`` pair) is an already-resolved range in structure
    numbering and takes precedence over any mapping heuristic.
    """
    id: str
    start: int
    end: int
    color: Optional[str] = None
    label: Optional[str] = None
    chain_id: Optional[str] = None
    pdb_range: Optional[str] = None
    pdb_start: Optional[str] = None
    pdb_end: Optional[str] = None
    classification: DomainClassification = field(default_factory=DomainClassification)

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError(
                f"Domain {self.id} has start {self.start} after end {self.end}",
                {"domain_id": self.id, "start": self.start, "end": self.end}
            )

    @property
    def sequence_range(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def display_label(self) -> str:
        return self.label or self.id

    @property
    def chain(self) -> Optional[str]:
        """Chain override: explicit chain, else the chain prefix of pdb_range"""
        if self.chain_id:
            return self.chain_id
        if self.pdb_range:
            return range_chain(self.pdb_range)
        return None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any], index: int = 0) -> 'DomainDescriptor':
        """Create instance from a view_dom_clsrel_* row

        Args:
            row: Database row as dictionary
            index: Position of the domain on its protein, used for colouring

        Returns:
            DomainDescriptor instance
        """
        range_str = row.get('range') or ''
        span = range_span(range_str)
        if span is None:
            raise ValidationError(f"Domain {row.get('id')} has no usable range: '{range_str}'",
                                  {"domain_id": row.get('id'), "range": range_str})

        domain_id = str(row.get('id'))
        return cls(
            id=domain_id,
            start=span[0],
            end=span[1],
            color=PROTEIN_DOMAIN_COLORS[index % len(PROTEIN_DOMAIN_COLORS)],
            label=row.get('fname') or f"Domain {index + 1}",
            chain_id=range_chain(range_str) or chain_from_domain_id(domain_id),
            pdb_range=row.get('pdb_range'),
            classification=DomainClassification(
                x_group=row.get('xid'),
                h_group=row.get('hid'),
                t_group=row.get('tid'),
                f_group=row.get('fid'),
            )
        )

    @classmethod
    def from_spec(cls, spec: str, index: int = 0) -> 'DomainDescriptor':
        """Create instance from a command line spec ``ID:START-END[:CHAIN]``

        Raises:
            ValidationError: If the spec cannot be parsed
        """
        parts = spec.split(':')
        if len(parts) not in (2, 3):
            raise ValidationError(f"Invalid domain spec '{spec}', expected ID:START-END[:CHAIN]")
        span = range_span(parts[1])
        if span is None:
            raise ValidationError(f"Invalid range in domain spec '{spec}'")
        chain = parts[2] if len(parts) == 3 else chain_from_domain_id(parts[0])
        return cls(id=parts[0], start=span[0], end=span[1], chain_id=chain)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary

        Returns:
            Dictionary representation
        """
        return {
            'id': self.id,
            'start': self.start,
            'end': self.end,
            'color': self.color,
            'label': self.label,
            'chain_id': self.chain_id,
            'pdb_range': self.pdb_range,
            'pdb_start': self.pdb_start,
            'pdb_end': self.pdb_end,
            'classification': self.classification.to_dict(),
        }


def domain_chain(domains: List[DomainDescriptor]) -> Optional[str]:
    """Chain implied by the first domain of a list (ECOD id or range prefix)"""
    for domain in domains:
        return domain.chain or chain_from_domain_id(domain.id)
    return None
