#!/usr/bin/env python3
"""
Projection of domain ranges onto structure residue numbering.

Order of precedence, first success wins:

1. explicit structure range string (``pdb_range``), taken verbatim
2. explicit structure bounds (``pdb_start``/``pdb_end``)
3. direct: sequence numbers already fall inside the chain's residue bounds
4. offset: shift by ``min_residue - 1`` (sequence numbering starting at 1)

No alignment is attempted; anything else is unmappable.
"""
import logging
from typing import Optional

from ecodviz.models.domain import DomainDescriptor
from ecodviz.models.structure import (
    StructureInfo, MappedRange,
    MAP_EXPLICIT_RANGE, MAP_EXPLICIT_BOUNDS, MAP_DIRECT, MAP_OFFSET
)
from ecodviz.utils.range_utils import strip_chains

logger = logging.getLogger("ecodviz.structure.range_mapper")


def map_sequence_range(start: int, end: int, structure_info: StructureInfo) -> Optional[MappedRange]:
    """Map a sequence range with the direct, then offset heuristic"""
    if structure_info.contains(start, end):
        return MappedRange(f"{start}-{end}", MAP_DIRECT)

    offset = structure_info.min_residue - 1 if structure_info.total_residues else 0
    mapped_start = start + offset
    mapped_end = end + offset
    if offset and structure_info.contains(mapped_start, mapped_end):
        logger.debug(f"Mapped sequence {start}-{end} to structure {mapped_start}-{mapped_end}")
        return MappedRange(f"{mapped_start}-{mapped_end}", MAP_OFFSET, offset)

    logger.debug(f"Could not map sequence range {start}-{end} to structure "
                 f"({structure_info.min_residue}-{structure_info.max_residue})")
    return None


def map_range(domain: DomainDescriptor,
              structure_info: Optional[StructureInfo]) -> Optional[MappedRange]:
    """Resolve a domain's range in the structure's residue numbering

    Args:
        domain: Domain to place
        structure_info: Analysis of the loaded structure; without it only
            explicit structure ranges resolve

    Returns:
        MappedRange, or None when the domain cannot be placed
    """
    if domain.pdb_range:
        if ':' not in domain.pdb_range:
            return MappedRange(domain.pdb_range, MAP_EXPLICIT_RANGE)
        # ECOD chain-prefixed form, e.g. A:10-50,A:60-80
        residues = strip_chains(domain.pdb_range)
        if residues:
            return MappedRange(residues, MAP_EXPLICIT_RANGE)
        logger.warning(f"Domain {domain.id} has unparseable structure range '{domain.pdb_range}'")

    if domain.pdb_start and domain.pdb_end:
        return MappedRange(f"{domain.pdb_start}-{domain.pdb_end}", MAP_EXPLICIT_BOUNDS)

    if structure_info is None:
        return None
    return map_sequence_range(domain.start, domain.end, structure_info)
