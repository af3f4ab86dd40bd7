#!/usr/bin/env python3
"""
Chain classification and target chain selection for a loaded structure.
"""
import logging
from collections import OrderedDict
from typing import Optional, List, Dict, Any

from ecodviz.exceptions import NoProteinChainFound, ChainNotPresent, StructureError
from ecodviz.models.structure import (
    AtomRecord, ChainDescriptor, StructureInfo
)


def select_atoms(source, selection: Optional[Dict[str, Any]] = None) -> List[AtomRecord]:
    """Run an atom query against a Viewer or an AtomIndex"""
    if hasattr(source, 'select_atoms'):
        return source.select_atoms(selection or {})
    return source.select(selection or {})


class StructureAnalyzer:
    """Classify chains as protein / nucleic acid and pick the chain to display"""

    def __init__(self, protein_threshold: int = 10, nucleic_acid_threshold: int = 5):
        """Initialize analyzer

        Args:
            protein_threshold: A chain with more CA atoms than this is protein
            nucleic_acid_threshold: A chain with more P atoms than this is nucleic acid
        """
        self.protein_threshold = protein_threshold
        self.nucleic_acid_threshold = nucleic_acid_threshold
        self.logger = logging.getLogger("ecodviz.structure.analyzer")

    @classmethod
    def from_config(cls, config_manager) -> 'StructureAnalyzer':
        protein_threshold, nucleic_acid_threshold = config_manager.get_chain_thresholds()
        return cls(protein_threshold, nucleic_acid_threshold)

    def describe_chains(self, source) -> List[ChainDescriptor]:
        """Group every atom by chain, in structure order"""
        grouped: 'OrderedDict[str, List[AtomRecord]]' = OrderedDict()
        for atom in select_atoms(source):
            grouped.setdefault(atom.chain, []).append(atom)

        chains = [
            ChainDescriptor.from_atoms(chain_id, atoms,
                                       self.protein_threshold,
                                       self.nucleic_acid_threshold)
            for chain_id, atoms in grouped.items()
        ]
        self.logger.debug(f"Chain analysis: {[c.to_dict() for c in chains]}")
        return chains

    def best_protein_chain(self, chains: List[ChainDescriptor]) -> Optional[ChainDescriptor]:
        """Protein chain with the most alpha-carbons; earliest chain wins ties"""
        best = None
        for chain in chains:
            if chain.is_protein and (best is None or chain.ca_count > best.ca_count):
                best = chain
        return best

    def analyze(self, source, requested_chain: Optional[str] = None,
                require_protein: bool = False) -> StructureInfo:
        """Determine the display chain and its residue numbering

        Args:
            source: Viewer or AtomIndex of the loaded structure
            requested_chain: Chain asked for by the caller, if any
            require_protein: Fall back to automatic selection when the
                requested chain exists but is not protein

        Returns:
            StructureInfo for the selected chain

        Raises:
            NoProteinChainFound: If a chain has to be picked automatically
                and no chain qualifies as protein
        """
        chains = self.describe_chains(source)
        all_chains = [c.chain_id for c in chains]
        by_id = {c.chain_id: c for c in chains}
        warnings: List[StructureError] = []

        target: Optional[ChainDescriptor] = None
        if requested_chain:
            requested = by_id.get(requested_chain)
            if requested is None:
                warning = ChainNotPresent(
                    f"Chain {requested_chain} not found in structure",
                    {"requested_chain": requested_chain, "all_chains": all_chains}
                )
                self.logger.warning(f"{warning.message}; selecting a protein chain automatically")
                warnings.append(warning)
            elif not requested.is_protein:
                message = (f"Chain {requested_chain} is not a protein "
                           f"(CA count: {requested.ca_count})")
                if require_protein:
                    self.logger.warning(f"{message}; selecting a protein chain automatically")
                else:
                    self.logger.warning(f"{message}; keeping requested chain")
                    target = requested
                warnings.append(StructureError(message, {"requested_chain": requested_chain,
                                                         "chain_type": requested.chain_type}))
            else:
                target = requested

        if target is None:
            target = self.best_protein_chain(chains)
            if target is None:
                raise NoProteinChainFound(
                    f"No protein chains found in structure. "
                    f"Available chains: {', '.join(all_chains) or 'none'}",
                    {"all_chains": all_chains, "requested_chain": requested_chain}
                )
            self.logger.debug(f"Auto-selected protein chain: {target.chain_id} "
                              f"({target.ca_count} CA atoms)")

        residues = sorted({atom.resi for atom in select_atoms(source, {'chain': target.chain_id})})

        info = StructureInfo(
            actual_chain=target.chain_id,
            original_chain=requested_chain,
            residue_list=residues,
            all_chains=all_chains,
            chain_type=target.chain_type,
            chains=chains,
            warnings=warnings,
        )
        self.logger.info(f"Structure analysis for chain {info.actual_chain}: residues "
                         f"{info.min_residue}-{info.max_residue} ({info.total_residues}), "
                         f"type {info.chain_type}")
        return info


def analyze(source, requested_chain: Optional[str] = None,
            require_protein: bool = False) -> StructureInfo:
    """Analyze a structure with default chain classification thresholds"""
    return StructureAnalyzer().analyze(source, requested_chain, require_protein)
