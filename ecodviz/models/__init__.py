#!/usr/bin/env python3
"""
ecodviz Models Module

Domain descriptors handed to the viewer and the structure-side records the
analyzer derives from a loaded structure.
"""
from .domain import (
    DomainDescriptor, DomainClassification,
    PROTEIN_DOMAIN_COLORS, chain_from_domain_id, domain_chain
)
from .structure import (
    AtomRecord, ChainDescriptor, StructureInfo, MappedRange,
    CHAIN_TYPE_PROTEIN, CHAIN_TYPE_NUCLEIC_ACID, CHAIN_TYPE_UNKNOWN,
    MAP_EXPLICIT_RANGE, MAP_EXPLICIT_BOUNDS, MAP_DIRECT, MAP_OFFSET
)

__all__ = [
    # Domain models
    'DomainDescriptor', 'DomainClassification',
    'PROTEIN_DOMAIN_COLORS', 'chain_from_domain_id', 'domain_chain',

    # Structure models
    'AtomRecord', 'ChainDescriptor', 'StructureInfo', 'MappedRange',
    'CHAIN_TYPE_PROTEIN', 'CHAIN_TYPE_NUCLEIC_ACID', 'CHAIN_TYPE_UNKNOWN',
    'MAP_EXPLICIT_RANGE', 'MAP_EXPLICIT_BOUNDS', 'MAP_DIRECT', 'MAP_OFFSET',
]
