#!/usr/bin/env python3
"""
Structure analysis, domain range mapping and domain styling
"""
from .viewer import AtomIndex, Viewer, HeadlessViewer
from .analyzer import StructureAnalyzer, analyze
from .range_mapper import map_range
from .styler import DomainStyler, StylingResult, DomainOutcome, apply_styling, highlight_domain
from .styles import StyleOptions, apply_delta, DOMAIN_COLORS

__all__ = [
    'AtomIndex', 'Viewer', 'HeadlessViewer',
    'StructureAnalyzer', 'analyze',
    'map_range',
    'DomainStyler', 'StylingResult', 'DomainOutcome', 'apply_styling', 'highlight_domain',
    'StyleOptions', 'apply_delta', 'DOMAIN_COLORS',
]
