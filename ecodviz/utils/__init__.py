#!/usr/bin/env python3
"""
ecodviz Utilities Module
"""
from .range_utils import (
    parse_segment, parse_chain_range, parse_range, range_chain, strip_chains,
    format_segments, range_to_positions, positions_to_range, range_span
)

__all__ = [
    'parse_segment', 'parse_chain_range', 'parse_range', 'range_chain', 'strip_chains',
    'format_segments', 'range_to_positions', 'positions_to_range', 'range_span'
]
