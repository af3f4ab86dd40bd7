#!/usr/bin/env python3
"""
Tests for projecting domain ranges onto structure numbering
"""

import pytest

from ecodviz.models.structure import (
    StructureInfo, MAP_EXPLICIT_RANGE, MAP_EXPLICIT_BOUNDS, MAP_DIRECT, MAP_OFFSET
)
from ecodviz.structure.range_mapper import map_range, map_sequence_range


def structure_info(first: int, last: int, chain: str = 'A') -> StructureInfo:
    return StructureInfo(
        actual_chain=chain,
        original_chain=None,
        residue_list=list(range(first, last + 1)),
        all_chains=[chain],
        chain_type='protein',
    )


class TestSequenceMapping:
    """Direct and offset heuristics"""

    def test_in_bounds_range_unchanged(self, make_domain):
        mapped = map_range(make_domain('d1', 20, 80), structure_info(1, 100))

        assert mapped.range_str == '20-80'
        assert mapped.method == MAP_DIRECT
        assert mapped.offset == 0

    def test_offset_applied_for_shifted_numbering(self, make_domain):
        mapped = map_range(make_domain('d1', 1, 50), structure_info(159, 400))

        assert mapped.range_str == '159-208'
        assert mapped.method == MAP_OFFSET
        assert mapped.offset == 158

    def test_unmappable_range_returns_none(self, make_domain):
        # offset 9 gives 10-59, still past residue 40
        assert map_range(make_domain('d1', 1, 50), structure_info(10, 40)) is None

    def test_range_past_end_not_offset(self, make_domain):
        assert map_range(make_domain('d1', 90, 150), structure_info(1, 100)) is None

    def test_zero_offset_not_reported_as_offset(self):
        # min residue 1 means offset 0; out of bounds stays unmapped
        assert map_sequence_range(50, 120, structure_info(1, 100)) is None

    def test_negative_numbering_start(self):
        mapped = map_sequence_range(10, 20, structure_info(-5, 100))

        assert mapped.method == MAP_DIRECT
        assert mapped.range_str == '10-20'

    def test_bounds_are_inclusive(self):
        assert map_sequence_range(159, 400, structure_info(159, 400)).method == MAP_DIRECT

    @pytest.mark.parametrize("start,end", [(1, 10), (50, 100), (100, 100)])
    def test_in_bounds_never_offset(self, start, end):
        mapped = map_sequence_range(start, end, structure_info(1, 100))
        assert mapped.offset == 0
        assert mapped.range_str == f"{start}-{end}"

    def test_empty_structure(self, make_domain):
        info = StructureInfo('A', None, [], ['A'], 'unknown')
        assert map_range(make_domain('d1', 1, 10), info) is None


class TestExplicitRanges:
    """Structure-numbered ranges supplied with the domain"""

    def test_explicit_range_verbatim(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_range='300-349,360-370')
        mapped = map_range(domain, structure_info(159, 400))

        assert mapped.range_str == '300-349,360-370'
        assert mapped.method == MAP_EXPLICIT_RANGE

    def test_explicit_range_out_of_bounds_still_returned(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_range='900-950')

        assert map_range(domain, structure_info(1, 100)).range_str == '900-950'

    def test_chain_prefixed_range_stripped(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_range='A:10-50,A:60-80')
        mapped = map_range(domain, structure_info(1, 100))

        assert mapped.range_str == '10-50,60-80'
        assert mapped.method == MAP_EXPLICIT_RANGE

    def test_explicit_bounds(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_start='12', pdb_end='61')
        mapped = map_range(domain, structure_info(1, 100))

        assert mapped.range_str == '12-61'
        assert mapped.method == MAP_EXPLICIT_BOUNDS

    def test_explicit_range_beats_bounds(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_range='5-9', pdb_start='12', pdb_end='61')

        assert map_range(domain, structure_info(1, 100)).range_str == '5-9'

    def test_explicit_range_without_structure(self, make_domain):
        domain = make_domain('d1', 1, 50, pdb_range='5-9')

        assert map_range(domain, None).range_str == '5-9'
        assert map_range(make_domain('d2', 1, 50), None) is None
