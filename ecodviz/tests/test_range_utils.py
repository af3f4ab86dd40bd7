#!/usr/bin/env python3
"""
Tests for residue range string helpers
"""

import pytest

from ecodviz.utils.range_utils import (
    parse_segment, parse_chain_range, parse_range, range_chain, strip_chains,
    format_segments, range_to_positions, positions_to_range, range_span
)


class TestParsing:

    @pytest.mark.parametrize("segment,expected", [
        ('10-50', (None, 10, 50)),
        ('A:10-50', ('A', 10, 50)),
        ('15', (None, 15, 15)),
        ('-3-45', (None, -3, 45)),
        ('-10--2', (None, -10, -2)),
        ('10A-52', (None, 10, 52)),
        (' B:7 ', ('B', 7, 7)),
    ])
    def test_parse_segment(self, segment, expected):
        assert parse_segment(segment) == expected

    @pytest.mark.parametrize("segment", ['', 'abc', '10-', 'A:'])
    def test_parse_segment_invalid(self, segment):
        assert parse_segment(segment) is None

    def test_parse_chain_range_skips_invalid(self):
        assert parse_chain_range('A:1-10,junk,A:20-30') == [('A', 1, 10), ('A', 20, 30)]

    def test_parse_range(self):
        assert parse_range('1-100,150-200') == [(1, 100), (150, 200)]
        assert parse_range('') == []

    def test_range_chain(self):
        assert range_chain('B:1-10,B:20-30') == 'B'
        assert range_chain('1-10') is None

    def test_strip_chains(self):
        assert strip_chains('A:1-10,A:20-30') == '1-10,20-30'
        assert strip_chains('A:5') == '5'


class TestConversions:

    def test_format_segments(self):
        assert format_segments([(1, 10), (15, 15)]) == '1-10,15'

    def test_positions_round_trip_with_gaps(self):
        positions = range_to_positions('1-3,7-8,10')

        assert positions == {1, 2, 3, 7, 8, 10}
        assert positions_to_range(positions) == '1-3,7-8,10'

    def test_positions_to_range_empty(self):
        assert positions_to_range(set()) == ''

    def test_range_span(self):
        assert range_span('A:30-50,A:10-20') == (10, 50)
        assert range_span('nothing') is None
