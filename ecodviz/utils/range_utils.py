# ecodviz/utils/range_utils.py
"""Residue range strings as used by ECOD and by viewer selections.

ECOD ranges look like ``"1-100,150-200"`` or, with chain prefixes,
``"A:1-100,A:150-200"``. Structure numbering can be negative and can carry
insertion codes (``"-3-45"``, ``"10A-52"``); insertion codes are dropped.
"""
import re
from typing import List, Tuple, Set, Optional

_SEGMENT_RE = re.compile(
    r'^(?:(?P<chain>[^:,\s]+):)?'
    r'(?P<start>-?\d+)[A-Za-z]?'
    r'(?:-(?P<end>-?\d+)[A-Za-z]?)?$'
)


def parse_segment(segment: str) -> Optional[Tuple[Optional[str], int, int]]:
    """Parse one segment (``"A:10-50"``, ``"10-50"``, ``"15"``)

    Returns:
        (chain or None, start, end) or None if the segment is not a range
    """
    match = _SEGMENT_RE.match(segment.strip())
    if not match:
        return None
    start = int(match.group('start'))
    end = int(match.group('end')) if match.group('end') is not None else start
    return match.group('chain'), start, end


def parse_chain_range(range_str: str) -> List[Tuple[Optional[str], int, int]]:
    """Parse a range string keeping chain prefixes; invalid segments are skipped"""
    segments = []
    if not range_str:
        return segments

    for segment in range_str.split(','):
        parsed = parse_segment(segment)
        if parsed is not None:
            segments.append(parsed)
    return segments


def parse_range(range_str: str) -> List[Tuple[int, int]]:
    """Parse range string (e.g. "1-100,150-200") into list of (start, end) tuples"""
    return [(start, end) for _, start, end in parse_chain_range(range_str)]


def range_chain(range_str: str) -> Optional[str]:
    """Chain prefix of the first segment of an ECOD range, if any"""
    for chain, _, _ in parse_chain_range(range_str):
        return chain
    return None


def strip_chains(range_str: str) -> str:
    """Residue-only form of a range (``"A:1-10,A:20-30"`` -> ``"1-10,20-30"``)"""
    return format_segments(parse_range(range_str))


def format_segments(segments: List[Tuple[int, int]]) -> str:
    """Format (start, end) segments as a range string"""
    return ",".join(str(start) if start == end else f"{start}-{end}"
                    for start, end in segments)


def range_to_positions(range_str: str) -> Set[int]:
    """Convert range string to set of positions"""
    positions = set()
    for start, end in parse_range(range_str):
        positions.update(range(start, end + 1))
    return positions


def positions_to_range(positions: Set[int]) -> str:
    """Convert set of positions to range string"""
    if not positions:
        return ""

    sorted_positions = sorted(positions)

    segments = []
    seg_start = sorted_positions[0]
    seg_end = seg_start

    for pos in sorted_positions[1:]:
        if pos == seg_end + 1:
            seg_end = pos
        else:
            segments.append((seg_start, seg_end))
            seg_start = pos
            seg_end = pos

    segments.append((seg_start, seg_end))

    return format_segments(segments)


def range_span(range_str: str) -> Optional[Tuple[int, int]]:
    """Overall (min start, max end) of a range string, ignoring gaps"""
    segments = parse_range(range_str)
    if not segments:
        return None
    return min(s for s, _ in segments), max(e for _, e in segments)
