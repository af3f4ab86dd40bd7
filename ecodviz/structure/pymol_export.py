#!/usr/bin/env python3
"""
PyMOL script export of a styled headless viewer.

The script reproduces the visible state: the structure is loaded, everything
hidden, the visible atoms shown as cartoon and each colour applied to the
residue ranges carrying it.
"""
import os
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from ecodviz.structure.viewer import HeadlessViewer
from ecodviz.structure.styler import StylingResult
from ecodviz.utils.range_utils import positions_to_range, parse_range

logger = logging.getLogger("ecodviz.structure.pymol_export")


def _pymol_color(color: str) -> str:
    """PyMOL accepts named colours and 0xRRGGBB literals"""
    if color.startswith('#'):
        return f"0x{color[1:]}"
    return color


def _pymol_resi(range_str: str) -> str:
    # PyMOL joins ranges with '+' and needs negative numbers escaped
    parts = []
    for start, end in parse_range(range_str):
        first, last = (str(v).replace('-', '\\-') for v in (start, end))
        parts.append(first if start == end else f"{first}-{last}")
    return '+'.join(parts)


def build_pymol_script(viewer: HeadlessViewer, structure_path: str,
                       object_name: str, result: Optional[StylingResult] = None,
                       session_path: Optional[str] = None) -> List[str]:
    """Build PyMOL commands reproducing the viewer's styling

    Args:
        viewer: Styled headless viewer
        structure_path: Structure file PyMOL should load
        object_name: PyMOL object name
        result: Styling result, used for per-domain comments
        session_path: Optional .pse path to save at the end

    Returns:
        Script lines
    """
    lines = [
        f"# PyMOL domain view for {object_name}",
    ]
    if result is not None:
        lines.append(f"# {result.summary()} on chain {result.target_chain}")
        for outcome in result.outcomes:
            mapped = outcome.mapped.range_str if outcome.mapped else 'unmapped'
            lines.append(f"# {outcome.domain.display_label}: {outcome.domain.sequence_range}"
                         f" -> {mapped} ({outcome.status})")

    lines.extend([
        "",
        f"load {structure_path}, {object_name}",
        "hide everything",
        "set cartoon_fancy_helices, 1",
        "bg_color white",
    ])

    # colour -> chain -> residue numbers
    colored: Dict[str, Dict[str, set]] = OrderedDict()
    for atom in viewer.visible_atoms():
        style = viewer.style_of(atom)
        for rep in style.values():
            if rep.get('opacity', 1.0) > 0 and 'color' in rep:
                colored.setdefault(rep['color'], OrderedDict()).setdefault(atom.chain, set()).add(atom.resi)
                break

    for color, chains in colored.items():
        for chain, residues in chains.items():
            selection = f"{object_name} and chain {chain} and resi {_pymol_resi(positions_to_range(residues))}"
            lines.append(f"show cartoon, {selection}")
            lines.append(f"color {_pymol_color(color)}, {selection}")

    if viewer.zoom_selection and viewer.zoom_selection.get('chain'):
        zoom = f"{object_name} and chain {viewer.zoom_selection['chain']}"
        if viewer.zoom_selection.get('resi'):
            zoom += f" and resi {_pymol_resi(str(viewer.zoom_selection['resi']))}"
        lines.extend(["orient " + zoom, "zoom " + zoom])
    else:
        lines.extend(["orient", "zoom all"])

    if session_path:
        lines.append(f"save {session_path}")
    return lines


def write_pymol_script(viewer: HeadlessViewer, structure_path: str, script_path: str,
                       object_name: Optional[str] = None,
                       result: Optional[StylingResult] = None,
                       save_session: bool = False) -> str:
    """Write the PyMOL script for a styled viewer

    Returns:
        Path to the written script
    """
    object_name = object_name or viewer.index.structure_id or 'structure'
    output_dir = os.path.dirname(os.path.abspath(script_path))
    os.makedirs(output_dir, exist_ok=True)

    session_path = None
    if save_session:
        session_path = os.path.splitext(os.path.abspath(script_path))[0] + '.pse'

    lines = build_pymol_script(viewer, structure_path, object_name, result, session_path)
    with open(script_path, 'w') as f:
        f.write('\n'.join(lines) + '\n')
    logger.info(f"Wrote PyMOL script to {script_path}")
    return script_path
