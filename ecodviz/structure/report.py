#!/usr/bin/env python3
"""
Mapping reports: per-domain table and a domain architecture figure.
"""
import os
import logging
from typing import Optional

import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from ecodviz.models.structure import StructureInfo
from ecodviz.structure.styler import StylingResult
from ecodviz.utils.range_utils import parse_range

logger = logging.getLogger("ecodviz.structure.report")

REPORT_COLUMNS = [
    'domain_id', 'label', 'chain', 'sequence_range', 'mapped_range',
    'method', 'offset', 'color', 'atom_count', 'status', 'reason'
]


def mapping_report(result: StylingResult) -> pd.DataFrame:
    """One row per domain of a styling pass"""
    rows = [outcome.to_dict() for outcome in result.outcomes]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def write_report(df: pd.DataFrame, path: str) -> str:
    """Write a mapping report as TSV"""
    output_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(output_dir, exist_ok=True)
    df.to_csv(path, sep='\t', index=False)
    logger.info(f"Wrote mapping report ({len(df)} domains) to {path}")
    return path


def plot_domain_map(structure_info: StructureInfo, result: StylingResult,
                    output_path: str, title: Optional[str] = None) -> str:
    """Draw the chain's residue span with the mapped domains on top

    Observed residues are drawn as gray blocks, so gaps in the structure
    stay visible; each styled domain is drawn in its colour.
    """
    fig, ax = plt.subplots(figsize=(10, 2.2))

    # Observed residue blocks of the chain
    observed = []
    for resi in structure_info.residue_list:
        if observed and resi == observed[-1][1] + 1:
            observed[-1][1] = resi
        else:
            observed.append([resi, resi])
    for start, end in observed:
        ax.add_patch(Rectangle((start - 0.5, 0.4), end - start + 1, 0.2,
                               facecolor='lightgray', edgecolor='none'))

    for outcome in result.outcomes:
        if not outcome.styled:
            continue
        for start, end in parse_range(outcome.mapped.range_str):
            ax.add_patch(Rectangle((start - 0.5, 0.25), end - start + 1, 0.5,
                                   facecolor=outcome.color, edgecolor='black', linewidth=0.5))
        seg_start, seg_end = parse_range(outcome.mapped.range_str)[0]
        ax.text((seg_start + seg_end) / 2, 0.85, outcome.domain.display_label,
                ha='center', va='bottom', fontsize=8)

    if structure_info.total_residues:
        ax.set_xlim(structure_info.min_residue - 5, structure_info.max_residue + 5)
    ax.set_ylim(0, 1.2)
    ax.set_yticks([])
    ax.set_xlabel(f"Residue (chain {structure_info.actual_chain})")
    ax.set_title(title or f"Chain {structure_info.actual_chain}: {result.summary()}")
    for spine in ('left', 'right', 'top'):
        ax.spines[spine].set_visible(False)

    output_dir = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(output_dir, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    logger.info(f"Wrote domain map to {output_path}")
    return output_path
