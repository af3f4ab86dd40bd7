#!/usr/bin/env python3
"""
Viewer facade used by the structure analyzer and the domain styler.

A viewer answers atom selection queries and accepts style instructions for a
selection. Selections follow the 3Dmol.js convention::

    {}                                   # every atom
    {'chain': 'A'}                       # one chain
    {'chain': 'A', 'resi': '10-50,60'}   # residue range on a chain

``resi`` may also be an int or a list of ints/range strings.
"""
import io
import copy
import logging
from collections import OrderedDict
from typing import Dict, Any, List, Optional, Iterable, Set

from ecodviz.exceptions import ViewerError, ViewerUnavailable, ValidationError
from ecodviz.models.structure import AtomRecord
from ecodviz.utils.range_utils import parse_segment

Selection = Dict[str, Any]
Style = Dict[str, Any]


def _resi_predicate(resi: Any):
    """Build a residue-number predicate from a selection's resi value"""
    values = resi if isinstance(resi, (list, tuple, set)) else [resi]
    singles: Set[int] = set()
    spans = []
    for value in values:
        if isinstance(value, bool):
            raise ValidationError(f"Invalid resi selector: {value!r}")
        if isinstance(value, int):
            singles.add(value)
            continue
        for part in str(value).split(','):
            parsed = parse_segment(part)
            if parsed is None:
                raise ValidationError(f"Invalid resi selector: {value!r}")
            _, start, end = parsed
            if start == end:
                singles.add(start)
            else:
                spans.append((start, end))

    def predicate(number: int) -> bool:
        return number in singles or any(s <= number <= e for s, e in spans)
    return predicate


def atom_matcher(selection: Optional[Selection]):
    """Compile a selection dict into a predicate over AtomRecord"""
    selection = selection or {}
    unknown = set(selection) - {'chain', 'resi', 'atom', 'resn', 'hetflag'}
    if unknown:
        raise ValidationError(f"Unsupported selection keys: {', '.join(sorted(unknown))}")

    chain = selection.get('chain')
    chains = None
    if chain is not None:
        chains = set(chain) if isinstance(chain, (list, tuple, set)) else {chain}
    resi = _resi_predicate(selection['resi']) if 'resi' in selection else None
    atom_names = selection.get('atom')
    if isinstance(atom_names, str):
        atom_names = {atom_names}
    resn = selection.get('resn')
    hetflag = selection.get('hetflag')

    def matches(atom: AtomRecord) -> bool:
        if chains is not None and atom.chain not in chains:
            return False
        if resi is not None and not resi(atom.resi):
            return False
        if atom_names is not None and atom.atom not in atom_names:
            return False
        if resn is not None and atom.resn != resn:
            return False
        if hetflag is not None and atom.hetero != bool(hetflag):
            return False
        return True
    return matches


class AtomIndex:
    """Flat, ordered atom table of one structure model"""

    def __init__(self, atoms: Iterable[AtomRecord], structure_id: str = ''):
        self.atoms: List[AtomRecord] = list(atoms)
        self.structure_id = structure_id

    @classmethod
    def from_structure(cls, structure, model_index: int = 0) -> 'AtomIndex':
        """Build an index from a Biopython Structure (first model by default)

        Residue numbers are the author numbering (``residue.id[1]``);
        insertion codes and alternate locations beyond the first are dropped.
        """
        models = list(structure)
        if not models:
            return cls([], getattr(structure, 'id', ''))
        model = models[model_index]

        atoms = []
        serial = 0
        for chain in model:
            for residue in chain:
                hetfield, resseq, _icode = residue.id
                for atom in residue:
                    serial += 1
                    atoms.append(AtomRecord(
                        serial=serial,
                        chain=chain.id,
                        resi=int(resseq),
                        atom=atom.get_id(),
                        resn=residue.get_resname(),
                        hetero=hetfield != ' ',
                    ))
        return cls(atoms, getattr(structure, 'id', ''))

    def select(self, selection: Optional[Selection] = None) -> List[AtomRecord]:
        matches = atom_matcher(selection)
        return [atom for atom in self.atoms if matches(atom)]

    def chain_ids(self) -> List[str]:
        """Chain ids in structure order"""
        return list(OrderedDict.fromkeys(atom.chain for atom in self.atoms))

    def __len__(self) -> int:
        return len(self.atoms)


class Viewer:
    """Base class for viewer backends

    Subclasses hold an AtomIndex for queries and implement ``_apply_style``
    and ``_apply_zoom`` against their rendering library.
    """

    def __init__(self, index: AtomIndex):
        self.index = index
        self.closed = False
        self.logger = logging.getLogger(f"ecodviz.viewer.{self.__class__.__name__.lower()}")

    def _check_open(self) -> None:
        if self.closed:
            raise ViewerUnavailable(f"{self.__class__.__name__} has been closed",
                                    {"structure_id": self.index.structure_id})

    def select_atoms(self, selection: Optional[Selection] = None) -> List[AtomRecord]:
        self._check_open()
        return self.index.select(selection)

    def set_style(self, selection: Optional[Selection], style: Style) -> None:
        self._check_open()
        self._apply_style(selection or {}, copy.deepcopy(style))

    def zoom_to(self, selection: Optional[Selection] = None) -> None:
        self._check_open()
        self._apply_zoom(selection or {})

    def render(self) -> None:
        self._check_open()

    def png(self) -> Optional[bytes]:
        """Rendered image, for backends that can produce one"""
        self._check_open()
        return None

    def close(self) -> None:
        self.closed = True

    def _apply_style(self, selection: Selection, style: Style) -> None:
        raise NotImplementedError("Subclasses must implement _apply_style")

    def _apply_zoom(self, selection: Selection) -> None:
        raise NotImplementedError("Subclasses must implement _apply_zoom")


class HeadlessViewer(Viewer):
    """In-memory viewer keeping the current style of every atom

    Styles follow last-write-wins per atom, like 3Dmol.js ``setStyle``.
    """

    def __init__(self, index: AtomIndex):
        super().__init__(index)
        self.styles: Dict[int, Style] = {}
        self.zoom_selection: Optional[Selection] = None
        self.render_count = 0
        self.history: List[tuple] = []

    def _apply_style(self, selection: Selection, style: Style) -> None:
        for atom in self.index.select(selection):
            self.styles[atom.serial] = style
        self.history.append((selection, style))

    def _apply_zoom(self, selection: Selection) -> None:
        self.zoom_selection = selection

    def render(self) -> None:
        super().render()
        self.render_count += 1

    def style_of(self, atom: AtomRecord) -> Style:
        return self.styles.get(atom.serial, {})

    def visible_atoms(self) -> List[AtomRecord]:
        """Atoms drawn in at least one representation with non-zero opacity"""
        visible = []
        for atom in self.index.atoms:
            style = self.style_of(atom)
            if any(rep.get('opacity', 1.0) > 0 for rep in style.values()):
                visible.append(atom)
        return visible

    def color_of(self, chain: str, resi: int) -> Optional[str]:
        """Colour a residue is drawn in, taken from its first atom"""
        for atom in self.index.atoms:
            if atom.chain == chain and atom.resi == resi:
                for rep in self.style_of(atom).values():
                    if rep.get('opacity', 1.0) > 0 and 'color' in rep:
                        return rep['color']
                return None
        return None

    def residue_styles(self) -> 'OrderedDict[str, OrderedDict[int, tuple]]':
        """(colour, opacity) of each drawn residue, per chain, from its first visible atom"""
        drawn: 'OrderedDict[str, OrderedDict[int, tuple]]' = OrderedDict()
        for atom in self.index.atoms:
            residues = drawn.setdefault(atom.chain, OrderedDict())
            if atom.resi in residues:
                continue
            for rep in self.style_of(atom).values():
                if rep.get('opacity', 1.0) > 0 and 'color' in rep:
                    residues[atom.resi] = (rep['color'], rep.get('opacity', 1.0))
                    break
        return OrderedDict((chain, residues) for chain, residues in drawn.items() if residues)

    def png(self, width: int = 800, dpi: int = 100) -> Optional[bytes]:
        """Residue strip image of the current styling, one row per drawn chain

        Raises:
            ViewerUnavailable: If the viewer is closed
            ViewerError: If a style carries a colour matplotlib cannot draw
        """
        self._check_open()
        from matplotlib.figure import Figure
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.colors import to_rgba
        from matplotlib.patches import Rectangle

        drawn = self.residue_styles()
        fig = Figure(figsize=(width / dpi, 0.6 + 0.5 * max(len(drawn), 1)), dpi=dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)

        numbers = [resi for residues in drawn.values() for resi in residues] or [0]
        for row, (chain, residues) in enumerate(drawn.items()):
            for resi, (color, opacity) in residues.items():
                try:
                    face = to_rgba(color, alpha=opacity)
                except ValueError as e:
                    raise ViewerError(f"Cannot draw colour {color!r}: {str(e)}",
                                      {"chain": chain, "resi": resi}) from e
                ax.add_patch(Rectangle((resi - 0.5, row + 0.1), 1, 0.8,
                                       facecolor=face, edgecolor='none'))

        ax.set_xlim(min(numbers) - 1, max(numbers) + 1)
        ax.set_ylim(0, max(len(drawn), 1))
        ax.set_yticks([row + 0.5 for row in range(len(drawn))])
        ax.set_yticklabels(list(drawn))
        ax.set_xlabel("Residue")
        if self.index.structure_id:
            ax.set_title(self.index.structure_id)

        buffer = io.BytesIO()
        fig.savefig(buffer, format='png')
        return buffer.getvalue()
