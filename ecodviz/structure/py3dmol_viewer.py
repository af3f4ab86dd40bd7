#!/usr/bin/env python3
"""
py3Dmol backend for the viewer facade.

Atom queries are answered from the AtomIndex built from the same structure
text, since py3Dmol cannot report atoms back to Python. Styles and zooms are
forwarded to the 3Dmol.js view and end up in the generated HTML.
"""
from typing import Optional

from ecodviz.exceptions import ViewerError, ViewerUnavailable
from ecodviz.structure.styles import StyleOptions
from ecodviz.structure.viewer import AtomIndex, Viewer, Selection, Style


class Py3DmolViewer(Viewer):
    """Viewer rendering through py3Dmol"""

    def __init__(self, index: AtomIndex, structure_text: str, structure_format: str = 'cif',
                 options: Optional[StyleOptions] = None):
        """Create a py3Dmol view holding one model

        Args:
            index: Atom index of the structure
            structure_text: mmCIF or PDB text handed to 3Dmol.js
            structure_format: 'cif' or 'pdb'
            options: Size and background of the view

        Raises:
            ViewerUnavailable: If py3Dmol is not installed or rejects the model
        """
        super().__init__(index)
        options = options or StyleOptions()
        try:
            import py3Dmol
        except ImportError as e:
            raise ViewerUnavailable("py3Dmol is not installed", {"backend": "py3Dmol"}) from e

        try:
            self.view = py3Dmol.view(width=options.width, height=options.height)
            self.view.addModel(structure_text, structure_format)
            self.view.setBackgroundColor(options.background_color)
        except Exception as e:
            raise ViewerUnavailable(f"Failed to initialize py3Dmol view: {str(e)}",
                                    {"backend": "py3Dmol"}) from e

    def _apply_style(self, selection: Selection, style: Style) -> None:
        try:
            self.view.setStyle(selection, style)
        except Exception as e:
            raise ViewerError(f"py3Dmol setStyle failed: {str(e)}",
                              {"backend": "py3Dmol", "selection": selection}) from e

    def _apply_zoom(self, selection: Selection) -> None:
        try:
            self.view.zoomTo(selection)
        except Exception as e:
            raise ViewerError(f"py3Dmol zoomTo failed: {str(e)}",
                              {"backend": "py3Dmol", "selection": selection}) from e

    def write_html(self, path: str) -> str:
        """Write a standalone HTML page with the current view"""
        self._check_open()
        with open(path, 'w') as f:
            self.view.write_html(f, fullpage=True)
        self.logger.info(f"Wrote viewer HTML to {path}")
        return path

    def close(self) -> None:
        if not self.closed:
            self.view.removeAllModels()
        super().close()
