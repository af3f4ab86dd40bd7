#!/usr/bin/env python3
"""
Viewer sessions: one per structure load, owned by the caller.

A session bundles the viewer, the structure analysis, the domains and the
style options of one load. SessionManager hands out a generation token per
load; a load that finishes after a newer one has started is stale and its
session is closed instead of being installed.
"""
import threading
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Callable

from ecodviz.exceptions import ViewerUnavailable
from ecodviz.models.domain import DomainDescriptor
from ecodviz.models.structure import StructureInfo, MappedRange
from ecodviz.structure.analyzer import StructureAnalyzer
from ecodviz.structure.loader import LoadedStructure
from ecodviz.structure.styler import DomainStyler, StylingResult
from ecodviz.structure.styles import StyleOptions, apply_delta
from ecodviz.structure.viewer import Viewer, HeadlessViewer


@dataclass
class ViewerSession:
    """Viewer state for one loaded structure"""
    generation: int
    viewer: Viewer
    structure_info: StructureInfo
    domains: List[DomainDescriptor] = field(default_factory=list)
    options: StyleOptions = field(default_factory=StyleOptions)
    loaded: Optional[LoadedStructure] = None
    last_result: Optional[StylingResult] = None

    @property
    def target_chain(self) -> str:
        return self.structure_info.actual_chain

    @property
    def closed(self) -> bool:
        return self.viewer.closed

    def _styler(self) -> DomainStyler:
        return DomainStyler(self.options)

    def apply_styling(self) -> StylingResult:
        self.last_result = self._styler().apply_styling(
            self.viewer, self.target_chain, self.domains, self.structure_info)
        return self.last_result

    def highlight_domain(self, index: int) -> Optional[MappedRange]:
        return self._styler().highlight_domain(
            self.viewer, self.domains, index, self.target_chain, self.structure_info)

    def highlight_domain_id(self, domain_id: str) -> Optional[MappedRange]:
        for index, domain in enumerate(self.domains):
            if domain.id == domain_id:
                return self.highlight_domain(index)
        return None

    def reset(self) -> StylingResult:
        self.last_result = self._styler().reset(
            self.viewer, self.target_chain, self.domains, self.structure_info)
        return self.last_result

    def update_domains(self, domains: List[DomainDescriptor]) -> Optional[StylingResult]:
        """Replace the domain list, restyling only when it changed"""
        domains = list(domains)
        if domains == self.domains:
            return None
        self.domains = domains
        return self.apply_styling()

    def update_options(self, **changes) -> StylingResult:
        """Swap in new style options and restyle"""
        self.options = apply_delta(self.options, **changes)
        return self.apply_styling()

    def export_image(self) -> Optional[bytes]:
        return self.viewer.png()

    def close(self) -> None:
        self.viewer.close()


class SessionManager:
    """Tracks the current structure load of one display

    Sessions are replaced, never mutated into a new structure: every load
    builds a fresh viewer and the previous session is closed once the new
    one is installed.
    """

    def __init__(self, analyzer: Optional[StructureAnalyzer] = None,
                 options: Optional[StyleOptions] = None,
                 viewer_factory: Optional[Callable[[LoadedStructure, StyleOptions], Viewer]] = None):
        self.analyzer = analyzer or StructureAnalyzer()
        self.options = options or StyleOptions()
        self.viewer_factory = viewer_factory or (lambda loaded, options: HeadlessViewer(loaded.index))
        self.current: Optional[ViewerSession] = None
        self._generation = 0
        self._lock = threading.Lock()
        self.logger = logging.getLogger("ecodviz.structure.session")

    @property
    def generation(self) -> int:
        return self._generation

    def begin_load(self) -> int:
        """Start a load; any load started earlier becomes stale"""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def build_session(self, generation: int, loaded: LoadedStructure,
                      domains: List[DomainDescriptor],
                      requested_chain: Optional[str] = None,
                      require_protein: bool = False) -> ViewerSession:
        """Create the viewer, analyze the structure and style the domains

        Raises:
            NoProteinChainFound: If no protein chain can be displayed
            ViewerUnavailable: If the viewer cannot be created or driven
        """
        viewer = self.viewer_factory(loaded, self.options)
        if viewer is None:
            raise ViewerUnavailable("Viewer factory returned no viewer",
                                    {"pdb_id": loaded.pdb_id})
        try:
            info = self.analyzer.analyze(viewer, requested_chain, require_protein)
            session = ViewerSession(generation, viewer, info, list(domains),
                                    self.options, loaded)
            session.apply_styling()
            viewer.zoom_to({'chain': info.actual_chain})
            viewer.render()
        except Exception:
            viewer.close()
            raise
        return session

    def complete_load(self, session: ViewerSession) -> bool:
        """Install a finished session if its load is still the latest

        Returns:
            True if installed; False if stale (the session is closed)
        """
        with self._lock:
            stale = session.generation != self._generation
            previous = None
            if not stale:
                previous, self.current = self.current, session

        if stale:
            self.logger.info(f"Discarding stale load (generation {session.generation}, "
                             f"current {self._generation})")
            session.close()
            return False

        if previous is not None and previous is not session:
            previous.close()
        return True

    def load(self, loaded: LoadedStructure, domains: List[DomainDescriptor],
             requested_chain: Optional[str] = None,
             require_protein: bool = False) -> Optional[ViewerSession]:
        """Build and install a session for a structure

        Returns:
            The installed session, or None if a newer load superseded it
        """
        generation = self.begin_load()
        session = self.build_session(generation, loaded, domains, requested_chain, require_protein)
        return session if self.complete_load(session) else None

    def close(self) -> None:
        with self._lock:
            current, self.current = self.current, None
            self._generation += 1
        if current is not None:
            current.close()
