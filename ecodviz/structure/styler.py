#!/usr/bin/env python3
"""
Domain colouring of a structure chain.

A styling pass runs in three phases:

1. hide every atom,
2. draw the target chain as a neutral backdrop,
3. overlay each domain that maps onto atoms, in caller order (later domains
   win where ranges overlap).

Per-domain misses are collected in the result; only a viewer that cannot be
driven in phase 1 or 2 aborts the pass.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from ecodviz.error_handlers import log_exception
from ecodviz.exceptions import (
    ECODError, ValidationError, ViewerError, ViewerUnavailable,
    UnmappableDomainRange, EmptySelection
)
from ecodviz.models.domain import DomainDescriptor
from ecodviz.models.structure import StructureInfo, MappedRange
from ecodviz.structure.range_mapper import map_range
from ecodviz.structure.styles import StyleOptions

STATUS_STYLED = 'styled'
STATUS_UNMAPPABLE = 'unmappable'
STATUS_EMPTY = 'empty_selection'
STATUS_ERROR = 'error'


@dataclass
class DomainOutcome:
    """What happened to one domain during a styling pass"""
    domain: DomainDescriptor
    index: int
    status: str
    chain: Optional[str] = None
    mapped: Optional[MappedRange] = None
    color: Optional[str] = None
    atom_count: int = 0
    error: Optional[ECODError] = None

    @property
    def styled(self) -> bool:
        return self.status == STATUS_STYLED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'domain_id': self.domain.id,
            'label': self.domain.display_label,
            'chain': self.chain,
            'sequence_range': self.domain.sequence_range,
            'mapped_range': self.mapped.range_str if self.mapped else None,
            'method': self.mapped.method if self.mapped else None,
            'offset': self.mapped.offset if self.mapped else None,
            'color': self.color,
            'atom_count': self.atom_count,
            'status': self.status,
            'reason': self.error.message if self.error else None,
        }


@dataclass
class StylingResult:
    """Tally of a styling pass"""
    target_chain: str
    outcomes: List[DomainOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.styled)

    @property
    def misses(self) -> List[DomainOutcome]:
        return [o for o in self.outcomes if not o.styled]

    def summary(self) -> str:
        return f"{self.success_count} of {self.total} domains mapped"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'target_chain': self.target_chain,
            'success_count': self.success_count,
            'total': self.total,
            'domains': [o.to_dict() for o in self.outcomes],
        }


def _selection(chain: str, mapped: MappedRange) -> Dict[str, Any]:
    return {'chain': chain, 'resi': mapped.range_str}


class DomainStyler:
    """Applies domain colouring to a viewer"""

    def __init__(self, options: Optional[StyleOptions] = None):
        self.options = options or StyleOptions()
        self.logger = logging.getLogger("ecodviz.structure.styler")

    def _check_viewer(self, viewer) -> None:
        if viewer is None:
            raise ViewerUnavailable("No viewer available for styling")

    def _paint_backdrop(self, viewer, target_chain: str, opacity: Optional[float] = None,
                        hide_all: bool = True) -> None:
        """Phases 1 and 2; any viewer failure here is fatal"""
        try:
            if hide_all:
                viewer.set_style({}, self.options.hidden_style())
            viewer.set_style({'chain': target_chain}, self.options.base_style(opacity))
        except ViewerUnavailable:
            raise
        except ViewerError as e:
            raise ViewerUnavailable(f"Viewer rejected base styling: {e.message}",
                                    {"target_chain": target_chain, **e.details}) from e

    def _style_domain(self, viewer, domain: DomainDescriptor, index: int,
                      target_chain: str, structure_info: Optional[StructureInfo]) -> DomainOutcome:
        chain = domain.chain or target_chain
        outcome = DomainOutcome(domain=domain, index=index, status=STATUS_UNMAPPABLE, chain=chain)

        mapped = map_range(domain, structure_info)
        if mapped is None:
            outcome.error = UnmappableDomainRange(
                f"Domain {domain.id} range {domain.sequence_range} could not be mapped to chain {chain}",
                {"domain_id": domain.id, "chain": chain}
            )
            self.logger.debug(f"Skipping domain {domain.id} - no valid range")
            return outcome
        outcome.mapped = mapped

        selection = _selection(chain, mapped)
        try:
            atoms = viewer.select_atoms(selection)
        except (ValidationError, ViewerError) as e:
            outcome.status = STATUS_ERROR
            outcome.error = e
            log_exception(self.logger, e, logging.WARNING, {"domain_id": domain.id})
            return outcome

        if not atoms:
            outcome.status = STATUS_EMPTY
            outcome.error = EmptySelection(
                f"Domain {domain.id} range {mapped.range_str} not found in chain {chain}",
                {"domain_id": domain.id, "chain": chain, "range": mapped.range_str}
            )
            self.logger.debug(outcome.error.message)
            return outcome

        color = domain.color or self.options.palette_color(index)
        try:
            viewer.set_style(selection, self.options.domain_style(color))
        except ViewerError as e:
            outcome.status = STATUS_ERROR
            outcome.error = e
            log_exception(self.logger, e, logging.WARNING, {"domain_id": domain.id})
            return outcome

        outcome.status = STATUS_STYLED
        outcome.color = color
        outcome.atom_count = len(atoms)
        self.logger.debug(f"Styled domain {domain.id} with range {mapped.range_str} on chain {chain}")
        return outcome

    def apply_styling(self, viewer, target_chain: str, domains: List[DomainDescriptor],
                      structure_info: Optional[StructureInfo] = None) -> StylingResult:
        """Run the full three-phase styling pass

        Args:
            viewer: Viewer backend of the loaded structure
            target_chain: Chain drawn as backdrop
            domains: Domains to colour, in display order
            structure_info: Analysis of the structure; without it only
                domains with explicit structure ranges can be placed

        Returns:
            StylingResult with one outcome per domain

        Raises:
            ViewerUnavailable: If the viewer cannot be driven
        """
        self._check_viewer(viewer)
        self.logger.debug(f"Applying styling for {len(domains)} domains on chain {target_chain}")

        self._paint_backdrop(viewer, target_chain)

        result = StylingResult(target_chain=target_chain)
        for index, domain in enumerate(domains):
            result.outcomes.append(
                self._style_domain(viewer, domain, index, target_chain, structure_info)
            )

        viewer.render()
        self.logger.info(f"Styled {result.success_count}/{result.total} domains on chain {target_chain}")
        return result

    def highlight_domain(self, viewer, domains: List[DomainDescriptor], index: int,
                         target_chain: str,
                         structure_info: Optional[StructureInfo] = None) -> Optional[MappedRange]:
        """Emphasize one domain against a faded chain and zoom to it

        Returns:
            The domain's mapped range, or None if it cannot be placed

        Raises:
            ValidationError: If index does not refer to a domain
            ViewerUnavailable: If the viewer cannot be driven
        """
        self._check_viewer(viewer)
        if not 0 <= index < len(domains):
            raise ValidationError(f"Domain index {index} out of range (0-{len(domains) - 1})",
                                  {"index": index, "domain_count": len(domains)})

        domain = domains[index]
        mapped = map_range(domain, structure_info)
        if mapped is None:
            self.logger.debug(f"Could not map domain {domain.id} range for highlighting")
            return None

        chain = domain.chain or target_chain
        selection = _selection(chain, mapped)
        try:
            atoms = viewer.select_atoms(selection)
        except ValidationError as e:
            log_exception(self.logger, e, logging.WARNING, {"domain_id": domain.id})
            return None
        if not atoms:
            self.logger.debug(f"Domain {domain.id} range {mapped.range_str} not found in chain {chain}")
            return None

        color = domain.color or self.options.palette_color(index)
        try:
            self._paint_backdrop(viewer, target_chain,
                                 opacity=self.options.highlight_backdrop_opacity,
                                 hide_all=False)
            viewer.set_style(selection, self.options.domain_style(color))
            viewer.zoom_to(selection)
            viewer.render()
        except ViewerError as e:
            log_exception(self.logger, e, logging.WARNING, {"domain_id": domain.id})
            if not isinstance(e, ViewerUnavailable):
                # Restore the full domain colouring
                self.apply_styling(viewer, target_chain, domains, structure_info)
            raise
        return mapped

    def reset(self, viewer, target_chain: str, domains: List[DomainDescriptor],
              structure_info: Optional[StructureInfo] = None) -> StylingResult:
        """Reapply the full styling and zoom back to the target chain"""
        result = self.apply_styling(viewer, target_chain, domains, structure_info)
        viewer.zoom_to({'chain': target_chain})
        viewer.render()
        return result


def apply_styling(viewer, target_chain: str, domains: List[DomainDescriptor],
                  structure_info: Optional[StructureInfo] = None,
                  options: Optional[StyleOptions] = None) -> StylingResult:
    """Run a styling pass with the given (or default) options"""
    return DomainStyler(options).apply_styling(viewer, target_chain, domains, structure_info)


def highlight_domain(viewer, domains: List[DomainDescriptor], index: int, target_chain: str,
                     structure_info: Optional[StructureInfo] = None,
                     options: Optional[StyleOptions] = None) -> Optional[MappedRange]:
    """Highlight a single domain with the given (or default) options"""
    return DomainStyler(options).highlight_domain(viewer, domains, index, target_chain,
                                                  structure_info)
