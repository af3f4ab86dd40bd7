#!/usr/bin/env python3
"""
Tests for the three-phase domain styling pass and domain highlighting
"""

import pytest
from unittest.mock import patch

from ecodviz.exceptions import (
    ValidationError, ViewerError, ViewerUnavailable, UnmappableDomainRange, EmptySelection
)
from ecodviz.structure.analyzer import analyze
from ecodviz.structure.styler import (
    DomainStyler, apply_styling, highlight_domain,
    STATUS_STYLED, STATUS_UNMAPPABLE, STATUS_EMPTY, STATUS_ERROR
)
from ecodviz.structure.styles import StyleOptions, DOMAIN_COLORS


@pytest.fixture
def styled_setup(make_viewer, make_domain):
    """Protein chain A 1-200 next to ligand chain L, with three domains"""
    viewer = make_viewer({
        'A': (range(1, 201), 'protein'),
        'L': (range(1, 3), 'ligand'),
    })
    info = analyze(viewer)
    domains = [
        make_domain('e1abcA1', 1, 80, color='#123456'),
        make_domain('e1abcA2', 81, 150),
        make_domain('e1abcA3', 151, 200),
    ]
    return viewer, info, domains


class TestApplyStyling:
    """Full styling pass"""

    def test_all_domains_styled(self, styled_setup):
        viewer, info, domains = styled_setup

        result = apply_styling(viewer, 'A', domains, info)

        assert result.success_count == result.total == 3
        assert result.summary() == "3 of 3 domains mapped"
        assert viewer.color_of('A', 10) == '#123456'
        # domains without a colour fall back to the palette by position
        assert viewer.color_of('A', 100) == DOMAIN_COLORS[1]
        assert viewer.color_of('A', 175) == DOMAIN_COLORS[2]
        assert viewer.render_count == 1

    def test_other_chains_hidden(self, styled_setup):
        viewer, info, domains = styled_setup

        apply_styling(viewer, 'A', domains, info)

        visible_chains = {atom.chain for atom in viewer.visible_atoms()}
        assert visible_chains == {'A'}

    def test_uncovered_residues_drawn_as_backdrop(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup

        apply_styling(viewer, 'A', [make_domain('d1', 10, 20)], info)

        atom = viewer.select_atoms({'chain': 'A', 'resi': 50})[0]
        assert viewer.style_of(atom) == {'cartoon': {'color': 'gray', 'opacity': 0.8}}

    def test_unmappable_domain_is_a_miss(self, make_viewer, make_domain):
        viewer = make_viewer({'A': (range(10, 41), 'protein')})
        info = analyze(viewer)
        domains = [
            make_domain('d1', 10, 20),
            make_domain('d2', 1, 50),
            make_domain('d3', 30, 40),
        ]

        result = apply_styling(viewer, 'A', domains, info)

        assert result.success_count == 2
        assert result.total == 3
        miss = result.misses[0]
        assert miss.domain.id == 'd2'
        assert miss.status == STATUS_UNMAPPABLE
        assert isinstance(miss.error, UnmappableDomainRange)

    def test_offset_mapped_domains_styled(self, offset_viewer, make_domain):
        info = analyze(offset_viewer)

        result = apply_styling(offset_viewer, 'A', [make_domain('d1', 1, 50)], info)

        outcome = result.outcomes[0]
        assert outcome.styled
        assert outcome.mapped.range_str == '159-208'
        assert outcome.atom_count == 50 * 4

    def test_empty_selection_is_a_miss(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 1, 50, pdb_range='500-600')]

        result = apply_styling(viewer, 'A', domains, info)

        assert result.success_count == 0
        assert result.outcomes[0].status == STATUS_EMPTY
        assert isinstance(result.outcomes[0].error, EmptySelection)

    def test_domain_chain_override(self, make_viewer, make_domain):
        viewer = make_viewer({
            'A': (range(1, 101), 'protein'),
            'B': (range(1, 101), 'protein'),
        })
        info = analyze(viewer, 'A')

        result = apply_styling(viewer, 'A', [make_domain('d1', 1, 50, chain_id='B',
                                                         color='#00ff00')], info)

        assert result.outcomes[0].chain == 'B'
        assert viewer.color_of('B', 10) == '#00ff00'
        assert viewer.color_of('A', 10) == 'gray'

    def test_invalid_selection_recorded_as_error(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 1, 50, pdb_range='abc'), make_domain('d2', 60, 70)]

        result = apply_styling(viewer, 'A', domains, info)

        assert result.outcomes[0].status == STATUS_ERROR
        assert result.outcomes[1].status == STATUS_STYLED

    def test_later_domains_win_overlaps(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 1, 100, color='#111111'),
                   make_domain('d2', 50, 60, color='#222222')]

        apply_styling(viewer, 'A', domains, info)

        assert viewer.color_of('A', 55) == '#222222'
        assert viewer.color_of('A', 40) == '#111111'

    def test_no_domains(self, styled_setup):
        viewer, info, _ = styled_setup

        result = apply_styling(viewer, 'A', [], info)

        assert result.total == 0
        assert viewer.color_of('A', 10) == 'gray'

    def test_custom_options(self, styled_setup):
        viewer, info, domains = styled_setup
        options = StyleOptions(base_color='white', base_opacity=0.5, palette=('#abcdef',))

        apply_styling(viewer, 'A', domains[1:], info, options)

        assert viewer.color_of('A', 100) == '#abcdef'
        assert viewer.color_of('A', 160) == '#abcdef'

    def test_missing_viewer_is_fatal(self, styled_setup):
        _, info, domains = styled_setup

        with pytest.raises(ViewerUnavailable):
            apply_styling(None, 'A', domains, info)

    def test_closed_viewer_is_fatal(self, styled_setup):
        viewer, info, domains = styled_setup
        viewer.close()

        with pytest.raises(ViewerUnavailable):
            apply_styling(viewer, 'A', domains, info)

    def test_backdrop_failure_is_fatal(self, styled_setup):
        viewer, info, domains = styled_setup

        with patch.object(viewer, 'set_style', side_effect=ViewerError("setStyle failed")):
            with pytest.raises(ViewerUnavailable):
                apply_styling(viewer, 'A', domains, info)


class TestHighlightDomain:
    """Single-domain emphasis"""

    def test_highlight_fades_chain_and_zooms(self, styled_setup):
        viewer, info, domains = styled_setup
        apply_styling(viewer, 'A', domains, info)

        mapped = highlight_domain(viewer, domains, 1, 'A', info)

        assert mapped.range_str == '81-150'
        assert viewer.zoom_selection == {'chain': 'A', 'resi': '81-150'}
        assert viewer.color_of('A', 100) == DOMAIN_COLORS[1]
        faded = viewer.select_atoms({'chain': 'A', 'resi': 10})[0]
        assert viewer.style_of(faded)['cartoon']['opacity'] == 0.3

    def test_invalid_index(self, styled_setup):
        viewer, info, domains = styled_setup

        with pytest.raises(ValidationError):
            highlight_domain(viewer, domains, 3, 'A', info)
        with pytest.raises(ValidationError):
            highlight_domain(viewer, domains, -1, 'A', info)

    def test_unmappable_domain_not_highlighted(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 150, 400)]

        assert highlight_domain(viewer, domains, 0, 'A', info) is None
        assert viewer.zoom_selection is None

    def test_range_outside_chain_not_highlighted(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 1, 100, pdb_range='500-600')]
        apply_styling(viewer, 'A', domains, info)
        styles_before = dict(viewer.styles)

        assert highlight_domain(viewer, domains, 0, 'A', info) is None
        assert viewer.zoom_selection is None
        assert viewer.styles == styles_before

    def test_malformed_range_not_highlighted(self, styled_setup, make_domain):
        viewer, info, _ = styled_setup
        domains = [make_domain('d1', 1, 100, pdb_range='10-x')]

        assert highlight_domain(viewer, domains, 0, 'A', info) is None
        assert viewer.zoom_selection is None

    def test_viewer_error_restores_styling(self, styled_setup):
        viewer, info, domains = styled_setup
        styler = DomainStyler()
        styler.apply_styling(viewer, 'A', domains, info)

        with patch.object(viewer, 'zoom_to', side_effect=ViewerError("zoom failed")):
            with pytest.raises(ViewerError):
                styler.highlight_domain(viewer, domains, 0, 'A', info)

        atom = viewer.select_atoms({'chain': 'A', 'resi': 100})[0]
        assert viewer.style_of(atom)['cartoon']['opacity'] == 1.0

    def test_reset_zooms_to_chain(self, styled_setup):
        viewer, info, domains = styled_setup
        styler = DomainStyler()
        styler.highlight_domain(viewer, domains, 0, 'A', info)

        result = styler.reset(viewer, 'A', domains, info)

        assert result.success_count == 3
        assert viewer.zoom_selection == {'chain': 'A'}
