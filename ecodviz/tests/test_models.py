#!/usr/bin/env python3
"""
Tests for domain and structure models
"""

import pytest

from ecodviz.exceptions import ValidationError, StructureError
from ecodviz.models.domain import (
    DomainDescriptor, chain_from_domain_id, domain_chain, PROTEIN_DOMAIN_COLORS
)
from ecodviz.models.structure import AtomRecord, ChainDescriptor, StructureInfo


class TestDomainDescriptor:
    """Domain descriptor construction"""

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            DomainDescriptor(id='d1', start=50, end=10)

    def test_single_residue_domain(self):
        domain = DomainDescriptor(id='d1', start=5, end=5)
        assert domain.sequence_range == '5-5'

    def test_immutable(self):
        domain = DomainDescriptor(id='d1', start=1, end=10)
        with pytest.raises(AttributeError):
            domain.start = 2

    def test_display_label(self):
        assert DomainDescriptor(id='d1', start=1, end=10).display_label == 'd1'
        assert DomainDescriptor(id='d1', start=1, end=10, label='Kinase').display_label == 'Kinase'

    def test_chain_from_pdb_range(self):
        domain = DomainDescriptor(id='d1', start=1, end=10, pdb_range='B:20-29')
        assert domain.chain == 'B'

    def test_explicit_chain_wins(self):
        domain = DomainDescriptor(id='d1', start=1, end=10, chain_id='C', pdb_range='B:20-29')
        assert domain.chain == 'C'

    def test_from_spec(self):
        domain = DomainDescriptor.from_spec('e1abcA2:30-120')

        assert (domain.start, domain.end) == (30, 120)
        assert domain.chain_id == 'A'

    def test_from_spec_with_chain(self):
        domain = DomainDescriptor.from_spec('dom1:1-50:B')
        assert domain.chain_id == 'B'

    @pytest.mark.parametrize("spec", ['dom1', 'dom1:abc', 'dom1:1-50:B:extra', 'dom1:50-1'])
    def test_from_spec_invalid(self, spec):
        with pytest.raises(ValidationError):
            DomainDescriptor.from_spec(spec)

    def test_from_db_row_discontinuous_range(self):
        row = {'id': 'e2xyzB3', 'range': 'B:10-50,B:80-120', 'fname': None}

        domain = DomainDescriptor.from_db_row(row, index=7)

        assert (domain.start, domain.end) == (10, 120)
        assert domain.chain_id == 'B'
        assert domain.color == PROTEIN_DOMAIN_COLORS[7 % len(PROTEIN_DOMAIN_COLORS)]
        assert domain.label == 'Domain 8'

    def test_to_dict(self):
        data = DomainDescriptor(id='d1', start=1, end=10, color='#ff0000').to_dict()

        assert data['id'] == 'd1'
        assert data['color'] == '#ff0000'
        assert data['classification']['x_group'] is None


class TestDomainChain:

    @pytest.mark.parametrize("domain_id,chain", [
        ('e4ubpA1', 'A'),
        ('e4ubpA12', 'A'),
        ('e1abcAA1', 'AA'),
        ('e1abc11', '1'),
        ('Q9XYZ1_F1_nD1', None),
        ('', None),
    ])
    def test_chain_from_domain_id(self, domain_id, chain):
        assert chain_from_domain_id(domain_id) == chain

    def test_domain_chain_uses_first_domain(self):
        domains = [DomainDescriptor(id='e4ubpB1', start=1, end=10),
                   DomainDescriptor(id='e4ubpA1', start=1, end=10)]
        assert domain_chain(domains) == 'B'
        assert domain_chain([]) is None


class TestStructureModels:

    def test_chain_descriptor_counts(self):
        atoms = [AtomRecord(i, 'A', i // 2, 'CA' if i % 2 else 'N') for i in range(40)]

        chain = ChainDescriptor.from_atoms('A', atoms)

        assert chain.ca_count == 20
        assert chain.is_protein
        assert chain.protein_score == 0.5
        assert chain.to_dict()['residue_count'] == 20

    def test_structure_info_sorts_residues(self):
        info = StructureInfo('A', None, [30, 10, 20, 10], ['A'], 'protein')

        assert info.residue_list == [10, 20, 30]
        assert info.contains(10, 30)
        assert not info.contains(5, 30)

    def test_structure_info_unknown_chain(self):
        with pytest.raises(StructureError):
            StructureInfo('Z', None, [1], ['A'], 'protein')

    def test_structure_info_to_dict(self):
        data = StructureInfo('A', 'B', [1, 2, 3], ['A', 'B'], 'protein').to_dict()

        assert data['min_residue'] == 1
        assert data['max_residue'] == 3
        assert data['original_chain'] == 'B'
