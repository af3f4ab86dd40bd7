#!/usr/bin/env python3
"""
Tests for structure lookup, download and parsing
"""

import gzip
import pytest
import requests
from unittest.mock import Mock

from ecodviz.exceptions import StructureLoadError, ValidationError
from ecodviz.structure.analyzer import analyze
from ecodviz.structure.loader import StructureLoader, validate_pdb_id, is_mmcif_text

MMCIF_HEADER = "data_1ABC\n_entry.id 1ABC\n"


def mock_session(text='', status_error=None, exc=None):
    session = Mock()
    if exc is not None:
        session.get.side_effect = exc
        return session
    response = Mock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session.get.return_value = response
    return session


class TestPdbId:

    def test_normalized(self):
        assert validate_pdb_id(' 4UBP ') == '4ubp'

    @pytest.mark.parametrize("pdb_id", ['', 'ubp4', '4ub', '4ubp1', '4u-p', None])
    def test_invalid(self, pdb_id):
        with pytest.raises(ValidationError):
            validate_pdb_id(pdb_id)

    def test_mmcif_detection(self):
        assert is_mmcif_text(MMCIF_HEADER)
        assert not is_mmcif_text("<html>Not Found</html>")


class TestLocalFiles:

    def test_load_pdb_file(self, tmp_path, pdb_text):
        path = tmp_path / '1abc.pdb'
        path.write_text(pdb_text)

        loaded = StructureLoader().load_file(str(path))

        assert loaded.pdb_id == '1abc'
        assert loaded.format == 'pdb'
        assert loaded.path == str(path)
        assert loaded.index.chain_ids() == ['A', 'B']
        assert len(loaded.index.select({'chain': 'A', 'atom': 'CA'})) == 120

    def test_parsed_structure_analyzed(self, tmp_path, pdb_text):
        path = tmp_path / '1abc.pdb'
        path.write_text(pdb_text)

        info = analyze(StructureLoader().load_file(str(path)).index)

        assert info.actual_chain == 'A'
        assert (info.min_residue, info.max_residue) == (1, 120)
        assert info.chain('B').is_nucleic_acid

    def test_local_mirror_preferred(self, tmp_path, pdb_text):
        pdb_dir = tmp_path / 'pdb'
        pdb_dir.mkdir()
        (pdb_dir / '1abc.pdb').write_text(pdb_text)
        session = mock_session()

        loader = StructureLoader({'pdb_repo': str(tmp_path)}, session=session)
        loaded = loader.load('1ABC')

        assert loaded.source == str(pdb_dir / '1abc.pdb')
        session.get.assert_not_called()

    def test_gzipped_mmcif_path_found(self, tmp_path):
        mirror = tmp_path / 'structures' / 'divided' / 'mmCIF' / 'ab'
        mirror.mkdir(parents=True)
        with gzip.open(mirror / '1abc.cif.gz', 'wt') as f:
            f.write(MMCIF_HEADER)

        loader = StructureLoader({'pdb_repo': str(tmp_path)})

        assert loader.find_local('1abc') == str(mirror / '1abc.cif.gz')
        assert loader.read_file(loader.find_local('1abc')) == MMCIF_HEADER

    def test_missing_file(self, tmp_path):
        with pytest.raises(StructureLoadError):
            StructureLoader().read_file(str(tmp_path / 'absent.cif'))

    def test_empty_structure(self, tmp_path):
        path = tmp_path / '1abc.pdb'
        path.write_text("END\n")

        with pytest.raises(StructureLoadError):
            StructureLoader().load_file(str(path))

    def test_no_repo_configured(self):
        assert StructureLoader({'pdb_repo': None}).candidate_paths('1abc') == []


class TestDownload:

    def test_fetch_builds_rcsb_url(self):
        session = mock_session(MMCIF_HEADER)
        loader = StructureLoader({'rcsb_url': 'https://files.example.org/download/',
                                  'timeout': 5}, session=session)

        assert loader.fetch('1ABC') == MMCIF_HEADER
        session.get.assert_called_once_with('https://files.example.org/download/1abc.cif', timeout=5)

    def test_http_error(self):
        session = mock_session(status_error=requests.HTTPError("404 Not Found"))

        with pytest.raises(StructureLoadError) as exc_info:
            StructureLoader(session=session).fetch('1abc')
        assert exc_info.value.details['pdb_id'] == '1abc'

    def test_network_error(self):
        session = mock_session(exc=requests.ConnectionError("unreachable"))

        with pytest.raises(StructureLoadError):
            StructureLoader(session=session).fetch('1abc')

    def test_non_mmcif_payload(self):
        session = mock_session("<html>maintenance</html>")

        with pytest.raises(StructureLoadError):
            StructureLoader(session=session).fetch('1abc')

    def test_load_falls_back_to_download(self, tmp_path):
        session = mock_session(exc=requests.Timeout("slow"))
        loader = StructureLoader({'pdb_repo': str(tmp_path)}, session=session)

        with pytest.raises(StructureLoadError):
            loader.load('1abc')
        session.get.assert_called_once()

    def test_invalid_id_not_downloaded(self):
        session = mock_session(MMCIF_HEADER)

        with pytest.raises(ValidationError):
            StructureLoader(session=session).load('not-an-id')
        session.get.assert_not_called()
