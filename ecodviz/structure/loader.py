#!/usr/bin/env python3
"""
Structure file lookup, download and parsing.

Structures are looked up in a local PDB mirror first and downloaded from
RCSB as mmCIF otherwise. Parsing uses Biopython; the parsed structure is
flattened into an AtomIndex for the viewers.
"""
import io
import os
import re
import gzip
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

import requests
from Bio.PDB import MMCIFParser, PDBParser

from ecodviz.exceptions import StructureLoadError, ValidationError
from ecodviz.structure.viewer import AtomIndex

PDB_ID_RE = re.compile(r'^[0-9][A-Za-z0-9]{3}$')


def validate_pdb_id(pdb_id: str) -> str:
    """Normalize a PDB id to lower case

    Raises:
        ValidationError: If the id is not four alphanumerics starting with a digit
    """
    if not pdb_id or not PDB_ID_RE.match(pdb_id.strip()):
        raise ValidationError(f"Invalid PDB ID: {pdb_id!r}", {"pdb_id": pdb_id})
    return pdb_id.strip().lower()


def is_mmcif_text(text: str) -> bool:
    return text.lstrip().startswith('data_') or '_entry.id' in text


@dataclass
class LoadedStructure:
    """A parsed structure and the text it was parsed from"""
    pdb_id: str
    text: str
    format: str
    source: str
    structure: Any
    index: AtomIndex

    @property
    def path(self) -> Optional[str]:
        """Local file path, when the structure came from disk"""
        return None if self.source.startswith('http') else self.source


class StructureLoader:
    """Locate, download and parse structures"""

    def __init__(self, structure_config: Optional[Dict[str, Any]] = None,
                 session: Optional[requests.Session] = None):
        """Initialize loader

        Args:
            structure_config: ``structures`` configuration section
            session: requests session to use for downloads
        """
        config = structure_config or {}
        self.pdb_repo = config.get('pdb_repo')
        self.rcsb_url = config.get('rcsb_url', 'https://files.rcsb.org/download').rstrip('/')
        self.timeout = config.get('timeout', 30)
        self.prefer_local = config.get('prefer_local', True)
        self.session = session or requests.Session()
        self.logger = logging.getLogger("ecodviz.structure.loader")

    def candidate_paths(self, pdb_id: str) -> List[str]:
        """Paths in the local mirror where the entry may live"""
        if not self.pdb_repo:
            return []
        pdb_id = validate_pdb_id(pdb_id)
        return [
            f"{self.pdb_repo}/structures/divided/mmCIF/{pdb_id[1:3]}/{pdb_id}.cif.gz",
            f"{self.pdb_repo}/structures/divided/mmCIF/{pdb_id[1:3]}/{pdb_id}.cif",
            f"{self.pdb_repo}/mmCIF/{pdb_id}.cif.gz",
            f"{self.pdb_repo}/mmCIF/{pdb_id}.cif",
            f"{self.pdb_repo}/pdb/{pdb_id}.pdb",
        ]

    def find_local(self, pdb_id: str) -> Optional[str]:
        for path in self.candidate_paths(pdb_id):
            if os.path.exists(path):
                self.logger.debug(f"Found local structure file {path}")
                return path
        return None

    def read_file(self, path: str) -> str:
        """Read a (possibly gzipped) structure file as text"""
        try:
            if path.endswith('.gz'):
                with gzip.open(path, 'rt') as f:
                    return f.read()
            with open(path, 'r') as f:
                return f.read()
        except OSError as e:
            raise StructureLoadError(f"Failed to read structure file {path}: {str(e)}",
                                     {"path": path}) from e

    def fetch(self, pdb_id: str) -> str:
        """Download mmCIF text from RCSB

        Raises:
            StructureLoadError: On HTTP failure or if the payload is not mmCIF
        """
        pdb_id = validate_pdb_id(pdb_id)
        url = f"{self.rcsb_url}/{pdb_id}.cif"
        self.logger.info(f"Downloading {pdb_id} from {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise StructureLoadError(f"Failed to download structure {pdb_id}: {str(e)}",
                                     {"pdb_id": pdb_id, "url": url}) from e

        if not is_mmcif_text(response.text):
            raise StructureLoadError(f"Invalid mmCIF data received for {pdb_id}",
                                     {"pdb_id": pdb_id, "url": url})
        return response.text

    def parse(self, pdb_id: str, text: str, structure_format: str = 'cif'):
        """Parse structure text with Biopython"""
        if structure_format == 'cif':
            parser = MMCIFParser(QUIET=True)
        else:
            parser = PDBParser(QUIET=True)
        try:
            return parser.get_structure(pdb_id, io.StringIO(text))
        except Exception as e:
            # Biopython raises a variety of exception types on malformed input
            raise StructureLoadError(f"Failed to parse structure {pdb_id}: {str(e)}",
                                     {"pdb_id": pdb_id, "format": structure_format}) from e

    def load_text(self, pdb_id: str, text: str, structure_format: str = 'cif',
                  source: str = '<memory>') -> LoadedStructure:
        structure = self.parse(pdb_id, text, structure_format)
        index = AtomIndex.from_structure(structure)
        if not len(index):
            raise StructureLoadError(f"Structure {pdb_id} contains no atoms",
                                     {"pdb_id": pdb_id, "source": source})
        self.logger.info(f"Loaded {pdb_id} from {source}: {len(index)} atoms, "
                         f"chains {', '.join(index.chain_ids())}")
        return LoadedStructure(pdb_id, text, structure_format, source, structure, index)

    def load(self, pdb_id: str) -> LoadedStructure:
        """Load a structure from the local mirror, falling back to RCSB

        Raises:
            ValidationError: If the PDB id is malformed
            StructureLoadError: If no source provides a parseable structure
        """
        pdb_id = validate_pdb_id(pdb_id)

        local_error = None
        path = self.find_local(pdb_id) if self.prefer_local else None
        if path:
            structure_format = 'pdb' if path.endswith('.pdb') else 'cif'
            try:
                return self.load_text(pdb_id, self.read_file(path), structure_format, path)
            except StructureLoadError as e:
                self.logger.warning(f"Local structure unusable, trying RCSB: {e.message}")
                local_error = e

        try:
            text = self.fetch(pdb_id)
        except StructureLoadError as e:
            if local_error is not None:
                e.details['local_error'] = local_error.message
            raise
        return self.load_text(pdb_id, text, 'cif', f"{self.rcsb_url}/{pdb_id}.cif")

    def load_file(self, path: str, pdb_id: Optional[str] = None) -> LoadedStructure:
        """Load a structure file given by path (mmCIF or PDB, optionally gzipped)"""
        name = os.path.basename(path)
        for suffix in ('.gz', '.cif', '.pdb', '.ent'):
            if name.endswith(suffix):
                name = name[:-len(suffix)]
        structure_format = 'pdb' if re.search(r'\.(pdb|ent)(\.gz)?$', path) else 'cif'
        return self.load_text(pdb_id or name, self.read_file(path), structure_format, path)
