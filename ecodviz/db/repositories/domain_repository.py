# ecodviz/db/repositories/domain_repository.py
#!/usr/bin/env python3
"""
Domain repository for ecodviz
Reads domain descriptors and PDB entry information from the ECOD database
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from ecodviz.exceptions import ValidationError
from ecodviz.db.manager import DBManager
from ecodviz.models.domain import DomainDescriptor

EXPERIMENTAL_STRUCTURE = 'experimental structure'


def parse_protein_id(protein_id: str) -> Tuple[str, Optional[str]]:
    """Split ``4ubp_A`` into (``4UBP``, ``A``); a bare PDB id has no chain

    Raises:
        ValidationError: If the id is empty or malformed
    """
    if not protein_id or not protein_id.strip():
        raise ValidationError("Empty protein ID")
    parts = protein_id.strip().split('_')
    if len(parts) > 2 or not parts[0]:
        raise ValidationError(f"Invalid protein ID: {protein_id}", {"protein_id": protein_id})
    pdb_id = parts[0].upper()
    chain_id = parts[1] if len(parts) == 2 and parts[1] else None
    return pdb_id, chain_id


class DomainRepository:
    """Repository for ECOD domain data"""

    def __init__(self, db_manager: DBManager):
        """Initialize repository

        Args:
            db_manager: Database manager instance
        """
        self.db = db_manager
        self.logger = logging.getLogger("ecodviz.db.domain_repository")

    def get_domain_row(self, domain_id: str) -> Optional[Dict[str, Any]]:
        """Get the classification row of a domain

        Experimental-structure domains come from view_dom_clsrel_pdbinfo,
        computed models from view_dom_clsrel_csminfo.
        """
        rows = self.db.execute_dict_query(
            "SELECT type FROM public.domain WHERE id = %s", (domain_id,)
        )
        if not rows:
            return None

        if rows[0]['type'] == EXPERIMENTAL_STRUCTURE:
            view = 'public.view_dom_clsrel_pdbinfo'
        else:
            view = 'public.view_dom_clsrel_csminfo'

        rows = self.db.execute_dict_query(f"SELECT * FROM {view} WHERE id = %s", (domain_id,))
        return rows[0] if rows else None

    def get_domain(self, domain_id: str) -> Optional[DomainDescriptor]:
        """Get a domain descriptor by ECOD domain id"""
        row = self.get_domain_row(domain_id)
        if row is None:
            return None
        return DomainDescriptor.from_db_row(row)

    def get_domains_for_chain(self, pdb_id: str, chain_id: Optional[str] = None) -> List[DomainDescriptor]:
        """Get the domains of a PDB entry, optionally restricted to one chain

        Args:
            pdb_id: PDB id (any case)
            chain_id: Chain to restrict to

        Returns:
            Domain descriptors ordered by start_index, coloured by row position
        """
        query = """
        SELECT *
        FROM public.view_dom_clsrel_pdbinfo
        WHERE pdb_id = %s
        """
        params: List[Any] = [pdb_id.upper()]
        if chain_id:
            query += " AND chain_str LIKE %s"
            params.append(f"%{chain_id}%")
        query += " ORDER BY start_index"

        rows = self.db.execute_dict_query(query, tuple(params))

        domains = []
        for index, row in enumerate(rows):
            try:
                domains.append(DomainDescriptor.from_db_row(row, index))
            except ValidationError as e:
                self.logger.warning(f"Skipping domain row: {e.message}")
        self.logger.info(f"Found {len(domains)} domains for {pdb_id}"
                         f"{'_' + chain_id if chain_id else ''}")
        return domains

    def get_domains_for_protein(self, protein_id: str) -> List[DomainDescriptor]:
        """Get domains for a ``PDB`` or ``PDB_CHAIN`` protein id"""
        pdb_id, chain_id = parse_protein_id(protein_id)
        return self.get_domains_for_chain(pdb_id, chain_id)

    def get_pdb_info(self, pdb_id: str) -> Optional[Dict[str, Any]]:
        """Get method, resolution and citation of a PDB entry"""
        rows = self.db.execute_dict_query(
            "SELECT * FROM public.pdb_info WHERE pdb = %s", (pdb_id.upper(),)
        )
        return rows[0] if rows else None
