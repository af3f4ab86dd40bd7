from .domain_repository import DomainRepository, parse_protein_id

__all__ = ['DomainRepository', 'parse_protein_id']
