#!/usr/bin/env python3
"""
Exception hierarchy for ecodviz.
All custom exceptions should inherit from ECODError.
"""
from typing import Dict, Any, Optional


class ECODError(Exception):
    """Base exception for all ecodviz errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ECODError):
    """Error related to configuration issues"""
    pass


class DatabaseError(ECODError):
    """Base class for database-related errors"""
    pass


class ConnectionError(DatabaseError):
    """Error connecting to a database"""
    pass


class QueryError(DatabaseError):
    """Error executing a database query"""
    pass


class FileOperationError(ECODError):
    """Error during file operations"""
    pass


class StructureLoadError(FileOperationError):
    """Structure file could not be located, downloaded or parsed"""
    pass


class ValidationError(ECODError):
    """Data validation error"""
    pass


class StructureError(ECODError):
    """Base class for structure analysis errors"""
    pass


class NoProteinChainFound(StructureError):
    """No chain in the structure qualifies as protein.

    ``details['all_chains']`` lists every chain observed so the caller can
    present alternatives (the entry may be nucleic-acid only).
    """
    pass


class ChainNotPresent(StructureError):
    """Requested chain does not exist in the loaded structure.

    Non-fatal: analysis falls back to automatic chain selection and keeps
    this error as a warning on the resulting StructureInfo.
    """
    pass


class MappingError(ECODError):
    """Base class for per-domain mapping misses"""
    pass


class UnmappableDomainRange(MappingError):
    """Domain range could not be projected onto structure numbering"""
    pass


class EmptySelection(MappingError):
    """A resolved range matched zero atoms in the structure"""
    pass


class ViewerError(ECODError):
    """Error raised by a viewer backend"""
    pass


class ViewerUnavailable(ViewerError):
    """Rendering capability could not be reached or was already closed"""
    pass
