#!/usr/bin/env python3
"""
ecodviz: ECOD domain mapping and visualization

Projects classified protein domains onto 3D structure chains and renders
them with py3Dmol, PyMOL scripts or matplotlib domain maps.
"""

__version__ = '0.1.0'
__author__ = 'ECOD Team'
__email__ = 'example@example.org'
__license__ = 'MIT'

from .exceptions import ECODError
from .error_handlers import handle_exceptions

__all__ = ['ECODError', 'handle_exceptions']
