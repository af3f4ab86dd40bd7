"""
Command-line interface for ecodviz.

``ecodviz map`` reports how domains land on a structure chain;
``ecodviz render`` additionally writes HTML, PyMOL or figure outputs.
"""
from .main import main, create_parser

__all__ = ['main', 'create_parser']
