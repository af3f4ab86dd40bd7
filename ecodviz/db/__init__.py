#!/usr/bin/env python3
"""
Database access for ecodviz
"""
from .manager import DBManager

__all__ = ['DBManager']
