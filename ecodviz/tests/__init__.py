"""
Tests for ecodviz
"""
