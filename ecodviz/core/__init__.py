#!/usr/bin/env python3
"""
Core infrastructure: application context and logging setup
"""
