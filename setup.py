#!/usr/bin/env python3
"""
Setup script for ecodviz
"""

from setuptools import setup, find_packages

setup(
    name="ecodviz",
    version="0.1.0",
    description="Map ECOD protein domains onto 3D structures and render them",
    author="RD Schaeffer",
    author_email="dustin.schaeffer@gmail.com",
    packages=find_packages(include=["ecodviz", "ecodviz.*"]),
    install_requires=[
        "psycopg2-binary>=2.9.3",
        "pyyaml>=6.0",
        "biopython>=1.79",
        "pandas>=1.4.0",
        "matplotlib>=3.5.0",
        "requests>=2.27.0",
        "py3Dmol>=2.0.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'ecodviz=ecodviz.cli.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
