#!/usr/bin/env python3
"""
Default configuration values for ecodviz
"""

DEFAULT_CONFIG = {
    'database': {
        'database': 'ecod_af2_pdb',
        'host': 'localhost',
        'port': 5432,
        'user': 'ecod',
    },
    'structures': {
        'pdb_repo': '/usr2/pdb/data',
        'rcsb_url': 'https://files.rcsb.org/download',
        'timeout': 30,
        'prefer_local': True,
    },
    'analysis': {
        'protein_ca_threshold': 10,
        'nucleic_acid_p_threshold': 5,
    },
    'viewer': {
        'width': 800,
        'height': 600,
        'background': '#ffffff',
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}
