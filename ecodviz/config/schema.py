#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'database': {
            'host': {'type': str, 'required': True},
            'port': {'type': int, 'required': True},
            'database': {'type': str, 'required': True},
            'user': {'type': str, 'required': True},
            'password': {'type': str, 'required': False},
        },
        'structures': {
            'pdb_repo': {'type': str, 'required': False},
            'rcsb_url': {'type': str, 'required': True},
            'timeout': {'type': (int, float), 'required': False},
            'prefer_local': {'type': bool, 'required': False},
        },
        'analysis': {
            'protein_ca_threshold': {'type': int, 'required': True},
            'nucleic_acid_p_threshold': {'type': int, 'required': True},
        },
        'viewer': {
            'width': {'type': int, 'required': False},
            'height': {'type': int, 'required': False},
            'background': {'type': str, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
        },
    }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for section, fields in cls.SCHEMA.items():
            if any(props.get('required', False) for _, props in fields.items()):
                if section not in config:
                    errors.append(f"Missing required configuration section: {section}")
                    continue

            if section not in config:
                continue

            section_config = config[section]
            if not isinstance(section_config, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                if props.get('required', False) and field not in section_config:
                    errors.append(f"Missing required configuration field: {section}.{field}")
                    continue

                if field in section_config and 'type' in props:
                    expected_type = props['type']
                    value = section_config[field]
                    # bool is an int subclass; only accept it where bool is declared
                    if isinstance(value, bool) and expected_type is not bool:
                        valid = False
                    else:
                        valid = isinstance(value, expected_type)
                    if not valid:
                        expected = (expected_type.__name__ if isinstance(expected_type, type)
                                    else '/'.join(t.__name__ for t in expected_type))
                        errors.append(
                            f"Invalid type for {section}.{field}: expected {expected}, "
                            f"got {type(value).__name__}"
                        )

        return errors
