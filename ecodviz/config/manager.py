#!/usr/bin/env python3
"""
Configuration manager for ecodviz
Handles loading and accessing configuration from various sources.
"""
import os
import copy
import yaml
import json
import logging
from typing import Dict, Any, Optional, List, Tuple

from ecodviz.exceptions import ConfigurationError
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG

# Variables used by the ECOD web application for its database pool
DB_ENV_VARS = {
    'DB_HOST': 'host',
    'DB_PORT': 'port',
    'DB_NAME': 'database',
    'DB_USER': 'user',
    'DB_PASSWORD': 'password',
}


class ConfigManager:
    """Configuration manager for ecodviz"""

    ENV_PREFIX = "ECODVIZ_"

    def __init__(self, config_path: Optional[str] = None, strict: bool = False):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file (optional)
            strict: Raise ConfigurationError on schema errors instead of logging them
        """
        self.logger = logging.getLogger("ecodviz.config")
        self.config_path = config_path
        self.strict = strict
        self.config: Dict[str, Any] = {}

        self._load_defaults()

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}",
                                         {"config_path": config_path})
            self._load_from_file(config_path)

            local_config_path = self._get_local_config_path(config_path)
            if os.path.exists(local_config_path):
                self._load_from_file(local_config_path)
                self.logger.info(f"Merged local configuration from {local_config_path}")

        self._load_db_env()
        self._load_from_env()

        self._validate_config()

    def _get_local_config_path(self, config_path: str) -> str:
        """Get path to local configuration file based on main config path"""
        config_dir = os.path.dirname(config_path)
        name, ext = os.path.splitext(os.path.basename(config_path))

        # Format: <filename>.local.<extension>
        local_path = os.path.join(config_dir, f"{name}.local{ext}")
        self.logger.debug(f"Looking for local config at: {local_path}")
        return local_path

    def _load_defaults(self) -> None:
        """Load default configuration values"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger.debug("Loaded default configuration")

    def _load_from_file(self, config_path: str) -> None:
        """Load configuration from YAML or JSON file

        Args:
            config_path: Path to configuration file

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        try:
            with open(config_path, 'r') as f:
                if config_path.endswith('.json'):
                    file_config = json.load(f)
                else:  # Assume YAML otherwise
                    file_config = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            error_msg = f"Error loading config file {config_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, {"config_path": config_path}) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping",
                                     {"config_path": config_path})

        self._deep_update(self.config, file_config)
        self.logger.info(f"Loaded configuration from {config_path}")

    def _load_db_env(self) -> None:
        """Apply DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD overrides"""
        database = self.config.setdefault('database', {})
        for var, key in DB_ENV_VARS.items():
            value = os.environ.get(var)
            if not value:
                continue
            if key == 'port':
                try:
                    value = int(value)
                except ValueError as e:
                    raise ConfigurationError(f"Invalid {var} value: {value}", {var: value}) from e
            database[key] = value

    def _load_from_env(self) -> None:
        """Override config with environment variables

        Environment variables should be prefixed with ECODVIZ_
        and use double underscore __ for nesting.
        Example: ECODVIZ_STRUCTURES__PDB_REPO for structures.pdb_repo
        """
        for key, value in os.environ.items():
            if key.startswith(self.ENV_PREFIX):
                config_key = key[len(self.ENV_PREFIX):].lower()

                if "__" in config_key:
                    parts = config_key.split("__")
                    self._set_nested_value(self.config, parts, value)
                else:
                    self.config[config_key] = self._convert_value(value)

        self.logger.debug("Applied environment variable overrides")

    def _set_nested_value(self, config: Dict[str, Any],
                          key_parts: List[str], value: str) -> None:
        """Set a nested value in the configuration dictionary

        Args:
            config: Configuration dictionary
            key_parts: List of nested key parts
            value: Value to set
        """
        current = config
        for part in key_parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[key_parts[-1]] = self._convert_value(value)

    def _convert_value(self, value: str) -> Any:
        """Convert string environment variable to appropriate type

        Args:
            value: String value to convert

        Returns:
            Converted value with appropriate type
        """
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False
        try:
            return int(value)
        except ValueError:
            try:
                return float(value)
            except ValueError:
                return value

    def _deep_update(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """Recursively update target dictionary with values from source

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_update(target[key], value)
            else:
                target[key] = value

    def _validate_config(self) -> None:
        """Validate the configuration against the schema"""
        errors = ConfigSchema.validate(self.config)

        if errors:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            if self.strict:
                raise ConfigurationError("Invalid configuration", {"errors": errors})
            self.logger.warning("Using configuration with validation errors")
        else:
            self.logger.debug("Configuration validated successfully")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation

        Args:
            key: Configuration key (can use dot notation for nested values)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if '.' in key:
            current = self.config
            for part in key.split('.'):
                if not isinstance(current, dict) or part not in current:
                    return default
                current = current[part]
            return current
        return self.config.get(key, default)

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration as a dictionary

        Returns:
            Dictionary with database configuration
        """
        return self.config.get('database', {})

    def get_structure_config(self) -> Dict[str, Any]:
        """Get structure source configuration (local mirror, RCSB URL, timeout)"""
        return self.config.get('structures', {})

    def get_viewer_config(self) -> Dict[str, Any]:
        """Get viewer size and background configuration"""
        return self.config.get('viewer', {})

    def get_chain_thresholds(self) -> Tuple[int, int]:
        """Get (CA threshold, P threshold) used to classify chains

        Returns:
            Tuple of protein alpha-carbon and nucleic-acid phosphorus thresholds
        """
        analysis = self.config.get('analysis', {})
        return (analysis.get('protein_ca_threshold', 10),
                analysis.get('nucleic_acid_p_threshold', 5))
