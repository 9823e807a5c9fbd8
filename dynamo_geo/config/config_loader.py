"""
Configuration loader for the DynamoDB Geo Query system.

This module provides the ConfigLoader class that handles loading and validating
JSON configuration files for multi-environment deployments.
"""

import copy
import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, Optional

from ..exceptions import GeoConfigurationError, GeoValidationError, GeoQueryBaseException
from ..utils import get_logger


REQUIRED_ENVIRONMENT_KEYS = ["dynamodb", "geo", "logging", "processing"]
REQUIRED_GEO_KEYS = ["hash_key_column", "range_key_column", "index_name", "hash_key_length"]


class ConfigLoader:
    """
    Configuration loader and validator for the geo query system.

    This class handles loading environment-specific configuration from JSON files,
    merging the shared section, validating required fields, and providing access
    to the geo, DynamoDB and processing settings.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files (defaults to 'config/')
        """
        self.logger = get_logger(__name__)
        self.config_dir = Path(config_dir) if config_dir else Path("config")

    @lru_cache(maxsize=2)
    def load_environment_config(self, environment: str) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.

        Args:
            environment: Environment name (development/production)

        Returns:
            Dictionary containing environment-specific configuration merged with shared config

        Raises:
            GeoConfigurationError: If configuration cannot be loaded
            GeoValidationError: If configuration structure is invalid
        """
        env_config_path = self.config_dir / "environment_config.json"

        if not env_config_path.exists():
            raise GeoConfigurationError(
                f"Environment configuration file not found: {env_config_path}"
            )

        try:
            with open(env_config_path, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise GeoConfigurationError(
                f"Invalid JSON in environment configuration: {str(e)}"
            )

        try:
            env_config = self._merge_shared_config(config_data, environment)
            self._validate_environment_config(env_config, environment)
        except GeoQueryBaseException:
            raise
        except Exception as e:
            raise GeoConfigurationError(
                f"Failed to load environment configuration: {str(e)}"
            )

        env_config["_validation"] = config_data.get("validation", {})

        self.logger.info(f"Loaded configuration for environment: {environment}")
        return env_config

    def get_geo_settings(self, environment: str) -> Dict[str, Any]:
        """
        Get the geo attribute layout for an environment.

        Args:
            environment: Environment name

        Returns:
            Copy of the ``geo`` section of the environment configuration
        """
        return copy.deepcopy(self.load_environment_config(environment)["geo"])

    def get_dynamodb_settings(self, environment: str) -> Dict[str, Any]:
        """Get the DynamoDB connection settings for an environment."""
        return copy.deepcopy(self.load_environment_config(environment)["dynamodb"])

    def get_processing_settings(self, environment: str) -> Dict[str, Any]:
        """Get the query processing settings (worker counts, retries) for an environment."""
        return copy.deepcopy(self.load_environment_config(environment)["processing"])

    def validate_environment_variables(self, environment: str) -> None:
        """
        Validate that required environment variables are set.

        Args:
            environment: Environment name to validate

        Raises:
            GeoValidationError: If required environment variables are missing
        """
        env_config = self.load_environment_config(environment)
        required_vars = env_config.get("_validation", {}).get("required_environment_variables", [])

        missing_vars = [var for var in required_vars if not os.getenv(var)]

        if missing_vars:
            raise GeoValidationError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )

        self.logger.info(f"Environment variables validated for: {environment}")

    def _merge_shared_config(self, config_data: Dict[str, Any], environment: str) -> Dict[str, Any]:
        """
        Merge the ``shared`` section underneath the environment section.

        Dictionary sections are merged key by key with environment values
        winning; scalar shared values only fill keys the environment lacks.
        """
        if "environments" not in config_data:
            raise GeoValidationError("Missing 'environments' key in configuration")

        if environment not in config_data["environments"]:
            available_envs = list(config_data["environments"].keys())
            raise GeoValidationError(
                f"Environment '{environment}' not found. Available: {available_envs}"
            )

        env_config = copy.deepcopy(config_data["environments"][environment])

        for key, shared_value in config_data.get("shared", {}).items():
            if isinstance(shared_value, dict) and isinstance(env_config.get(key), dict):
                merged = copy.deepcopy(shared_value)
                merged.update(env_config[key])
                env_config[key] = merged
            elif key not in env_config:
                env_config[key] = copy.deepcopy(shared_value)

        return env_config

    def _validate_environment_config(self, env_config: Dict[str, Any], environment: str) -> None:
        """
        Validate merged environment configuration structure.

        Args:
            env_config: Merged configuration data to validate
            environment: Environment name being validated

        Raises:
            GeoValidationError: If configuration is invalid
        """
        for key in REQUIRED_ENVIRONMENT_KEYS:
            if key not in env_config:
                raise GeoValidationError(
                    f"Missing required key '{key}' in {environment} configuration"
                )

        if "table_name" not in env_config["dynamodb"]:
            raise GeoValidationError(
                f"Missing 'table_name' in {environment} dynamodb configuration"
            )

        missing_geo_keys = [key for key in REQUIRED_GEO_KEYS if key not in env_config["geo"]]
        if missing_geo_keys:
            raise GeoValidationError(
                f"Missing required geo keys in {environment} configuration (including shared): "
                f"{missing_geo_keys}"
            )

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self.load_environment_config.cache_clear()
        self.logger.info("Configuration cache cleared")
