"""
Centralized configuration management for the feed cache system.

This module provides the ConfigManager class that serves as the single source
of truth for processing parameters, reading overrides from FEED_CACHE_*
environment variables on top of ProcessingDefaults.
"""

import hashlib
import logging
import os

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .processing_defaults import ProcessingDefaults
from ..exceptions import ConfigurationError
from ..interfaces import ConfigurationManagerInterface
from ..models import FIELD_SETS, ProcessingConfig


def _parse_field_list(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Parse a comma separated field list; blank or missing means default."""
    if raw is None or not raw.strip():
        return tuple(default)
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def _check_hash_algorithm(name: str) -> Optional[str]:
    """Return an error message if name is not a fixed-size hashlib algorithm."""
    if name not in hashlib.algorithms_available:
        return f"Unsupported hash algorithm: {name}"
    try:
        digest_size = hashlib.new(name).digest_size
    except ValueError:
        return f"Unsupported hash algorithm: {name}"
    if digest_size == 0:
        return f"Hash algorithm has no fixed digest size: {name}"
    return None


@dataclass
class ProcessingParameters:
    """Processing parameters with environment variable support."""
    workers: int = ProcessingDefaults.WORKERS
    field_set: str = ProcessingDefaults.FIELD_SET
    required_fields: Tuple[str, ...] = field(default_factory=lambda: tuple(ProcessingDefaults.REQUIRED_FIELDS))
    hash_algorithm: str = ProcessingDefaults.HASH_ALGORITHM
    progress_reporting_interval: int = ProcessingDefaults.PROGRESS_INTERVAL
    log_level: str = ProcessingDefaults.LOG_LEVEL

    @classmethod
    def from_environment(cls) -> 'ProcessingParameters':
        """
        Create processing parameters from environment variables.

        Raises:
            ConfigurationError: If a numeric variable is not an integer
        """
        try:
            workers = int(os.environ.get('FEED_CACHE_WORKERS', ProcessingDefaults.WORKERS))
            progress_interval = int(os.environ.get('FEED_CACHE_PROGRESS_INTERVAL', ProcessingDefaults.PROGRESS_INTERVAL))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric configuration value: {e}")

        return cls(
            workers=workers,
            field_set=os.environ.get('FEED_CACHE_FIELD_SET', ProcessingDefaults.FIELD_SET).strip().lower(),
            required_fields=_parse_field_list(
                os.environ.get('FEED_CACHE_REQUIRED_FIELDS'), ProcessingDefaults.REQUIRED_FIELDS
            ),
            hash_algorithm=os.environ.get('FEED_CACHE_HASH_ALGORITHM', ProcessingDefaults.HASH_ALGORITHM).strip().lower(),
            progress_reporting_interval=progress_interval,
            log_level=os.environ.get('FEED_CACHE_LOG_LEVEL', ProcessingDefaults.LOG_LEVEL).strip().upper(),
        )


class ConfigManager(ConfigurationManagerInterface):
    """
    Centralized configuration manager serving as single source of truth.

    Holds the processing parameters loaded from the environment and lets the
    CLI layer apply explicit overrides before validation.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.processing_params = ProcessingParameters.from_environment()
        self.logger.debug(
            f"ConfigManager initialized: workers={self.processing_params.workers}, "
            f"field_set={self.processing_params.field_set}"
        )

    def apply_overrides(self, **overrides: Any) -> None:
        """
        Override processing parameters (e.g. from command line arguments).

        None values are ignored so unset CLI flags keep the environment value.

        Raises:
            ConfigurationError: If an override names an unknown parameter
        """
        for name, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self.processing_params, name):
                raise ConfigurationError(f"Unknown processing parameter: {name}")
            if name == 'required_fields':
                value = tuple(value)
            setattr(self.processing_params, name, value)

    def get_processing_config(self) -> ProcessingConfig:
        """
        Get processing configuration with all parameters.

        Raises:
            ConfigurationError: If the parameters do not form a valid configuration
        """
        params = self.processing_params
        try:
            return ProcessingConfig(
                workers=params.workers,
                field_set=params.field_set,
                required_fields=params.required_fields,
                hash_algorithm=params.hash_algorithm,
                progress_reporting_interval=params.progress_reporting_interval,
            )
        except ValueError as e:
            raise ConfigurationError(str(e))

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigurationError: If any configuration is invalid
        """
        errors = []
        params = self.processing_params

        if params.workers <= 0:
            errors.append("Workers must be greater than 0")

        if params.progress_reporting_interval <= 0:
            errors.append("Progress interval must be greater than 0")

        if params.field_set not in FIELD_SETS:
            errors.append(f"Unknown field set '{params.field_set}' (expected one of: {', '.join(sorted(FIELD_SETS))})")
        else:
            unknown = [name for name in params.required_fields if name not in FIELD_SETS[params.field_set]]
            if unknown:
                errors.append(f"Required fields not in field set '{params.field_set}': {', '.join(unknown)}")

        hash_error = _check_hash_algorithm(params.hash_algorithm)
        if hash_error:
            errors.append(hash_error)

        if params.log_level not in ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'):
            errors.append(f"Unknown log level: {params.log_level}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.debug("Configuration validation passed")
        return True

    def get_configuration_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all configuration settings.

        Returns:
            Dictionary containing configuration summary
        """
        params = self.processing_params
        return {
            'processing': {
                'workers': params.workers,
                'progress_reporting_interval': params.progress_reporting_interval,
                'log_level': params.log_level,
            },
            'records': {
                'field_set': params.field_set,
                'required_fields': list(params.required_fields),
                'hash_algorithm': params.hash_algorithm,
            },
        }

    def reload_configuration(self) -> None:
        """Reload configuration from environment variables."""
        self.processing_params = ProcessingParameters.from_environment()
        self.logger.info("Configuration reloaded from environment variables")


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager

    if _global_config_manager is None:
        _global_config_manager = ConfigManager()

    return _global_config_manager


def reset_config_manager() -> None:
    """Reset the global configuration manager (mainly for testing)."""
    global _global_config_manager
    _global_config_manager = None
