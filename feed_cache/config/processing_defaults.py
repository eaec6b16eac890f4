"""
Centralized configuration defaults for feed processing operations.

This module defines operational configuration constants used throughout the system.
Environment variables (see config_manager) and CLI arguments override these
defaults at runtime.
"""

from ..models import BASIC_FIELDS


class ProcessingDefaults:
    """
    Centralized operational configuration for feed processing.

    All values are defaults that can be overridden via CLI arguments:
    - feed-cache feeds/ cache/ --workers 8
    - feed-cache feeds/ cache/ --field-set extended --require video_id --require title
    - feed-cache feeds/ cache/ --log-level DEBUG
    """

    # Parallelization
    WORKERS = 4  # Number of parallel worker processes (1 = sequential)

    # Record shape
    FIELD_SET = "basic"  # "basic" or "extended"
    REQUIRED_FIELDS = BASIC_FIELDS  # Entries missing any of these are dropped

    # Content addressing
    HASH_ALGORITHM = "sha256"

    # Progress reporting
    PROGRESS_INTERVAL = 5  # Log progress every N completed files

    # Logging
    LOG_LEVEL = "WARNING"  # Default logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all ProcessingDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all operational defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Processing Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
