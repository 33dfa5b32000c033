"""Application configuration helpers."""

from __future__ import annotations

from .catalogue import DEFAULT_RESERVED_PREFIX, CatalogueConfig, get_catalogue_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_RESERVED_PREFIX",
    "CatalogueConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_catalogue_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
