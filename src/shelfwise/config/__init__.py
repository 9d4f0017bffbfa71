"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_positive_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .moderation import (
    DEFAULT_MAX_PAGE_SIZE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SIMILAR_STORE_LIMIT,
    ModerationConfig,
    get_moderation_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SIMILAR_STORE_LIMIT",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ModerationConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_positive_int",
    "get_database_config",
    "get_moderation_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
