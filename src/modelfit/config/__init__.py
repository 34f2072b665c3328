"""Configuration schema and YAML loading."""

from modelfit.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, save_config
from modelfit.config.schema import (
    CatalogConfig,
    EngineConfig,
    GPUConfig,
    LoggingConfig,
    ModelfitConfig,
    SelectionConfig,
    StorageConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CatalogConfig",
    "ConfigError",
    "EngineConfig",
    "GPUConfig",
    "LoggingConfig",
    "ModelfitConfig",
    "SelectionConfig",
    "StorageConfig",
    "load_config",
    "save_config",
]
