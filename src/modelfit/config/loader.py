"""Configuration loading and validation."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from modelfit.config.schema import ModelfitConfig

DEFAULT_CONFIG_PATH = Path.home() / ".modelfit" / "modelfit.yaml"


class ConfigError(Exception):
    """Configuration loading or validation error."""


def load_config(path: str | Path | None = None) -> ModelfitConfig:
    """Load and validate modelfit configuration from a YAML file.

    Args:
        path: Path to config file. If None, tries the default location.
              If the file doesn't exist, returns the default config.

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If the config file exists but is invalid
    """
    path = Path(path).expanduser() if path is not None else DEFAULT_CONFIG_PATH

    # Zero-config mode
    if not path.exists():
        return ModelfitConfig()

    try:
        with open(path, encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config from {path}: {e}") from e

    if config_data is None:
        return ModelfitConfig()
    if not isinstance(config_data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")

    try:
        return ModelfitConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def save_config(config: ModelfitConfig, path: str | Path | None = None) -> None:
    """Save configuration to a YAML file.

    Args:
        config: Configuration object to save
        path: Destination path. If None, uses the default location.
    """
    path = Path(path).expanduser() if path is not None else DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
