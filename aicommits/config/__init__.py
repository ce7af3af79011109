"""Configuration Management Package"""

from aicommits.config.settings import (
    CONFIG_KEYS,
    SETTINGS,
    SETTINGS_BY_KEY,
    ConfigError,
    MissingCredentialError,
    Setting,
    UnknownKeyError,
    ValidationError,
)
from aicommits.config.manager import (
    ConfigManager,
    ValidConfig,
    get_config,
    get_config_path,
    set_configs,
)

__all__ = [
    "CONFIG_KEYS",
    "SETTINGS",
    "SETTINGS_BY_KEY",
    "ConfigError",
    "ConfigManager",
    "MissingCredentialError",
    "Setting",
    "UnknownKeyError",
    "ValidConfig",
    "ValidationError",
    "get_config",
    "get_config_path",
    "set_configs",
]
