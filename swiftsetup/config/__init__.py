"""Configuration module for SwiftSetup."""

from swiftsetup.config.settings import (
    DEFAULT_CONFIG_FILE,
    SetupConfig,
    load_config,
    read_config_file,
    settings_from_environ,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "SetupConfig",
    "load_config",
    "read_config_file",
    "settings_from_environ",
]
