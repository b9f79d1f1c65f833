"""Settings for SwiftSetup.

Settings are layered, later layers winning:

1. built-in defaults
2. YAML file (`swiftsetup.yaml` in the working directory, or `--config`)
3. environment variables (action inputs and SWIFTSETUP_* overrides)
4. command-line options
"""

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from swiftsetup.core.exceptions import ConfigError
from swiftsetup.core.verification import DEFAULT_KEYS_URL

DEFAULT_CONFIG_FILE = "swiftsetup.yaml"

# Checked in order; the first one set wins.
ENVIRONMENT_VARIABLES = {
    "swift_version": ("INPUT_SWIFT-VERSION", "SWIFTSETUP_SWIFT_VERSION"),
    "tool_cache_dir": ("SWIFTSETUP_TOOL_CACHE_DIR",),
    "temp_dir": ("SWIFTSETUP_TEMP_DIR",),
    "install_dir": ("SWIFTSETUP_INSTALL_DIR",),
    "keys_url": ("SWIFTSETUP_KEYS_URL",),
    "keyserver": ("SWIFTSETUP_KEYSERVER",),
    "gnupg_home": ("GNUPGHOME",),
    "vswhere_path": ("VSWHERE_PATH",),
    "download_timeout": ("SWIFTSETUP_DOWNLOAD_TIMEOUT",),
    "skip_build_tools": ("SWIFTSETUP_SKIP_BUILD_TOOLS",),
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass
class SetupConfig:
    """Effective SwiftSetup settings."""

    swift_version: Optional[str] = None
    tool_cache_dir: Optional[Path] = None  # default: RUNNER_TOOL_CACHE
    temp_dir: Optional[Path] = None  # default: RUNNER_TEMP
    install_dir: Optional[Path] = None  # Ubuntu only
    keys_url: str = DEFAULT_KEYS_URL
    keyserver: Optional[str] = None  # refresh keys when set
    gnupg_home: Optional[Path] = None
    vswhere_path: Optional[Path] = None  # directory containing vswhere.exe
    download_timeout: int = 60
    skip_build_tools: bool = False

    def merged(self, values: Mapping[str, Any], source: str = "") -> "SetupConfig":
        """
        Return a copy with values applied on top.

        None values are ignored so an unset layer never clears a lower one.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type
        """
        known = {f.name for f in dataclasses.fields(self)}
        changes: Dict[str, Any] = {}

        for key, value in values.items():
            if key not in known:
                where = f" in {source}" if source else ""
                raise ConfigError(f"Unknown setting{where}: {key}")
            if value is None:
                continue
            changes[key] = _coerce(key, value)

        return dataclasses.replace(self, **changes)


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw setting to the field's type."""
    if key in ("tool_cache_dir", "temp_dir", "install_dir", "gnupg_home", "vswhere_path"):
        if not isinstance(value, (str, Path)) or not str(value).strip():
            raise ConfigError(f"{key} must be a path")
        return Path(os.path.expanduser(str(value)))

    if key == "download_timeout":
        if isinstance(value, bool):
            raise ConfigError(f"{key} must be a positive integer")
        try:
            timeout = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")
        if timeout <= 0:
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")
        return timeout

    if key == "skip_build_tools":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"{key} must be a boolean, got {value!r}")

    if key == "swift_version":
        # YAML reads 5.10 as the float 5.1
        if isinstance(value, float):
            raise ConfigError(
                f"swift_version must be quoted in YAML (got {value!r})"
            )
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ConfigError(f"swift_version must be a string, got {value!r}")
        return str(value).strip()

    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    return value


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Read settings from a YAML file.

    Returns:
        Settings mapping (empty for an empty file)

    Raises:
        ConfigError: If the file is missing or not a YAML mapping
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping of settings")
    return data


def settings_from_environ(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect settings from environment variables."""
    environ = environ if environ is not None else os.environ
    values = {}
    for key, names in ENVIRONMENT_VARIABLES.items():
        for name in names:
            value = environ.get(name)
            if value is not None and value.strip():
                values[key] = value.strip()
                break
    return values


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SetupConfig:
    """
    Build the effective configuration.

    Args:
        config_path: Explicit YAML file; must exist when given
        environ: Environment to read (default: os.environ)
        overrides: Command-line values (None entries are ignored)

    Raises:
        ConfigError: If any layer is invalid
    """
    config = SetupConfig()

    if config_path is not None:
        path = Path(config_path)
        config = config.merged(read_config_file(path), source=str(path))
    else:
        path = Path.cwd() / DEFAULT_CONFIG_FILE
        if path.is_file():
            config = config.merged(read_config_file(path), source=str(path))

    config = config.merged(settings_from_environ(environ), source="environment")

    if overrides:
        config = config.merged(overrides, source="command line")

    return config
