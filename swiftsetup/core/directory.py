"""
Directory resolution for SwiftSetup.

On a GitHub Actions runner the tool cache and scratch space are provided by
the runner (RUNNER_TOOL_CACHE, RUNNER_TEMP). Outside a runner SwiftSetup
falls back to a per-user directory.

Directory Structure (fallback, ~/.swiftsetup/ or %USERPROFILE%\\.swiftsetup\\):
    - tool-cache/   : Verified installers keyed by tool/version/arch
    - temp/         : Downloads in flight
    - toolchains/   : Extracted toolchains (Linux)
"""

import os
import tempfile
from pathlib import Path

from swiftsetup.core.exceptions import ConfigError


def get_home_dir() -> Path:
    """
    Get the per-user SwiftSetup directory.

    Returns:
        Path: %USERPROFILE%\\.swiftsetup on Windows, ~/.swiftsetup elsewhere
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine SwiftSetup home directory."
            )
        return Path(user_profile) / ".swiftsetup"
    return Path.home() / ".swiftsetup"


def get_tool_cache_dir() -> Path:
    """Tool cache root: RUNNER_TOOL_CACHE when set."""
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return get_home_dir() / "tool-cache"


def get_temp_dir() -> Path:
    """Scratch directory for downloads: RUNNER_TEMP when set."""
    runner_temp = os.environ.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir()) / "swiftsetup"


def get_install_dir() -> Path:
    """Root directory extracted toolchains are installed under."""
    return get_home_dir() / "toolchains"


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if needed and return it."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


__all__ = [
    "get_home_dir",
    "get_tool_cache_dir",
    "get_temp_dir",
    "get_install_dir",
    "ensure_directory",
]
