"""
Platform detection for SwiftSetup.

This module inspects the runner to build the OS descriptor (`System`) used to
select a Swift package and to scope tool cache entries.

Usage:
    from swiftsetup.core.platform import detect_system, is_supported_system

    system = detect_system()
    print(f"Cache namespace: {system.namespace}")

    if not is_supported_system(system):
        print(f"{system.os} is not supported")
"""

import functools
import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SUPPORTED_OS = ("ubuntu", "windows")

OS_RELEASE_PATH = Path("/etc/os-release")


@dataclass(frozen=True)
class System:
    """
    Operating environment of the runner.

    Attributes:
        os: Operating system id ('ubuntu', 'windows', or the detected name)
        version: OS version ('20.04', '10')
        arch: CPU architecture ('x64', 'arm64')
    """

    os: str
    version: str
    arch: str = "x64"

    @property
    def namespace(self) -> str:
        """
        Cache namespace for this platform.

        Example:
            >>> System("ubuntu", "20.04").namespace
            'ubuntu20.04'
        """
        return f"{self.os}{self.version}"

    @property
    def name(self) -> str:
        """Human readable platform name."""
        if self.os == "ubuntu":
            return f"Ubuntu {self.version}"
        if self.os == "windows":
            return f"Windows {self.version}"
        return f"{self.os} {self.version}".strip()

    def __str__(self) -> str:
        return f"{self.name} ({self.arch})"


def is_supported_system(system: System) -> bool:
    """Check whether the OS kind is one SwiftSetup can install on."""
    return system.os in SUPPORTED_OS


@functools.lru_cache(maxsize=1)
def detect_system() -> System:
    """
    Detect the current system.

    This function is cached - it only runs detection once per process.

    Returns:
        System describing the runner. Unsupported platforms are still
        described; callers check `is_supported_system`.
    """
    kind = platform.system().lower()
    arch = _detect_architecture()

    if kind == "windows":
        release = platform.release() or "10"
        # Server editions report their marketing year; installers target windows10
        version = "10" if not release.isdigit() or int(release) >= 10 else release
        return System(os="windows", version=version, arch=arch)

    if kind == "linux":
        os_release = _read_os_release()
        distro_id = os_release.get("ID", "linux")
        version_id = os_release.get("VERSION_ID", "")
        logger.debug(f"Detected Linux distribution: {distro_id} {version_id}")
        return System(os=distro_id, version=version_id, arch=arch)

    return System(os=kind, version=_detect_os_version(kind), arch=arch)


def clear_system_cache():
    """Clear the detection cache (mainly for tests)."""
    detect_system.cache_clear()


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def _detect_os_version(kind: str) -> str:
    if kind == "darwin":
        version = platform.mac_ver()[0]
        return version if version else "unknown"
    return platform.release()


def _read_os_release(path: Optional[Path] = None) -> Dict[str, str]:
    """
    Parse an os-release file into a dictionary.

    Args:
        path: Path to os-release (default: /etc/os-release)

    Returns:
        Mapping of keys to unquoted values, empty if the file is missing
    """
    path = path or OS_RELEASE_PATH
    values: Dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return values

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")

    return values


__all__ = [
    "System",
    "SUPPORTED_OS",
    "detect_system",
    "is_supported_system",
    "clear_system_cache",
]
