"""
Cache gate for verified Swift installers.

Installers are cached under `swift-<namespace>` (e.g. `swift-ubuntu20.04`)
so packages for different platforms never share an entry. Only installers
that passed signature verification are inserted, so a hit skips download and
verification entirely.
"""

import logging
from pathlib import Path
from typing import Optional

from swiftsetup.core.platform import System
from swiftsetup.core.tool_cache import ToolCache
from swiftsetup.toolchain.versions import TOOLCHAIN_NAME, Package

logger = logging.getLogger(__name__)


def toolchain_key(system: System) -> str:
    """
    Cache key for a platform.

    Example:
        >>> toolchain_key(System("windows", "10"))
        'swift-windows10'
    """
    return f"{TOOLCHAIN_NAME}-{system.namespace}"


class CacheGate:
    """Looks up and inserts installers in the tool cache for one system."""

    def __init__(self, tool_cache: ToolCache, system: System):
        self.tool_cache = tool_cache
        self.system = system
        self.key = toolchain_key(system)

    def lookup(self, package: Package) -> Optional[Path]:
        """
        Find a cached installer for a package.

        Returns:
            Path to the cached installer, or None when not cached. A blank or
            whitespace-only result from the store is a miss.
        """
        found = self.tool_cache.find(self.key, package.version, self.system.arch)

        if found is None or not str(found).strip():
            logger.debug("No cached installer found")
            return None

        installer_path = Path(str(found).strip()) / package.name
        logger.debug(f"Cached installer found: {installer_path}")
        return installer_path

    def insert(self, installer_path: Path, package: Package) -> Path:
        """
        Store a verified installer.

        Returns:
            Path to the installer inside the cache
        """
        entry_dir = self.tool_cache.cache_file(
            installer_path,
            package.name,
            self.key,
            package.version,
            self.system.arch,
        )
        return Path(entry_dir) / package.name


__all__ = [
    "CacheGate",
    "toolchain_key",
]
