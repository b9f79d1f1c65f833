"""
Tool cache store for verified installers.

Entries are addressed by tool name, version and architecture and laid out the
same way the GitHub Actions runner lays out its hosted tool cache:

    <root>/<tool>/<version>/<arch>/<file>
    <root>/<tool>/<version>/<arch>.complete

An entry only counts as present once its `.complete` marker exists, so an
interrupted insert is never returned by `find`.
"""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from swiftsetup.core.directory import get_tool_cache_dir
from swiftsetup.core.exceptions import ToolCacheError
from swiftsetup.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


class ToolCache:
    """
    Key -> directory lookup and insert service for cached tools.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("swift-ubuntu20.04", "5.6.1", "x64")
        ''
        >>> cache.cache_file(Path("/tmp/dl"), "swift.tar.gz", "swift-ubuntu20.04", "5.6.1", "x64")
        PosixPath('/opt/hostedtoolcache/swift-ubuntu20.04/5.6.1/x64')
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 30):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: RUNNER_TOOL_CACHE)
            lock_timeout: Timeout in seconds for acquiring the insert lock
        """
        self.root = Path(root) if root else get_tool_cache_dir()
        self.lock_path = self.root / ".lock" / "tool-cache.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root}")

    def _entry_dir(self, tool: str, version: str, arch: str) -> Path:
        if not tool:
            raise ValueError("Tool name cannot be empty")
        if not version:
            raise ValueError("Version cannot be empty")
        return self.root / tool / version / (arch or "default")

    @staticmethod
    def _marker(entry_dir: Path) -> Path:
        return entry_dir.parent / f"{entry_dir.name}.complete"

    @contextmanager
    def _lock(self):
        """
        Context manager for insert locking.

        Raises:
            ToolCacheError: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                logger.debug("Acquired tool cache lock")
                yield
            logger.debug("Released tool cache lock")
        except Timeout as e:
            raise ToolCacheError(
                f"Could not acquire tool cache lock within {self.lock_timeout} seconds"
            ) from e

    def find(self, tool: str, version: str, arch: str) -> str:
        """
        Find a cached entry.

        Args:
            tool: Tool name (e.g., 'swift-ubuntu20.04')
            version: Exact version
            arch: Architecture

        Returns:
            Entry directory as a string, or '' when not cached
        """
        entry_dir = self._entry_dir(tool, version, arch)

        if entry_dir.is_dir() and self._marker(entry_dir).is_file():
            logger.debug(f"Found in cache: {entry_dir}")
            return str(entry_dir)

        logger.debug(f"Not found in cache: {tool} {version} {arch}")
        return ""

    def cache_file(
        self,
        source: Path,
        target_name: str,
        tool: str,
        version: str,
        arch: str,
    ) -> Path:
        """
        Copy a single file into the cache.

        Args:
            source: File to cache
            target_name: File name inside the cache entry
            tool: Tool name
            version: Exact version
            arch: Architecture

        Returns:
            Entry directory containing `target_name`

        Raises:
            ToolCacheError: If the file cannot be stored
        """
        source = Path(source)
        if not source.is_file():
            raise ToolCacheError(f"Source file not found: {source}")

        entry_dir = self._entry_dir(tool, version, arch)
        marker = self._marker(entry_dir)

        with self._lock():
            try:
                marker.unlink(missing_ok=True)
                if entry_dir.exists():
                    shutil.rmtree(entry_dir)
                entry_dir.mkdir(parents=True)
                shutil.copy2(source, entry_dir / target_name)
                atomic_write(marker, "")
            except OSError as e:
                raise ToolCacheError(
                    f"Failed to cache {source} as {tool} {version}: {e}"
                ) from e

        logger.info(f"Cached {target_name} as {tool} {version} ({arch})")
        return entry_dir


__all__ = ["ToolCache"]
