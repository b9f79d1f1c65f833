"""
Swift release catalogue and version resolution.

This module maps a requested Swift version plus the runner's `System` to an
immutable `Package` describing the artifact to fetch. Resolution is a pure
function of its inputs once the catalogue is loaded.

Supported requests:
- Exact version: "5.6.1" -> 5.6.1
- Major.minor: "5.6" -> latest 5.6.x
- Major only: "5" -> latest 5.x.y
- Latest: "latest" -> highest known release
"""

import functools
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from swiftsetup.core.exceptions import (
    ConfigError,
    UnsupportedPlatformError,
    VersionResolutionError,
)
from swiftsetup.core.platform import System, is_supported_system

logger = logging.getLogger(__name__)

TOOLCHAIN_NAME = "swift"


def version_tuple(version: str) -> Tuple[int, int, int]:
    """
    Convert a version string to a comparable (major, minor, patch) tuple.

    Raises:
        ValueError: If the version is not 1 to 3 dot separated integers

    Example:
        >>> version_tuple("5.6")
        (5, 6, 0)
    """
    parts = version.strip().split(".")
    if not 1 <= len(parts) <= 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid version: {version}")
    numbers = [int(p) for p in parts] + [0] * (3 - len(parts))
    return numbers[0], numbers[1], numbers[2]


def normalize_version(version: str) -> str:
    """
    Normalize a version to X.Y.Z form.

    Example:
        >>> normalize_version("5.6")
        '5.6.0'
    """
    return ".".join(str(n) for n in version_tuple(version))


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as a is lower than, equal to or higher than b."""
    ta, tb = version_tuple(a), version_tuple(b)
    return (ta > tb) - (ta < tb)


@dataclass(frozen=True)
class Package:
    """
    Downloadable Swift toolchain build.

    Attributes:
        version: Normalized semantic version ('5.6.0')
        url: Download location of the installer artifact
        name: Artifact file name, also the tool cache file name
        release: Published release name used in URLs ('5.6')
        platform: Platform segment of the download URL ('ubuntu2004')
    """

    version: str
    url: str
    name: str
    release: str
    platform: str

    @property
    def signature_url(self) -> str:
        return f"{self.url}.sig"


class SwiftVersionRegistry:
    """
    Catalogue of Swift releases with version resolution and URL construction.

    Example:
        >>> registry = SwiftVersionRegistry()
        >>> pkg = registry.resolve("5.6.1", System("ubuntu", "20.04"))
        >>> pkg.name
        'swift-5.6.1-RELEASE-ubuntu20.04.tar.gz'
    """

    def __init__(self, catalogue_path: Optional[Path] = None):
        """
        Initialize registry.

        Args:
            catalogue_path: Optional path to a catalogue JSON file.
                            If None, uses the embedded swift_versions.json

        Raises:
            ConfigError: If the catalogue cannot be loaded
        """
        self.catalogue_path = catalogue_path or self._get_default_catalogue_path()
        self.catalogue = self._load_catalogue()
        logger.debug(f"Loaded catalogue with {len(self.list_versions())} releases")

    def _get_default_catalogue_path(self) -> Path:
        return Path(__file__).parent.parent / "data" / "swift_versions.json"

    def _load_catalogue(self) -> Dict[str, Any]:
        try:
            with open(self.catalogue_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in version catalogue: {e}\n"
                f"File: {self.catalogue_path}"
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Failed to load version catalogue: {e}\n"
                f"File: {self.catalogue_path}"
            ) from e

        for key in ("base_url", "platforms", "versions"):
            if key not in data:
                raise ConfigError(
                    f"Invalid version catalogue: missing '{key}' key\n"
                    f"File: {self.catalogue_path}"
                )

        releases = list(data["versions"])
        for os_name, os_versions in data["platforms"].items():
            if not isinstance(os_versions, dict):
                raise ConfigError(
                    f"Invalid version catalogue: platforms.{os_name} must map "
                    f"OS versions to release ranges\nFile: {self.catalogue_path}"
                )
            for os_version, published in os_versions.items():
                if not isinstance(published, dict) or "first" not in published:
                    raise ConfigError(
                        f"Invalid version catalogue: {os_name} {os_version} needs "
                        f"a 'first' release\nFile: {self.catalogue_path}"
                    )
                releases.extend(published[key] for key in ("first", "last") if key in published)

        for release in releases:
            try:
                version_tuple(release)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid release '{release}' in {self.catalogue_path}"
                ) from e

        return data

    @property
    def base_url(self) -> str:
        return self.catalogue["base_url"].rstrip("/")

    def list_versions(self) -> List[str]:
        """List all known releases, newest first."""
        return sorted(self.catalogue["versions"], key=version_tuple, reverse=True)

    def list_platform_versions(self, os_name: str) -> List[str]:
        """List the OS versions packages are published for."""
        return list(self.catalogue["platforms"].get(os_name, {}))

    def is_published(self, release: str, system: System) -> bool:
        """Whether a package of the release exists for the system's OS version."""
        published = self.catalogue["platforms"].get(system.os, {}).get(system.version)
        if published is None:
            return False
        if compare_versions(release, published["first"]) < 0:
            return False
        return "last" not in published or compare_versions(release, published["last"]) <= 0

    def list_published(self, system: System) -> List[str]:
        """List the releases published for a system, newest first."""
        return [r for r in self.list_versions() if self.is_published(r, system)]

    def resolve_version(self, requested: str, system: Optional[System] = None) -> str:
        """
        Resolve a requested version to a published release name.

        Args:
            requested: Version request ('5.6.1', '5.6', '5', 'latest')
            system: Only consider releases published for this system

        Returns:
            Release name as published (e.g. '5.6' for 5.6.0)

        Raises:
            VersionResolutionError: If no release matches
        """
        releases = self.list_versions()
        if system is not None:
            releases = self.list_published(system)
            if not releases:
                raise VersionResolutionError(
                    requested, f"no releases are published for {system.name}"
                )
        pattern = (requested or "").strip()

        if not pattern:
            raise VersionResolutionError(requested, "version cannot be empty")

        if pattern.lower() == "latest":
            return releases[0]

        try:
            wanted = version_tuple(pattern)
        except ValueError:
            raise VersionResolutionError(
                requested, "expected format X.Y.Z, X.Y, X or 'latest'"
            )

        depth = len(pattern.split("."))
        matching = [r for r in releases if version_tuple(r)[:depth] == wanted[:depth]]
        if not matching:
            if system is not None:
                raise VersionResolutionError(
                    requested, f"no matching release is published for {system.name}"
                )
            raise VersionResolutionError(requested)

        resolved = max(matching, key=version_tuple)
        logger.debug(f"Found matching version {resolved}")
        return resolved

    def resolve(self, requested: str, system: System) -> Package:
        """
        Resolve a requested version for a system to a Package.

        Raises:
            UnsupportedPlatformError: If no packages exist for the system
            VersionResolutionError: If no release matches the request
        """
        if not is_supported_system(system):
            raise UnsupportedPlatformError(system.os)

        platform_versions = self.list_platform_versions(system.os)
        if system.version not in platform_versions:
            raise UnsupportedPlatformError(
                system.name,
                f"packages are published for {system.os} "
                f"{', '.join(platform_versions)}",
            )

        release = self.resolve_version(requested, system)
        return self.package_for(release, system)

    def package_for(self, release: str, system: System) -> Package:
        """Build the Package for a known release on a system."""
        if system.os == "windows":
            platform = f"windows{system.version}"
            name = f"swift-{release}-RELEASE-{platform}.exe"
        else:
            suffix = "-aarch64" if system.arch == "arm64" else ""
            platform = f"{system.os}{system.version.replace('.', '')}{suffix}"
            name = f"swift-{release}-RELEASE-{system.os}{system.version}{suffix}.tar.gz"

        url = (
            f"{self.base_url}/swift-{release}-release/{platform}/"
            f"swift-{release}-RELEASE/{name}"
        )
        return Package(
            version=normalize_version(release),
            url=url,
            name=name,
            release=release,
            platform=platform,
        )


@functools.lru_cache(maxsize=1)
def default_registry() -> SwiftVersionRegistry:
    """Registry backed by the embedded catalogue, loaded once per process."""
    return SwiftVersionRegistry()


def swift_package(version: str, system: System) -> Package:
    """
    Convenience function to resolve a Package with the embedded catalogue.

    Example:
        >>> swift_package("5.6", System("windows", "10")).name
        'swift-5.6.3-RELEASE-windows10.exe'
    """
    return default_registry().resolve(version, system)


def verify_version(version: str) -> str:
    """Resolve a requested version to a release name, failing fast if unknown."""
    return default_registry().resolve_version(version)


__all__ = [
    "TOOLCHAIN_NAME",
    "Package",
    "SwiftVersionRegistry",
    "default_registry",
    "swift_package",
    "verify_version",
    "version_tuple",
    "normalize_version",
    "compare_versions",
]
