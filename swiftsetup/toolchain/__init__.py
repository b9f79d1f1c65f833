"""
Swift toolchain installation.

This module provides:
- Version resolution against the release catalogue
- Installer caching, download and signature verification
- Installer execution and post-install location
- Visual Studio build tools provisioning on Windows
"""

from swiftsetup.toolchain.build_tools import (
    BuildToolsProvisioner,
    VisualStudioInstallation,
    VisualStudioTools,
    VsRequirement,
    needs_legacy_patch,
    vs_requirement,
)
from swiftsetup.toolchain.cache_gate import CacheGate, toolchain_key
from swiftsetup.toolchain.fetch import DownloadResult, FetchVerifyPipeline
from swiftsetup.toolchain.installer import InstallResult, SwiftInstaller
from swiftsetup.toolchain.locator import PostInstallLocator, WindowsInstallLayout
from swiftsetup.toolchain.runner import InstallerRunner
from swiftsetup.toolchain.strategy import InstallStrategy
from swiftsetup.toolchain.versions import (
    Package,
    SwiftVersionRegistry,
    swift_package,
    verify_version,
)

__all__ = [
    "BuildToolsProvisioner",
    "VisualStudioInstallation",
    "VisualStudioTools",
    "VsRequirement",
    "needs_legacy_patch",
    "vs_requirement",
    "CacheGate",
    "toolchain_key",
    "DownloadResult",
    "FetchVerifyPipeline",
    "InstallResult",
    "SwiftInstaller",
    "PostInstallLocator",
    "WindowsInstallLayout",
    "InstallerRunner",
    "InstallStrategy",
    "Package",
    "SwiftVersionRegistry",
    "swift_package",
    "verify_version",
]
