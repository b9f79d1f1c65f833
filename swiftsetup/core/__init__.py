"""
Core functionality for SwiftSetup.

This package contains the foundational modules the install pipeline depends on:
platform detection, transport, process execution, environment export, the tool
cache store and signature verification.
"""

from .exceptions import (
    SwiftSetupError,
    ConfigError,
    ToolCacheError,
    UnsupportedPlatformError,
    VersionResolutionError,
    DownloadError,
    VerificationError,
    InstallerExecutionError,
    BuildToolsError,
    ToolDiscoveryError,
    ProvisioningQueryEmptyError,
    ComponentInstallError,
)

from .interfaces import (
    Transport,
    ProcessRunner,
    EnvironmentWriter,
)

from .platform import (
    System,
    detect_system,
    is_supported_system,
)

from .download import HttpTransport
from .process import Command, SubprocessRunner
from .environment import ActionsEnvironment
from .tool_cache import ToolCache
from .verification import GpgKeyring

__all__ = [
    "SwiftSetupError",
    "ConfigError",
    "ToolCacheError",
    "UnsupportedPlatformError",
    "VersionResolutionError",
    "DownloadError",
    "VerificationError",
    "InstallerExecutionError",
    "BuildToolsError",
    "ToolDiscoveryError",
    "ProvisioningQueryEmptyError",
    "ComponentInstallError",
    "Transport",
    "ProcessRunner",
    "EnvironmentWriter",
    "System",
    "detect_system",
    "is_supported_system",
    "HttpTransport",
    "Command",
    "SubprocessRunner",
    "ActionsEnvironment",
    "ToolCache",
    "GpgKeyring",
]
