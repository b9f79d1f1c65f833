"""
Centralized exception hierarchy for SwiftSetup.

Every failure in the install pipeline is terminal: stages raise one of these
exceptions at the point of detection and nothing downstream runs.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class SwiftSetupError(Exception):
    """Base exception for all SwiftSetup errors."""

    pass


class ConfigError(SwiftSetupError):
    """Configuration parsing or validation error."""

    pass


class ToolCacheError(SwiftSetupError):
    """Raised when the tool cache store cannot be read or written."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class UnsupportedPlatformError(SwiftSetupError):
    """Raised when the target operating system is not supported."""

    def __init__(self, os_name: str, detail: str = ""):
        self.os_name = os_name
        msg = f"{os_name} is not supported"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class VersionResolutionError(SwiftSetupError):
    """Raised when a requested version has no known release."""

    def __init__(self, version: str, detail: str = ""):
        self.version = version
        msg = f'Version "{version}" is not available'
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


# ============================================================================
# Fetch & Verify Exceptions
# ============================================================================


class DownloadError(SwiftSetupError):
    """Raised when the installer or its signature fails to transfer."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class VerificationError(SwiftSetupError):
    """Raised when trust material is unavailable or a signature does not match."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallerExecutionError(SwiftSetupError):
    """Raised when an installer step fails and left no usable installation."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


# ============================================================================
# Build Tools Exceptions
# ============================================================================


class BuildToolsError(SwiftSetupError):
    """Base exception for Visual Studio build tools provisioning errors."""

    pass


class ToolDiscoveryError(BuildToolsError):
    """Raised when vswhere.exe or vs_installer.exe cannot be found."""

    pass


class ProvisioningQueryEmptyError(BuildToolsError):
    """Raised when no Visual Studio installation matches the version range."""

    def __init__(self, version_range: str):
        self.version_range = version_range
        super().__init__(
            f"No Visual Studio installation found matching version {version_range}"
        )


class ComponentInstallError(BuildToolsError):
    """Raised when the Visual Studio installer fails to add components."""

    def __init__(self, exit_code: int, components: Optional[list] = None):
        self.exit_code = exit_code
        self.components = list(components or [])
        super().__init__(
            f"Visual Studio installer failed to add components "
            f"{', '.join(self.components)} (exit code {exit_code})"
        )


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
]
