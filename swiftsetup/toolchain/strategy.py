"""
Install Strategy Interface.

An install strategy encapsulates the platform-specific parts of installing
Swift: how the installer is invoked, where the binaries land, and what has to
happen after they are on PATH.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple

from swiftsetup.core.interfaces import EnvironmentWriter
from swiftsetup.core.process import Command
from swiftsetup.toolchain.versions import Package


class InstallStrategy(ABC):
    """
    Abstract base class for install strategies.

    One strategy exists per supported operating system.
    """

    os_name: str = ""

    def prepare(self) -> None:
        """Prepare the target location before the installer runs."""
        pass

    @abstractmethod
    def installer_command(self, installer_path: Path) -> Command:
        """
        Build the unattended installer invocation.

        Args:
            installer_path: Verified installer (or archive) on disk

        Returns:
            Command that installs the toolchain without user interaction.
        """
        pass

    @abstractmethod
    def bin_dir(self) -> Path:
        """
        Directory expected to contain the `swift` executable after install.
        """
        pass

    def auxiliary_dirs(self) -> Tuple[Path, ...]:
        """Runtime directories that must follow bin_dir on PATH."""
        return ()

    def post_install(self, package: Package, environment: EnvironmentWriter) -> None:
        """
        Finish configuring the environment after the toolchain is on PATH.

        Args:
            package: Installed package
            environment: Writer for exported variables
        """
        pass
