"""
Windows install strategy.

The Windows installer is an executable that installs to a fixed layout on the
system drive. After the toolchain is on PATH, SDKROOT is exported and the
Visual Studio build tools are provisioned.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from swiftsetup.core.interfaces import EnvironmentWriter
from swiftsetup.core.process import Command
from swiftsetup.toolchain.build_tools import BuildToolsProvisioner
from swiftsetup.toolchain.locator import WindowsInstallLayout
from swiftsetup.toolchain.strategy import InstallStrategy
from swiftsetup.toolchain.versions import Package

logger = logging.getLogger(__name__)


class WindowsStrategy(InstallStrategy):
    """Strategy for the Windows executable installer."""

    os_name = "windows"

    def __init__(
        self,
        layout: WindowsInstallLayout,
        provisioner: Optional[BuildToolsProvisioner] = None,
    ):
        """
        Args:
            layout: Install layout on the system drive
            provisioner: Build tools provisioner; None skips provisioning
        """
        self.layout = layout
        self.provisioner = provisioner

    def installer_command(self, installer_path: Path) -> Command:
        return Command.of(installer_path, "-q")

    def bin_dir(self) -> Path:
        return self.layout.bin_dir

    def auxiliary_dirs(self) -> Tuple[Path, ...]:
        return self.layout.auxiliary_dirs

    def post_install(self, package: Package, environment: EnvironmentWriter) -> None:
        environment.export_variable("SDKROOT", str(self.layout.sdk_root))

        if self.provisioner is None:
            logger.info("Skipping Visual Studio build tools provisioning")
            return

        self.provisioner.provision(package)
