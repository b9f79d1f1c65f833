"""
Install strategies package.

`create_strategy` picks the strategy for a detected system and wires its
platform collaborators from the effective configuration.
"""

from typing import Mapping, Optional

from swiftsetup.config.settings import SetupConfig
from swiftsetup.core.directory import get_install_dir
from swiftsetup.core.exceptions import UnsupportedPlatformError
from swiftsetup.core.interfaces import ProcessRunner
from swiftsetup.core.platform import System
from swiftsetup.toolchain.build_tools import BuildToolsProvisioner
from swiftsetup.toolchain.locator import WindowsInstallLayout
from swiftsetup.toolchain.strategies.linux import LinuxStrategy
from swiftsetup.toolchain.strategies.windows import WindowsStrategy
from swiftsetup.toolchain.strategy import InstallStrategy
from swiftsetup.toolchain.versions import TOOLCHAIN_NAME


def create_strategy(
    system: System,
    config: SetupConfig,
    runner: ProcessRunner,
    environ: Optional[Mapping[str, str]] = None,
) -> InstallStrategy:
    """
    Create the install strategy for a system.

    Raises:
        UnsupportedPlatformError: If no strategy handles the system's OS
    """
    if system.os == "windows":
        provisioner = None
        if not config.skip_build_tools:
            provisioner = BuildToolsProvisioner(
                runner,
                vswhere_path=config.vswhere_path,
                environ=environ,
                temp_dir=config.temp_dir,
            )
        return WindowsStrategy(WindowsInstallLayout.from_environ(environ), provisioner)

    if system.os == "ubuntu":
        return LinuxStrategy(config.install_dir or get_install_dir() / TOOLCHAIN_NAME)

    raise UnsupportedPlatformError(system.os)


__all__ = ["LinuxStrategy", "WindowsStrategy", "create_strategy"]
