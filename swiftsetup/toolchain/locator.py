"""
Post-install locator.

Decides whether an install succeeded by looking for the toolchain's binary
directory, then exports it (and any auxiliary runtime directories) on PATH.

Outcome table:
    directory present, any exit code -> success
    directory missing, any exit code -> InstallerExecutionError
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from swiftsetup.core.exceptions import InstallerExecutionError
from swiftsetup.core.interfaces import EnvironmentWriter

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_DRIVE = "C:"
WINDOWS_TOOLCHAIN_NAME = "unknown-Asserts-development.xctoolchain"


def system_drive_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Root directory of the system drive.

    Uses SystemDrive when set, otherwise C:. A bare drive letter ('D:') is
    turned into its root ('D:\\').
    """
    environ = environ if environ is not None else os.environ
    drive = environ.get("SystemDrive") or DEFAULT_SYSTEM_DRIVE
    if drive.endswith(":"):
        drive += "\\"
    return Path(drive)


@dataclass(frozen=True)
class WindowsInstallLayout:
    """
    Where the Windows installer places the toolchain, relative to a drive root.
    """

    root: Path

    @property
    def library(self) -> Path:
        return Path(self.root) / "Library"

    @property
    def bin_dir(self) -> Path:
        return (
            self.library / "Developer" / "Toolchains" / WINDOWS_TOOLCHAIN_NAME / "usr" / "bin"
        )

    @property
    def auxiliary_dirs(self) -> Tuple[Path, ...]:
        return (
            self.library / "Swift-development" / "bin",
            self.library / "icu-67" / "usr" / "bin",
        )

    @property
    def sdk_root(self) -> Path:
        return (
            self.library
            / "Developer"
            / "Platforms"
            / "Windows.platform"
            / "Developer"
            / "SDKs"
            / "Windows.sdk"
        )

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "WindowsInstallLayout":
        return cls(system_drive_root(environ))


class PostInstallLocator:
    """Confirms an installation on disk and registers it on PATH."""

    def __init__(self, environment: EnvironmentWriter):
        self.environment = environment

    def locate(
        self,
        exit_code: int,
        bin_dir: Path,
        auxiliary_dirs: Iterable[Path] = (),
    ) -> List[Path]:
        """
        Confirm the toolchain bin directory exists and export it.

        Args:
            exit_code: Exit code reported by the installer
            bin_dir: Expected toolchain binary directory
            auxiliary_dirs: Extra runtime directories needed at build time

        Returns:
            Directories registered on PATH, in registration order

        Raises:
            InstallerExecutionError: If the bin directory does not exist
        """
        bin_dir = Path(bin_dir)
        present = bin_dir.is_dir()
        logger.debug(f"exit code {exit_code}, {bin_dir} present: {present}")

        if not present:
            raise InstallerExecutionError(
                f"Swift installation failed: {bin_dir} not found "
                f"(installer exit code {exit_code})",
                exit_code=exit_code,
            )

        if exit_code != 0:
            logger.warning(
                f"Installer reported exit code {exit_code} but {bin_dir} exists; "
                "treating installation as successful"
            )

        registered = [bin_dir, *(Path(d) for d in auxiliary_dirs)]
        for directory in registered:
            self.environment.add_path(directory)

        logger.info(f"Swift installed at {bin_dir}")
        return registered


__all__ = [
    "DEFAULT_SYSTEM_DRIVE",
    "WindowsInstallLayout",
    "PostInstallLocator",
    "system_drive_root",
]
