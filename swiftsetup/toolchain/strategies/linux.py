"""
Ubuntu install strategy.

Swift for Ubuntu ships as a tarball whose single top-level directory contains
`usr/`. The archive is unpacked into the install directory with that
directory stripped, leaving `<install dir>/usr/bin/swift`.
"""

from pathlib import Path

from swiftsetup.core.directory import ensure_directory
from swiftsetup.core.process import Command
from swiftsetup.toolchain.strategy import InstallStrategy


class LinuxStrategy(InstallStrategy):
    """Strategy for Ubuntu tarballs."""

    os_name = "ubuntu"

    def __init__(self, install_dir: Path):
        self.install_dir = Path(install_dir)

    def prepare(self) -> None:
        ensure_directory(self.install_dir)

    def installer_command(self, installer_path: Path) -> Command:
        return Command.of(
            "tar",
            "-x",
            "-z",
            "-f",
            installer_path,
            "-C",
            self.install_dir,
            "--strip-components=1",
        )

    def bin_dir(self) -> Path:
        return self.install_dir / "usr" / "bin"
