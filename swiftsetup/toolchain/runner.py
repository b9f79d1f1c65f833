"""
Installer runner.

Runs a platform installer as a child process and forwards its output to the
log while it runs. The exit code is returned rather than raised: installers
are known to report spurious failures, so success is decided together with
the post-install locator.
"""

import logging

from swiftsetup.core.exceptions import InstallerExecutionError
from swiftsetup.core.interfaces import ProcessRunner
from swiftsetup.core.process import Command

logger = logging.getLogger(__name__)


class InstallerRunner:
    """Executes installer commands with live output streaming."""

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    def run(self, command: Command) -> int:
        """
        Run an installer command.

        Args:
            command: Installer invocation (already in unattended mode)

        Returns:
            Installer exit code

        Raises:
            InstallerExecutionError: If the installer cannot be started
        """
        logger.info(f"Running installer: {command}")

        try:
            exit_code = self.runner.run(
                command,
                on_stdout=logger.info,
                on_stderr=logger.warning,
            )
        except OSError as e:
            raise InstallerExecutionError(
                f"Failed to start installer {command.program}: {e}"
            ) from e

        logger.info(f"Installer exited with code {exit_code}")
        return exit_code


__all__ = ["InstallerRunner"]
