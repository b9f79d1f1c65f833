"""
Core interfaces for SwiftSetup.

This module defines the abstract collaborators the install pipeline depends on.
Production implementations live next to each concern (download, process,
environment); tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Mapping, Optional

if TYPE_CHECKING:
    from swiftsetup.core.process import Command

LineCallback = Callable[[str], None]


class Transport(ABC):
    """
    Abstract interface for fetching a URL to a local file.
    """

    @abstractmethod
    def download(self, url: str) -> Path:
        """
        Download a URL to a fresh temporary file.

        Args:
            url: URL to download

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the transfer fails
        """
        pass


class ProcessRunner(ABC):
    """
    Abstract interface for running external processes.
    """

    @abstractmethod
    def run(
        self,
        command: "Command",
        on_stdout: Optional[LineCallback] = None,
        on_stderr: Optional[LineCallback] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> int:
        """
        Run a command to completion, streaming output line by line.

        Args:
            command: Program and arguments to execute
            on_stdout: Called with each stdout line as it arrives
            on_stderr: Called with each stderr line as it arrives
            env: Optional full environment for the child process

        Returns:
            Process exit code

        Raises:
            FileNotFoundError: If the program does not exist
        """
        pass


class EnvironmentWriter(ABC):
    """
    Abstract interface for exporting state to the calling CI job.
    """

    @abstractmethod
    def add_path(self, directory: Path) -> None:
        """
        Make a directory visible on PATH for the rest of the job.

        Additions never remove existing entries.
        """
        pass

    @abstractmethod
    def export_variable(self, name: str, value: str) -> None:
        """Export an environment variable for the rest of the job."""
        pass

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Publish a named step output."""
        pass


__all__ = [
    "LineCallback",
    "Transport",
    "ProcessRunner",
    "EnvironmentWriter",
]
