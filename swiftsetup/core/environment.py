"""
Exporting installation results to the calling CI job.

GitHub Actions reads PATH additions, environment variables and step outputs
from files named by GITHUB_PATH, GITHUB_ENV and GITHUB_OUTPUT. The current
process environment is updated as well so later steps of this run (and the
child processes it spawns) see the same values.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import MutableMapping, Optional

from swiftsetup.core.filesystem import append_line
from swiftsetup.core.interfaces import EnvironmentWriter

logger = logging.getLogger(__name__)


class ActionsEnvironment(EnvironmentWriter):
    """
    EnvironmentWriter backed by GitHub Actions command files.

    Any command file that is not configured is skipped; the in-process
    environment is always updated.

    Example:
        >>> env = ActionsEnvironment.from_environ()
        >>> env.add_path(Path("/opt/swift/usr/bin"))
    """

    def __init__(
        self,
        path_file: Optional[Path] = None,
        env_file: Optional[Path] = None,
        output_file: Optional[Path] = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.path_file = Path(path_file) if path_file else None
        self.env_file = Path(env_file) if env_file else None
        self.output_file = Path(output_file) if output_file else None
        self.environ = environ if environ is not None else os.environ

    @classmethod
    def from_environ(
        cls, environ: Optional[MutableMapping[str, str]] = None
    ) -> "ActionsEnvironment":
        """Build a writer from the GITHUB_* variables of an environment."""
        environ = environ if environ is not None else os.environ
        return cls(
            path_file=environ.get("GITHUB_PATH") or None,
            env_file=environ.get("GITHUB_ENV") or None,
            output_file=environ.get("GITHUB_OUTPUT") or None,
            environ=environ,
        )

    def add_path(self, directory: Path) -> None:
        directory_str = str(directory)
        if self.path_file:
            append_line(self.path_file, directory_str)

        current = self.environ.get("PATH", "")
        self.environ["PATH"] = (
            f"{directory_str}{os.pathsep}{current}" if current else directory_str
        )
        logger.info(f"Added {directory_str} to PATH")

    def export_variable(self, name: str, value: str) -> None:
        if self.env_file:
            _append_key_value(self.env_file, name, value)
        self.environ[name] = value
        logger.debug(f"Exported {name}={value}")

    def set_output(self, name: str, value: str) -> None:
        if self.output_file:
            _append_key_value(self.output_file, name, value)
        else:
            logger.info(f"Output {name}: {value}")


def _append_key_value(file_path: Path, name: str, value: str) -> None:
    """Append NAME=value to a command file, using a heredoc for multiline values."""
    if "\n" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        append_line(file_path, f"{name}<<{delimiter}\n{value}\n{delimiter}")
    else:
        append_line(file_path, f"{name}={value}")


__all__ = [
    "ActionsEnvironment",
]
