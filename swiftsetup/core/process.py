"""
External process execution for SwiftSetup.

Commands are built as a program plus an argument list (`Command`) and never
assembled with format strings, so quoting is left to `subprocess`. The runner
forwards stdout and stderr line by line while the child is still running:
installers can take minutes and the CI log must show live progress.
"""

import logging
import os
import shlex
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Mapping, Optional, Tuple, Union

from swiftsetup.core.interfaces import LineCallback, ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """
    Program and arguments for a child process.

    Example:
        >>> cmd = Command.of("gpg", "--verify", "a.sig", "a.tar.gz")
        >>> cmd.argv
        ['gpg', '--verify', 'a.sig', 'a.tar.gz']
    """

    program: str
    args: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not str(self.program):
            raise ValueError("Command program cannot be empty")
        object.__setattr__(self, "program", str(self.program))
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    @classmethod
    def of(cls, program: Union[str, Path], *args: Union[str, Path]) -> "Command":
        """Build a command from a program and positional arguments."""
        return cls(str(program), tuple(str(a) for a in args))

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        if os.name == "nt":
            return subprocess.list2cmdline(self.argv)
        return shlex.join(self.argv)


class SubprocessRunner(ProcessRunner):
    """Runs commands with `subprocess.Popen`, streaming output as it arrives."""

    def run(
        self,
        command: Command,
        on_stdout: Optional[LineCallback] = None,
        on_stderr: Optional[LineCallback] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> int:
        logger.debug(f"Running: {command}")

        process = subprocess.Popen(
            command.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            env=dict(env) if env is not None else None,
        )

        readers = [
            threading.Thread(
                target=_pump, args=(process.stdout, on_stdout), daemon=True
            ),
            threading.Thread(
                target=_pump, args=(process.stderr, on_stderr), daemon=True
            ),
        ]
        for reader in readers:
            reader.start()

        exit_code = process.wait()
        for reader in readers:
            reader.join()

        logger.debug(f"{command.program} exited with code {exit_code}")
        return exit_code


def _pump(stream: Optional[IO[str]], callback: Optional[LineCallback]) -> None:
    """Forward each line of a pipe to a callback until EOF."""
    if stream is None:
        return
    with stream:
        for line in stream:
            if callback is not None:
                callback(line.rstrip("\r\n"))


def capture_output(
    runner: ProcessRunner,
    command: Command,
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[int, str]:
    """
    Run a command and collect its stdout; stderr is logged at debug level.

    Returns:
        (exit code, stdout text)
    """
    lines: List[str] = []
    exit_code = runner.run(
        command,
        on_stdout=lines.append,
        on_stderr=lambda line: logger.debug(f"{command.program}: {line}"),
        env=env,
    )
    return exit_code, "\n".join(lines)


__all__ = [
    "Command",
    "SubprocessRunner",
    "capture_output",
]
