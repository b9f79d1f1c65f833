"""
File system utilities for SwiftSetup.

Small platform-aware helpers shared by the tool cache and the build tools
provisioner:
- Executable lookup on PATH (with Windows extensions)
- Atomic writes (temp file + rename)
- Appending lines to runner command files
- Best-effort removal of temporary downloads
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


def find_executable(
    name: str, search_paths: Optional[List[Path]] = None
) -> Optional[Path]:
    """
    Find an executable in the system PATH or provided search paths.

    Args:
        name: Executable name (e.g., 'vswhere', 'gpg')
        search_paths: Optional list of directories to search

    Returns:
        Path to executable if found, None otherwise

    Example:
        >>> find_executable('gpg')
        PosixPath('/usr/bin/gpg')
    """
    extensions = [""] if not IS_WINDOWS else ["", ".exe", ".bat", ".cmd"]

    if search_paths is None:
        path_env = os.environ.get("PATH", "")
        search_paths = [Path(p) for p in path_env.split(os.pathsep) if p]

    for directory in search_paths:
        for ext in extensions:
            exe_path = Path(directory) / f"{name}{ext}"
            if exe_path.is_file() and os.access(exe_path, os.X_OK):
                return exe_path

    return None


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def append_line(file_path: Union[str, Path], line: str) -> None:
    """Append a single line to a text file, creating it if needed."""
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(f"{line}\n")


def remove_file(file_path: Union[str, Path]) -> None:
    """Delete a temporary file if it exists; failures are logged, not raised."""
    try:
        Path(file_path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not remove {file_path}: {e}")


__all__ = [
    "IS_WINDOWS",
    "find_executable",
    "atomic_write",
    "append_line",
    "remove_file",
]
