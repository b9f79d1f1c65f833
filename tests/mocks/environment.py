"""
Recording environment writer for testing.
"""

from pathlib import Path
from typing import Dict, List, Tuple

from swiftsetup.core.interfaces import EnvironmentWriter


class RecordingEnvironment(EnvironmentWriter):
    """EnvironmentWriter that only remembers what it was asked to do."""

    def __init__(self):
        self.paths: List[Path] = []
        self.variables: Dict[str, str] = {}
        self.outputs: Dict[str, str] = {}
        self.events: List[Tuple[str, str]] = []

    def add_path(self, directory: Path) -> None:
        self.paths.append(Path(directory))
        self.events.append(("path", str(directory)))

    def export_variable(self, name: str, value: str) -> None:
        self.variables[name] = value
        self.events.append(("env", name))

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        self.events.append(("output", name))
