"""
Visual Studio build tools provisioning (Windows only).

Swift on Windows links against the MSVC toolset and the Windows SDK. After
the toolchain is installed this module:

1. locates vswhere.exe and vs_installer.exe,
2. asks vswhere for the newest installation in the required version range,
3. runs the Visual Studio installer in modify mode to add required components,
4. for Swift releases older than 5.4.2, copies the module maps and API notes
   shipped in the Swift SDK into the UCRT and VC include directories.

Each stage raises on failure; there is no degraded mode.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from swiftsetup.core.directory import ensure_directory, get_temp_dir
from swiftsetup.core.exceptions import (
    BuildToolsError,
    ComponentInstallError,
    InstallerExecutionError,
    ProvisioningQueryEmptyError,
    ToolDiscoveryError,
)
from swiftsetup.core.filesystem import find_executable
from swiftsetup.core.interfaces import ProcessRunner
from swiftsetup.core.process import Command, capture_output
from swiftsetup.toolchain.versions import Package, compare_versions

logger = logging.getLogger(__name__)

VSWHERE_PATH_ENV = "VSWHERE_PATH"
PROGRAM_FILES_X86_ENV = "ProgramFiles(x86)"
DEFAULT_PROGRAM_FILES_X86 = "C:\\Program Files (x86)"

LEGACY_PATCH_THRESHOLD = "5.4.2"

# (file in %SDKROOT%\usr\share, destination under the build tools layout)
LEGACY_SUPPORT_FILES: Tuple[Tuple[str, str], ...] = (
    (
        "ucrt.modulemap",
        "%UniversalCRTSdkDir%\\Include\\%UCRTVersion%\\ucrt\\module.modulemap",
    ),
    ("visualc.modulemap", "%VCToolsInstallDir%\\include\\module.modulemap"),
    ("visualc.apinotes", "%VCToolsInstallDir%\\include\\visualc.apinotes"),
    (
        "winsdk.modulemap",
        "%UniversalCRTSdkDir%\\Include\\%UCRTVersion%\\um\\module.modulemap",
    ),
)


@dataclass(frozen=True)
class VsRequirement:
    """Acceptable Visual Studio version window and required components."""

    version_range: str
    components: Tuple[str, ...]


def vs_requirement(package: Package) -> VsRequirement:
    """
    Visual Studio requirement for a Swift package.

    Every current release needs the same toolset; the package is taken so the
    requirement can follow the toolchain version.
    """
    return VsRequirement(
        version_range="[16,17)",
        components=(
            "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
            "Microsoft.VisualStudio.Component.Windows10SDK.17763",
        ),
    )


def needs_legacy_patch(version: str) -> bool:
    """
    Whether a Swift version needs module maps copied into the build tools.

    Example:
        >>> needs_legacy_patch("5.4.1")
        True
        >>> needs_legacy_patch("5.4.2")
        False
    """
    return compare_versions(version, LEGACY_PATCH_THRESHOLD) < 0


@dataclass(frozen=True)
class VisualStudioTools:
    """Located vswhere.exe and its companion installer engine."""

    vswhere: Path
    vs_installer: Path


@dataclass(frozen=True)
class VisualStudioInstallation:
    """
    A Visual Studio installation reported by vswhere.

    Only `installationPath` and `properties.setupEngineFilePath` are read
    from a record.
    """

    installation_path: Optional[Path]
    setup_engine_file_path: Optional[Path] = None

    @classmethod
    def from_record(cls, record: Any) -> "VisualStudioInstallation":
        if not isinstance(record, dict):
            return cls(installation_path=None)

        installation_path = record.get("installationPath")
        properties = record.get("properties")
        engine = (
            properties.get("setupEngineFilePath")
            if isinstance(properties, dict)
            else None
        )

        return cls(
            installation_path=Path(installation_path)
            if isinstance(installation_path, str) and installation_path.strip()
            else None,
            setup_engine_file_path=Path(engine)
            if isinstance(engine, str) and engine.strip()
            else None,
        )

    @property
    def dev_cmd_script(self) -> Path:
        """Developer command prompt script of this installation."""
        if self.installation_path is None:
            raise BuildToolsError("Installation has no installation path")
        return self.installation_path / "Common7" / "Tools" / "VsDevCmd.bat"


def parse_installations(output: str) -> List[VisualStudioInstallation]:
    """
    Parse `vswhere -format json` output.

    Raises:
        BuildToolsError: If the output is not a JSON list
    """
    text = output.strip()
    if not text:
        return []

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise BuildToolsError(f"Could not parse vswhere output: {e}") from e

    if not isinstance(records, list):
        raise BuildToolsError(
            f"Unexpected vswhere output: expected a list, got {type(records).__name__}"
        )

    return [VisualStudioInstallation.from_record(r) for r in records]


def first_installation(
    installations: List[VisualStudioInstallation], version_range: str
) -> VisualStudioInstallation:
    """
    Pick the first reported installation.

    Raises:
        ProvisioningQueryEmptyError: If there is none, or it has no path
    """
    if not installations or installations[0].installation_path is None:
        raise ProvisioningQueryEmptyError(version_range)
    return installations[0]


class BuildToolsProvisioner:
    """
    Makes sure a compatible Visual Studio installation has what Swift needs.

    Example:
        >>> provisioner = BuildToolsProvisioner(SubprocessRunner())
        >>> provisioner.provision(package)
    """

    def __init__(
        self,
        runner: ProcessRunner,
        vswhere_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        temp_dir: Optional[Path] = None,
    ):
        """
        Initialize provisioner.

        Args:
            runner: Process runner for vswhere and the installer
            vswhere_path: Directory containing vswhere.exe (overrides VSWHERE_PATH)
            environ: Environment to read tool locations from (default: os.environ)
            temp_dir: Directory for the generated support-file script
        """
        self.runner = runner
        self.environ = environ if environ is not None else os.environ
        override = vswhere_path or self.environ.get(VSWHERE_PATH_ENV)
        self.vswhere_path = Path(override) if override else None
        self.temp_dir = Path(temp_dir) if temp_dir else get_temp_dir()

    def provision(self, package: Package) -> VisualStudioInstallation:
        """
        Run every provisioning stage for a package.

        Returns:
            The Visual Studio installation that was configured
        """
        requirement = vs_requirement(package)

        tools = self.locate_tools()
        installation = self.query_installation(tools, requirement)
        self.ensure_components(tools, installation, requirement)

        if needs_legacy_patch(package.version):
            self.patch_legacy_support_files(installation)
        else:
            logger.debug(
                f"Swift {package.version} does not need legacy support files"
            )

        return installation

    def locate_tools(self) -> VisualStudioTools:
        """
        Locate vswhere.exe and vs_installer.exe.

        Order: explicit directory, vswhere on PATH, Visual Studio Installer dir.

        Raises:
            ToolDiscoveryError: If either tool is missing at the resolved location
        """
        if self.vswhere_path:
            logger.debug(f"Using given vswhere path: {self.vswhere_path}")
            vswhere = self.vswhere_path / "vswhere.exe"
        else:
            search_paths = [
                Path(p)
                for p in self.environ.get("PATH", "").split(os.pathsep)
                if p
            ]
            found = find_executable("vswhere", search_paths)
            if found:
                logger.debug(f"Found vswhere in PATH: {found}")
                vswhere = found
            else:
                program_files = (
                    self.environ.get(PROGRAM_FILES_X86_ENV) or DEFAULT_PROGRAM_FILES_X86
                )
                vswhere = (
                    Path(program_files)
                    / "Microsoft Visual Studio"
                    / "Installer"
                    / "vswhere.exe"
                )
                logger.debug(f"Trying Visual Studio installer path: {vswhere}")

        vs_installer = vswhere.parent / "vs_installer.exe"
        if not vswhere.is_file() or not vs_installer.is_file():
            raise ToolDiscoveryError(
                f"vswhere.exe and vs_installer.exe are required in {vswhere.parent}; "
                f"set {VSWHERE_PATH_ENV} to the directory containing them"
            )

        return VisualStudioTools(vswhere=vswhere, vs_installer=vs_installer)

    def query_installation(
        self, tools: VisualStudioTools, requirement: VsRequirement
    ) -> VisualStudioInstallation:
        """
        Ask vswhere for the newest installation in the required range.

        Raises:
            BuildToolsError: If vswhere fails or its output is malformed
            ProvisioningQueryEmptyError: If no usable installation is reported
        """
        command = Command.of(
            tools.vswhere,
            "-products",
            "*",
            "-format",
            "json",
            "-utf8",
            "-latest",
            "-version",
            requirement.version_range,
        )

        try:
            exit_code, output = capture_output(self.runner, command)
        except OSError as e:
            raise ToolDiscoveryError(f"Failed to run {tools.vswhere}: {e}") from e

        if exit_code != 0:
            raise BuildToolsError(f"vswhere failed with exit code {exit_code}")

        installation = first_installation(
            parse_installations(output), requirement.version_range
        )
        logger.info(
            f"Found Visual Studio installation: {installation.installation_path}"
        )
        return installation

    def ensure_components(
        self,
        tools: VisualStudioTools,
        installation: VisualStudioInstallation,
        requirement: VsRequirement,
    ) -> None:
        """
        Add required components with the installer's modify mode.

        Raises:
            ComponentInstallError: If the installer exits non-zero
        """
        engine = installation.setup_engine_file_path
        if engine is None or not engine.is_file():
            engine = tools.vs_installer

        args: List[str] = ["modify", "--installPath", str(installation.installation_path)]
        for component in requirement.components:
            args.extend(["--add", component])
        args.append("--quiet")

        command = Command.of(engine, *args)
        logger.info(f"Adding Visual Studio components: {', '.join(requirement.components)}")

        try:
            exit_code = self.runner.run(
                command, on_stdout=logger.info, on_stderr=logger.warning
            )
        except OSError as e:
            raise ToolDiscoveryError(f"Failed to run {engine}: {e}") from e

        if exit_code != 0:
            raise ComponentInstallError(exit_code, list(requirement.components))

    def patch_legacy_support_files(
        self, installation: VisualStudioInstallation
    ) -> None:
        """
        Copy module maps and API notes into the build tools include dirs.

        The copies run after VsDevCmd.bat so the UCRT and VC layout variables
        are defined; SDKROOT must already be exported.

        Raises:
            InstallerExecutionError: If the script exits non-zero
        """
        script = ensure_directory(self.temp_dir) / "swift-support-files.bat"
        script.write_text(legacy_patch_script(installation), encoding="utf-8")

        logger.info("Copying legacy Swift support files into Visual Studio")
        try:
            exit_code = self.runner.run(
                Command.of("cmd", "/c", script),
                on_stdout=logger.info,
                on_stderr=logger.warning,
            )
        except OSError as e:
            raise InstallerExecutionError(f"Failed to run cmd: {e}") from e

        logger.info(f"Support file copy exited with code {exit_code}")
        if exit_code != 0:
            raise InstallerExecutionError(
                f"Copying Swift support files failed (exit code {exit_code})",
                exit_code=exit_code,
            )


def legacy_patch_script(installation: VisualStudioInstallation) -> str:
    """Batch script that enters the developer prompt and copies support files."""
    lines = [
        "@echo off",
        f'call "{installation.dev_cmd_script}" || exit /b 1',
    ]
    for source, destination in LEGACY_SUPPORT_FILES:
        lines.append(
            f'copy /Y "%SDKROOT%\\usr\\share\\{source}" "{destination}" || exit /b 1'
        )
    return "\r\n".join(lines) + "\r\n"


__all__ = [
    "LEGACY_PATCH_THRESHOLD",
    "LEGACY_SUPPORT_FILES",
    "VsRequirement",
    "vs_requirement",
    "needs_legacy_patch",
    "VisualStudioTools",
    "VisualStudioInstallation",
    "parse_installations",
    "first_installation",
    "BuildToolsProvisioner",
    "legacy_patch_script",
]
