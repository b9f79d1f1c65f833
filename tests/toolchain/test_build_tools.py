"""
Unit tests for Visual Studio build tools provisioning.
"""

import json
import stat

import pytest

from swiftsetup.core.exceptions import (
    BuildToolsError,
    ComponentInstallError,
    InstallerExecutionError,
    ProvisioningQueryEmptyError,
    ToolDiscoveryError,
)
from swiftsetup.core.filesystem import IS_WINDOWS
from swiftsetup.toolchain.build_tools import (
    BuildToolsProvisioner,
    VisualStudioInstallation,
    VisualStudioTools,
    first_installation,
    legacy_patch_script,
    needs_legacy_patch,
    parse_installations,
    vs_requirement,
)

VS_PATH = "C:\\Program Files (x86)\\Microsoft Visual Studio\\2019\\Enterprise"


def vswhere_json(*records):
    return json.dumps(list(records))


@pytest.fixture
def installer_dir(tmp_path):
    directory = tmp_path / "Installer"
    directory.mkdir()
    (directory / "vswhere.exe").write_text("")
    (directory / "vs_installer.exe").write_text("")
    return directory


@pytest.fixture
def provisioner(runner, installer_dir, tmp_path):
    return BuildToolsProvisioner(
        runner, vswhere_path=installer_dir, environ={}, temp_dir=tmp_path / "temp"
    )


class TestLegacyThreshold:
    @pytest.mark.parametrize(
        "version,expected",
        [("5.4.1", True), ("5.3.0", True), ("5.4.2", False), ("5.4.3", False), ("5.6.0", False)],
    )
    def test_needs_legacy_patch(self, version, expected):
        assert needs_legacy_patch(version) is expected


def test_vs_requirement(registry, windows):
    requirement = vs_requirement(registry.resolve("5.6", windows))

    assert requirement.version_range == "[16,17)"
    assert requirement.components == (
        "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
        "Microsoft.VisualStudio.Component.Windows10SDK.17763",
    )


class TestParseInstallations:
    def test_reads_path_and_engine(self):
        output = vswhere_json(
            {
                "installationPath": VS_PATH,
                "properties": {"setupEngineFilePath": "C:\\Installer\\setup.exe"},
            }
        )

        (installation,) = parse_installations(output)

        assert str(installation.installation_path) == VS_PATH
        assert str(installation.setup_engine_file_path) == "C:\\Installer\\setup.exe"

    def test_blank_output_is_empty(self):
        assert parse_installations("  ") == []

    def test_malformed_json(self):
        with pytest.raises(BuildToolsError, match="Could not parse"):
            parse_installations("[{")

    def test_not_a_list(self):
        with pytest.raises(BuildToolsError, match="expected a list"):
            parse_installations("{}")

    def test_record_without_path(self):
        (installation,) = parse_installations(vswhere_json({"displayName": "VS"}))

        assert installation.installation_path is None


class TestFirstInstallation:
    def test_empty_list(self):
        with pytest.raises(ProvisioningQueryEmptyError, match=r"\[16,17\)"):
            first_installation([], "[16,17)")

    def test_first_without_path(self):
        records = [
            VisualStudioInstallation(None),
            VisualStudioInstallation.from_record({"installationPath": VS_PATH}),
        ]

        with pytest.raises(ProvisioningQueryEmptyError):
            first_installation(records, "[16,17)")

    def test_uses_first_only(self):
        first = VisualStudioInstallation.from_record({"installationPath": "A"})
        second = VisualStudioInstallation.from_record({"installationPath": "B"})

        assert first_installation([first, second], "[16,17)") is first


class TestLocateTools:
    def test_explicit_directory(self, provisioner, installer_dir):
        tools = provisioner.locate_tools()

        assert tools == VisualStudioTools(
            vswhere=installer_dir / "vswhere.exe",
            vs_installer=installer_dir / "vs_installer.exe",
        )

    def test_vswhere_path_variable(self, runner, installer_dir):
        provisioner = BuildToolsProvisioner(
            runner, environ={"VSWHERE_PATH": str(installer_dir)}
        )

        assert provisioner.locate_tools().vswhere == installer_dir / "vswhere.exe"

    def test_vswhere_on_path(self, runner, installer_dir):
        if not IS_WINDOWS:
            exe = installer_dir / "vswhere"
            exe.write_text("")
            exe.chmod(exe.stat().st_mode | stat.S_IEXEC)
        provisioner = BuildToolsProvisioner(runner, environ={"PATH": str(installer_dir)})

        tools = provisioner.locate_tools()

        assert tools.vswhere.parent == installer_dir
        assert tools.vs_installer == installer_dir / "vs_installer.exe"

    def test_program_files_fallback(self, runner, tmp_path):
        directory = tmp_path / "Microsoft Visual Studio" / "Installer"
        directory.mkdir(parents=True)
        (directory / "vswhere.exe").write_text("")
        (directory / "vs_installer.exe").write_text("")
        provisioner = BuildToolsProvisioner(
            runner, environ={"ProgramFiles(x86)": str(tmp_path)}
        )

        assert provisioner.locate_tools().vswhere == directory / "vswhere.exe"

    def test_missing_vs_installer(self, runner, installer_dir):
        (installer_dir / "vs_installer.exe").unlink()
        provisioner = BuildToolsProvisioner(runner, vswhere_path=installer_dir, environ={})

        with pytest.raises(ToolDiscoveryError, match="VSWHERE_PATH"):
            provisioner.locate_tools()

    def test_nothing_found(self, runner, tmp_path):
        provisioner = BuildToolsProvisioner(
            runner, environ={"ProgramFiles(x86)": str(tmp_path)}
        )

        with pytest.raises(ToolDiscoveryError):
            provisioner.locate_tools()


class TestQueryInstallation:
    def test_query_arguments(self, provisioner, runner, registry, windows):
        runner.on("vswhere.exe", stdout=vswhere_json({"installationPath": VS_PATH}))
        tools = provisioner.locate_tools()
        requirement = vs_requirement(registry.resolve("5.6", windows))

        installation = provisioner.query_installation(tools, requirement)

        assert str(installation.installation_path) == VS_PATH
        assert runner.commands[0].args == (
            "-products",
            "*",
            "-format",
            "json",
            "-utf8",
            "-latest",
            "-version",
            "[16,17)",
        )

    def test_empty_result(self, provisioner, runner, registry, windows):
        runner.on("vswhere.exe", stdout="[]")
        requirement = vs_requirement(registry.resolve("5.6", windows))

        with pytest.raises(ProvisioningQueryEmptyError, match=r"\[16,17\)"):
            provisioner.query_installation(provisioner.locate_tools(), requirement)

    def test_vswhere_failure(self, provisioner, runner, registry, windows):
        runner.on("vswhere.exe", exit_code=87)
        requirement = vs_requirement(registry.resolve("5.6", windows))

        with pytest.raises(BuildToolsError, match="exit code 87"):
            provisioner.query_installation(provisioner.locate_tools(), requirement)


class TestEnsureComponents:
    def test_modify_with_located_installer(self, provisioner, runner, registry, windows):
        tools = provisioner.locate_tools()
        installation = VisualStudioInstallation.from_record({"installationPath": VS_PATH})
        requirement = vs_requirement(registry.resolve("5.6", windows))

        provisioner.ensure_components(tools, installation, requirement)

        (command,) = runner.commands
        assert command.program == str(tools.vs_installer)
        assert command.args == (
            "modify",
            "--installPath",
            VS_PATH,
            "--add",
            "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
            "--add",
            "Microsoft.VisualStudio.Component.Windows10SDK.17763",
            "--quiet",
        )

    def test_prefers_setup_engine(self, provisioner, runner, registry, windows, tmp_path):
        engine = tmp_path / "setup.exe"
        engine.write_text("")
        installation = VisualStudioInstallation.from_record(
            {"installationPath": VS_PATH, "properties": {"setupEngineFilePath": str(engine)}}
        )
        requirement = vs_requirement(registry.resolve("5.6", windows))

        provisioner.ensure_components(provisioner.locate_tools(), installation, requirement)

        assert runner.commands[0].program == str(engine)

    def test_failure(self, provisioner, runner, registry, windows):
        runner.on("modify", exit_code=5007)
        installation = VisualStudioInstallation.from_record({"installationPath": VS_PATH})
        requirement = vs_requirement(registry.resolve("5.6", windows))

        with pytest.raises(ComponentInstallError) as exc_info:
            provisioner.ensure_components(
                provisioner.locate_tools(), installation, requirement
            )

        assert exc_info.value.exit_code == 5007
        assert "exit code 5007" in str(exc_info.value)


class TestLegacyPatch:
    def test_script_contents(self):
        installation = VisualStudioInstallation.from_record({"installationPath": VS_PATH})

        script = legacy_patch_script(installation)

        assert "VsDevCmd.bat" in script
        for name in (
            "ucrt.modulemap",
            "visualc.modulemap",
            "visualc.apinotes",
            "winsdk.modulemap",
        ):
            assert f"%SDKROOT%\\usr\\share\\{name}" in script
        assert script.count("|| exit /b 1") == 5

    def test_runs_script_with_cmd(self, provisioner, runner, tmp_path):
        installation = VisualStudioInstallation.from_record({"installationPath": VS_PATH})

        provisioner.patch_legacy_support_files(installation)

        (command,) = runner.commands
        assert command.program == "cmd"
        assert command.args[0] == "/c"
        assert (tmp_path / "temp" / "swift-support-files.bat").is_file()

    def test_failure_raises_installer_error(self, provisioner, runner):
        runner.on("cmd", exit_code=1)
        installation = VisualStudioInstallation.from_record({"installationPath": VS_PATH})

        with pytest.raises(InstallerExecutionError) as exc_info:
            provisioner.patch_legacy_support_files(installation)

        assert exc_info.value.exit_code == 1


class TestProvision:
    def _script(self, runner):
        runner.on("vswhere.exe", stdout=vswhere_json({"installationPath": VS_PATH}))

    def test_stage_order_for_legacy_version(self, provisioner, runner, registry, windows):
        self._script(runner)

        provisioner.provision(registry.resolve("5.4.1", windows))

        assert runner.programs() == ["vswhere.exe", "vs_installer.exe", "cmd"]

    @pytest.mark.parametrize("version", ["5.4.2", "5.6"])
    def test_no_patch_from_threshold(self, provisioner, runner, registry, windows, version):
        self._script(runner)

        provisioner.provision(registry.resolve(version, windows))

        assert runner.programs() == ["vswhere.exe", "vs_installer.exe"]

    def test_empty_query_stops_provisioning(self, provisioner, runner, registry, windows):
        runner.on("vswhere.exe", stdout="[]")

        with pytest.raises(ProvisioningQueryEmptyError):
            provisioner.provision(registry.resolve("5.4.1", windows))

        assert runner.programs() == ["vswhere.exe"]
