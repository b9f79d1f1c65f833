"""
Pytest configuration and shared fixtures for SwiftSetup tests.
"""

import pytest
from pathlib import Path

from swiftsetup.core.platform import System, clear_system_cache
from swiftsetup.core.tool_cache import ToolCache
from swiftsetup.toolchain.versions import SwiftVersionRegistry
from tests.mocks import FakeProcessRunner, FakeTransport, RecordingEnvironment


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch):
    """Keep tests away from the real runner directories and command files."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))
    for name in (
        "RUNNER_TOOL_CACHE",
        "RUNNER_TEMP",
        "GITHUB_ACTIONS",
        "GITHUB_PATH",
        "GITHUB_ENV",
        "GITHUB_OUTPUT",
        "VSWHERE_PATH",
        "INPUT_SWIFT-VERSION",
        "SWIFTSETUP_SWIFT_VERSION",
        "GNUPGHOME",
    ):
        monkeypatch.delenv(name, raising=False)

    clear_system_cache()
    yield fake_home
    clear_system_cache()


@pytest.fixture
def registry() -> SwiftVersionRegistry:
    """Registry loaded from the bundled catalogue."""
    return SwiftVersionRegistry()


@pytest.fixture
def ubuntu() -> System:
    return System("ubuntu", "20.04", "x64")


@pytest.fixture
def windows() -> System:
    return System("windows", "10", "x64")


@pytest.fixture
def tool_cache(tmp_path: Path) -> ToolCache:
    return ToolCache(tmp_path / "tool-cache")


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def environment() -> RecordingEnvironment:
    return RecordingEnvironment()


@pytest.fixture
def transport(tmp_path: Path) -> FakeTransport:
    return FakeTransport(tmp_path / "downloads")
