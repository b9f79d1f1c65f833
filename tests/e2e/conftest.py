"""
Fixtures for end-to-end tests.

Wires a real SwiftInstaller (registry, tool cache, keyring, strategies) to
fake network, process and environment collaborators.
"""

import pytest

from swiftsetup.config.settings import SetupConfig
from swiftsetup.core.verification import DEFAULT_KEYS_URL
from swiftsetup.toolchain.installer import SwiftInstaller
from tests.mocks import FakeTransport


@pytest.fixture
def config(tmp_path):
    return SetupConfig(
        tool_cache_dir=tmp_path / "tool-cache",
        temp_dir=tmp_path / "temp",
        install_dir=tmp_path / "toolchains" / "swift",
    )


@pytest.fixture
def mirror(tmp_path, registry, ubuntu):
    """Transport serving the 5.6.1 Ubuntu archive, its signature and the keys."""
    package = registry.resolve("5.6.1", ubuntu)
    return FakeTransport(
        tmp_path / "downloads",
        files={
            package.url: b"archive",
            package.signature_url: b"signature",
            DEFAULT_KEYS_URL: b"keys",
        },
    )


@pytest.fixture
def extracting_runner(runner, config):
    """Runner whose tar creates the extracted toolchain layout."""
    runner.on(
        "tar",
        action=lambda command: (config.install_dir / "usr" / "bin").mkdir(
            parents=True, exist_ok=True
        ),
    )
    return runner


@pytest.fixture
def make_installer(config, mirror, extracting_runner, environment):
    def factory():
        return SwiftInstaller.from_config(
            config,
            environment=environment,
            process_runner=extracting_runner,
            transport=mirror,
        )

    return factory
