"""
Integration tests for the download module.

These tests reach download.swift.org and only run with --integration.
"""

import pytest

from swiftsetup.core.download import HttpTransport
from swiftsetup.core.exceptions import DownloadError
from swiftsetup.core.platform import System
from swiftsetup.core.verification import DEFAULT_KEYS_URL
from swiftsetup.toolchain.versions import default_registry


@pytest.mark.integration
class TestSwiftOrgDownloads:
    """Real downloads from the Swift release servers."""

    def test_download_signing_keys(self, tmp_path):
        transport = HttpTransport(tmp_path)

        path = transport.download(DEFAULT_KEYS_URL)

        assert path.parent == tmp_path
        assert "BEGIN PGP PUBLIC KEY BLOCK" in path.read_text()

    def test_package_signature_exists(self, tmp_path):
        package = default_registry().resolve("5.6.1", System("ubuntu", "20.04"))

        path = HttpTransport(tmp_path).download(package.signature_url)

        assert "BEGIN PGP SIGNATURE" in path.read_text()

    def test_missing_release(self, tmp_path):
        url = "https://download.swift.org/swift-0.0.1-release/missing.tar.gz"

        with pytest.raises(DownloadError, match="Failed to download"):
            HttpTransport(tmp_path).download(url)

        assert list(tmp_path.iterdir()) == []
