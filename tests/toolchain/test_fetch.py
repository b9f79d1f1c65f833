"""
Unit tests for the fetch and verify pipeline.
"""

from unittest.mock import Mock

import pytest

from swiftsetup.core.exceptions import DownloadError, VerificationError
from swiftsetup.core.verification import DEFAULT_KEYS_URL, GpgKeyring
from swiftsetup.toolchain.fetch import DownloadResult, FetchVerifyPipeline, discard
from tests.mocks import FakeTransport


@pytest.fixture
def package(registry, windows):
    return registry.resolve("5.6.1", windows)


@pytest.fixture
def served(tmp_path, package):
    return FakeTransport(
        tmp_path / "dl",
        files={
            package.url: b"installer",
            package.signature_url: b"signature",
            DEFAULT_KEYS_URL: b"keys",
        },
    )


class TestDownload:
    def test_downloads_installer_and_signature(self, served, package, runner):
        pipeline = FetchVerifyPipeline(served, GpgKeyring(runner, served))

        result = pipeline.download(package)

        assert result.installer_path.read_bytes() == b"installer"
        assert result.signature_path.read_bytes() == b"signature"
        assert sorted(served.requests) == sorted([package.url, package.signature_url])

    @pytest.mark.parametrize("failing", ["url", "signature_url"])
    def test_either_failure_fails_the_pair(self, tmp_path, package, runner, failing):
        transport = FakeTransport(
            tmp_path,
            files={package.url: b"i", package.signature_url: b"s"},
            failures={getattr(package, failing): DownloadError("boom")},
        )
        pipeline = FetchVerifyPipeline(transport, GpgKeyring(runner, transport))

        with pytest.raises(DownloadError, match="boom"):
            pipeline.download(package)

        assert list(tmp_path.glob("download-*")) == []

    def test_unexpected_error_is_wrapped(self, tmp_path, package, runner):
        transport = FakeTransport(
            tmp_path,
            files={package.url: b"i"},
            failures={package.signature_url: OSError("disk full")},
        )
        pipeline = FetchVerifyPipeline(transport, GpgKeyring(runner, transport))

        with pytest.raises(DownloadError, match="disk full") as exc_info:
            pipeline.download(package)
        assert exc_info.value.url == package.signature_url


class TestFetchAndVerify:
    def test_verifies_after_download(self, served, package, runner):
        pipeline = FetchVerifyPipeline(served, GpgKeyring(runner, served))

        result = pipeline.fetch_and_verify(package)

        args = [c.args for c in runner.commands]
        assert args[0][1] == "--import"
        assert args[-1] == (
            "--batch",
            "--verify",
            str(result.signature_path),
            str(result.installer_path),
        )

    def test_download_failure_skips_key_setup_and_verify(self, tmp_path, package):
        transport = FakeTransport(
            tmp_path, failures={package.signature_url: DownloadError("404")}
        )
        keyring = Mock(spec=GpgKeyring)

        with pytest.raises(DownloadError):
            FetchVerifyPipeline(transport, keyring).fetch_and_verify(package)

        keyring.setup.assert_not_called()
        keyring.verify.assert_not_called()

    def test_key_setup_failure_skips_verify(self, served, package):
        keyring = Mock(spec=GpgKeyring)
        keyring.setup.side_effect = VerificationError("no keys")

        with pytest.raises(VerificationError, match="no keys"):
            FetchVerifyPipeline(served, keyring).fetch_and_verify(package)

        keyring.verify.assert_not_called()

    def test_bad_signature_raises(self, served, package, runner):
        runner.on("--verify", exit_code=1)
        pipeline = FetchVerifyPipeline(served, GpgKeyring(runner, served))

        with pytest.raises(VerificationError):
            pipeline.fetch_and_verify(package)

    def test_failed_verification_removes_downloads(self, served, package, runner):
        runner.on("--verify", exit_code=1)
        pipeline = FetchVerifyPipeline(served, GpgKeyring(runner, served))

        with pytest.raises(VerificationError):
            pipeline.fetch_and_verify(package)

        assert list(served.root.iterdir()) == []


def test_discard(tmp_path):
    installer, signature = tmp_path / "swift.exe", tmp_path / "swift.exe.sig"
    installer.write_bytes(b"installer")

    discard(DownloadResult(installer_path=installer, signature_path=signature))

    assert not installer.exists()
