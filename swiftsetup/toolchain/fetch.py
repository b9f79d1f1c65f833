"""
Fetch and verify pipeline for Swift installers.

The installer and its detached `.sig` signature are downloaded concurrently
and awaited as a unit. Trust material is set up only after both transfers
succeed, and the installer path is returned only after the signature has
verified. An installer without a matching, verified signature never leaves
this module.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from swiftsetup.core.exceptions import DownloadError
from swiftsetup.core.filesystem import remove_file
from swiftsetup.core.interfaces import Transport
from swiftsetup.core.verification import GpgKeyring
from swiftsetup.toolchain.versions import Package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadResult:
    """Installer and signature files fetched for one package."""

    installer_path: Path
    signature_path: Path


class FetchVerifyPipeline:
    """
    Downloads a package with its signature and verifies it.

    Example:
        >>> pipeline = FetchVerifyPipeline(HttpTransport(), keyring)
        >>> result = pipeline.fetch_and_verify(package)
        >>> print(result.installer_path)
    """

    def __init__(self, transport: Transport, keyring: GpgKeyring):
        self.transport = transport
        self.keyring = keyring

    def download(self, package: Package) -> DownloadResult:
        """
        Download the installer and its signature in parallel.

        Raises:
            DownloadError: If either transfer fails
        """
        logger.info(f"Downloading Swift {package.version} for {package.platform}")

        urls = {
            "installer": package.url,
            "signature": package.signature_url,
        }

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="download") as pool:
            futures: Dict[str, Future] = {
                role: pool.submit(self.transport.download, url)
                for role, url in urls.items()
            }
            wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in futures.values():
                future.cancel()

        paths: Dict[str, Path] = {}
        failure = None
        for role, future in futures.items():
            if future.cancelled():
                continue
            error = future.exception()
            if error is None:
                paths[role] = Path(future.result())
            elif failure is None:
                failure = (role, error)

        if failure is not None:
            for path in paths.values():
                remove_file(path)
            role, error = failure
            if isinstance(error, DownloadError):
                raise error
            raise DownloadError(
                f"Failed to download {role} {urls[role]}: {error}", url=urls[role]
            ) from error

        logger.debug("Swift download complete")
        return DownloadResult(
            installer_path=paths["installer"], signature_path=paths["signature"]
        )

    def fetch_and_verify(self, package: Package) -> DownloadResult:
        """
        Download a package and verify its detached signature.

        Downloaded files are removed again if verification fails.

        Raises:
            DownloadError: If either transfer fails (nothing is verified)
            VerificationError: If keys cannot be set up or the signature fails
        """
        result = self.download(package)

        try:
            self.keyring.setup()
            self.keyring.verify(result.signature_path, result.installer_path)
        except Exception:
            discard(result)
            raise

        return result


def discard(result: DownloadResult) -> None:
    """Remove the downloaded installer and signature."""
    remove_file(result.installer_path)
    remove_file(result.signature_path)


__all__ = [
    "DownloadResult",
    "FetchVerifyPipeline",
    "discard",
]
