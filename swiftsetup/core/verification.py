"""
Detached signature verification with GnuPG.

Swift installers are published with a detached `.sig` file signed by the
Swift release keys. This module fetches and imports the publisher's keys,
optionally refreshes them from a keyserver, and verifies a signature against
a downloaded file. Every failure raises `VerificationError`: an installer is
either verified or never trusted.
"""

import logging
from pathlib import Path
from typing import Optional

from swiftsetup.core.exceptions import DownloadError, VerificationError
from swiftsetup.core.filesystem import remove_file
from swiftsetup.core.interfaces import ProcessRunner, Transport
from swiftsetup.core.process import Command

logger = logging.getLogger(__name__)

DEFAULT_KEYS_URL = "https://swift.org/keys/all-keys.asc"
REFRESH_KEY_ID = "Swift"


class GpgKeyring:
    """
    GnuPG keyring holding the Swift release keys.

    Example:
        >>> keyring = GpgKeyring(SubprocessRunner(), HttpTransport())
        >>> keyring.setup()
        >>> keyring.verify(Path("swift.tar.gz.sig"), Path("swift.tar.gz"))
    """

    def __init__(
        self,
        runner: ProcessRunner,
        transport: Transport,
        keys_url: str = DEFAULT_KEYS_URL,
        keyserver: Optional[str] = None,
        homedir: Optional[Path] = None,
        gpg: str = "gpg",
    ):
        """
        Initialize keyring.

        Args:
            runner: Process runner used to invoke gpg
            transport: Transport used to fetch the key bundle
            keys_url: URL of the armored public key bundle
            keyserver: Optional keyserver to refresh keys from after import
            homedir: Optional isolated GnuPG home directory
            gpg: gpg executable name or path
        """
        self.runner = runner
        self.transport = transport
        self.keys_url = keys_url
        self.keyserver = keyserver
        self.homedir = Path(homedir) if homedir else None
        self.gpg = gpg

    def _command(self, *args: str) -> Command:
        base = [self.gpg, "--batch"]
        if self.homedir:
            base.extend(["--homedir", str(self.homedir)])
        return Command.of(*base, *args)

    def _run(self, command: Command) -> int:
        try:
            return self.runner.run(
                command,
                on_stdout=lambda line: logger.debug(f"gpg: {line}"),
                on_stderr=lambda line: logger.debug(f"gpg: {line}"),
            )
        except FileNotFoundError as e:
            raise VerificationError(
                "GPG not installed. Install gpg to verify signatures."
            ) from e
        except OSError as e:
            raise VerificationError(f"Could not run {self.gpg}: {e}") from e

    def setup(self) -> None:
        """
        Establish trust material: import the key bundle and refresh it.

        Raises:
            VerificationError: If keys cannot be fetched, imported or refreshed
        """
        self.import_keys()
        if self.keyserver:
            self.refresh_keys()

    def import_keys(self) -> None:
        """Fetch the publisher's key bundle and import it."""
        if self.homedir:
            self.homedir.mkdir(parents=True, exist_ok=True, mode=0o700)

        logger.debug(f"Fetching verification keys from {self.keys_url}")
        try:
            keys_path = self.transport.download(self.keys_url)
        except DownloadError as e:
            raise VerificationError(
                f"Could not fetch signing keys from {self.keys_url}: {e}"
            ) from e

        logger.debug("Importing verification keys")
        try:
            exit_code = self._run(self._command("--import", str(keys_path)))
        finally:
            remove_file(keys_path)
        if exit_code != 0:
            raise VerificationError(
                f"Failed to import signing keys from {self.keys_url} "
                f"(gpg exit code {exit_code})"
            )

    def refresh_keys(self) -> None:
        """Refresh imported keys from the configured keyserver."""
        logger.debug(f"Refreshing keys from {self.keyserver}")
        exit_code = self._run(
            self._command(
                "--keyserver", self.keyserver, "--refresh-keys", REFRESH_KEY_ID
            )
        )
        if exit_code != 0:
            raise VerificationError(
                f"Failed to refresh signing keys from {self.keyserver} "
                f"(gpg exit code {exit_code})"
            )

    def verify(self, signature_path: Path, file_path: Path) -> None:
        """
        Verify a detached signature.

        Args:
            signature_path: Detached signature file
            file_path: Signed file

        Raises:
            VerificationError: If the signature does not verify
        """
        if not Path(file_path).exists():
            raise VerificationError(f"File not found: {file_path}")
        if not Path(signature_path).exists():
            raise VerificationError(f"Signature file not found: {signature_path}")

        logger.debug(f"Verifying signature {signature_path}")
        exit_code = self._run(
            self._command("--verify", str(signature_path), str(file_path))
        )
        if exit_code != 0:
            raise VerificationError(
                f"Signature verification failed for {file_path} "
                f"(gpg exit code {exit_code})"
            )
        logger.info("GPG signature verified successfully")


__all__ = [
    "DEFAULT_KEYS_URL",
    "GpgKeyring",
]
