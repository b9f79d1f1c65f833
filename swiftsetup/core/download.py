"""
Network download transport with progress tracking.

This module provides the HTTP transport used to fetch Swift installers,
their detached signatures and the publisher's signing keys:
- HTTP/HTTPS downloads with TLS verification
- Streaming to disk with progress reporting (bytes, percentage, speed, ETA)
- Timeout handling
- Partial files removed on failure

There is deliberately no retry loop: a failed transfer aborts the install.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from swiftsetup.core.directory import get_temp_dir
from swiftsetup.core.exceptions import DownloadError
from swiftsetup.core.interfaces import Transport

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 60,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL or destination is invalid

    Example:
        >>> url = "https://download.swift.org/.../swift-5.6.1-RELEASE-ubuntu20.04.tar.gz"
        >>> download_file(url, Path("/tmp/swift.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading {url}")

    try:
        response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}", url=url) from e
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to write {destination}: {e}", url=url) from e

    logger.debug(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    """
    Write a streaming response to disk, reporting progress at most twice a second.
    """
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


class HttpTransport(Transport):
    """
    Transport that downloads each URL to a uniquely named file in a temp dir.

    Example:
        >>> transport = HttpTransport(Path("/tmp/runner"))
        >>> path = transport.download("https://swift.org/keys/all-keys.asc")
    """

    def __init__(self, temp_dir: Optional[Path] = None, timeout: int = 60):
        """
        Initialize transport.

        Args:
            temp_dir: Directory downloads are written to (default: RUNNER_TEMP)
            timeout: Request timeout in seconds
        """
        self.temp_dir = Path(temp_dir) if temp_dir else get_temp_dir()
        self.timeout = timeout

    def download(self, url: str) -> Path:
        destination = self.temp_dir / str(uuid.uuid4())
        logger.info(f"Downloading {url}")
        return download_file(
            url,
            destination,
            progress_callback=_log_progress,
            timeout=self.timeout,
        )


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(format_progress(progress))


__all__ = [
    "DownloadProgress",
    "download_file",
    "format_progress",
    "HttpTransport",
]
