"""
HTTP download helper for source archives.

Fetches a URL to a local file with:
- Streaming transfer (archives are never held in memory)
- Retry logic with exponential backoff
- Optional SHA256 verification
- Timeout handling
"""

import hashlib
import logging
import time
from pathlib import Path
from typing import Optional, Union

import requests
from requests.exceptions import RequestException

from forgekit.core.exceptions import ChecksumError, DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Union[str, Path],
    expected_sha256: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination, retrying transient failures.

    Args:
        url: URL to download from
        destination: Local path to save file (overwritten if present)
        expected_sha256: Expected SHA256 hash, verified after transfer
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries or the file can't be written
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL or destination is empty

    Example:
        >>> download_file("https://example.com/foo-2.0.tar.gz", "archive.tar.gz")
        PosixPath('archive.tar.gz')
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)

    for attempt in range(max_retries):
        try:
            return _fetch(url, destination, expected_sha256, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download of {url} failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download of {url} failed: no attempts were made")


def _fetch(
    url: str,
    destination: Path,
    expected_sha256: Optional[str],
    timeout: int,
) -> Path:
    """Perform a single streaming download attempt."""
    logger.info(f"Downloading from {url}")

    hasher = hashlib.sha256()

    with requests.get(
        url, stream=True, timeout=timeout, allow_redirects=True
    ) as response:
        response.raise_for_status()

        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        hasher.update(chunk)
        except OSError as e:
            raise DownloadError(f"Cannot write {destination}: {e}") from e

    if expected_sha256:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            destination.unlink()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}"
            )
        logger.info("Checksum verified successfully")

    logger.debug(f"Download complete: {destination}")
    return destination
