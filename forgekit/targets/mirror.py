"""
Archive acquisition from a download mirror.

A mirror is a URL template such as
``https://ftp.gnu.org/gnu/make/make-{version}.tar.gz``. Acquisition formats
the template, downloads the archive to ``archive.tar.gz``, unpacks it in the
current directory and renames the unpacked top-level directory to
``archive`` so later steps never need to know the tarball's naming scheme.

The top-level directory name is derived from the URL's file name by cutting
at the second dot from the end. That matches two-part suffixes such as
``.tar.gz``; single-part suffixes (``.tgz``) derive the wrong name and the
rename fails.
"""

import logging
from pathlib import Path
from typing import Optional

from forgekit.core.download import download_file
from forgekit.core.exceptions import ArchiveRenameError, MirrorFormatError
from forgekit.core.filesystem import extract_tar_gz
from forgekit.targets.base import SOURCE_DIR_NAME

logger = logging.getLogger(__name__)

ARCHIVE_FILE_NAME = "archive.tar.gz"


def format_mirror(template: str, version: str) -> str:
    """
    Substitute a version into a mirror URL template.

    Args:
        template: URL template with a ``{version}`` placeholder
        version: Version string to substitute

    Returns:
        Concrete download URL

    Raises:
        MirrorFormatError: If the template is malformed

    Example:
        >>> format_mirror("https://example.com/foo-{version}.tar.gz", "2.0")
        'https://example.com/foo-2.0.tar.gz'
    """
    try:
        return template.format(version=version)
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise MirrorFormatError(
            f"Invalid mirror template '{template}': {type(e).__name__}: {e}"
        ) from e


def rfind_nth(text: str, char: str, n: int) -> Optional[int]:
    """
    Find the index of the n-th occurrence of char counting from the end.

    Returns:
        Index into text, or None if there are fewer than n occurrences
    """
    index = len(text)
    for _ in range(n):
        index = text.rfind(char, 0, index)
        if index == -1:
            return None
    return index


def archive_directory_name(url: str) -> str:
    """
    Derive the top-level directory an archive unpacks to from its URL.

    Args:
        url: Concrete download URL

    Returns:
        Last path segment with its last two dot-separated parts removed.
        A segment with fewer than two dots is returned unchanged.

    Example:
        >>> archive_directory_name("https://example.com/foo-2.0.tar.gz")
        'foo-2.0'
    """
    file_name = url.rsplit("/", 1)[-1]
    pos = rfind_nth(file_name, ".", 2)
    if pos is None:
        return file_name
    return file_name[:pos]


def normalize_source_dir(
    directory_name: str, destination: str = SOURCE_DIR_NAME
) -> Path:
    """
    Rename an unpacked directory to the fixed source directory name.

    Raises:
        ArchiveRenameError: If the source is missing or the destination exists
    """
    source = Path(directory_name)
    target = Path(destination)

    if not source.is_dir():
        raise ArchiveRenameError(
            directory_name,
            destination,
            "extracted directory not found "
            "(archive layout does not match its file name)",
        )

    if target.exists() or target.is_symlink():
        raise ArchiveRenameError(
            directory_name, destination, "destination already exists"
        )

    try:
        source.rename(target)
    except OSError as e:
        raise ArchiveRenameError(directory_name, destination, str(e)) from e

    return target


def download_from_mirror(
    mirror_template: str, version: str, expected_sha256: Optional[str] = None
) -> Path:
    """
    Download, unpack and normalize a source archive in the current directory.

    Args:
        mirror_template: URL template with a ``{version}`` placeholder
        version: Version to download
        expected_sha256: Expected SHA256 of the archive, if known

    Returns:
        Path to the normalized source directory (``archive``)

    Raises:
        MirrorFormatError: If the template is malformed
        DownloadError: If the transfer fails
        ChecksumError: If the archive doesn't match expected_sha256
        ArchiveExtractionError: If the file is not a valid gzip/tar stream
        ArchiveRenameError: If the unpacked directory can't be normalized
    """
    url = format_mirror(mirror_template, version)
    logger.debug(f"Mirror URL: {url}")

    download_file(url, ARCHIVE_FILE_NAME, expected_sha256=expected_sha256)
    extract_tar_gz(ARCHIVE_FILE_NAME, ".")

    directory_name = archive_directory_name(url)
    logger.debug(f"Normalizing {directory_name} -> {SOURCE_DIR_NAME}")

    return normalize_source_dir(directory_name)
