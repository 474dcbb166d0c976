"""
File system utilities for ForgeKit.

This module provides:
- Gzip-compressed tar extraction with directory traversal protection
- A scoped working-directory guard used by build and install steps
"""

import logging
import os
import sys
import tarfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from forgekit.core.exceptions import ArchiveExtractionError, InsecureArchiveError

logger = logging.getLogger(__name__)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent, False otherwise
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Reject archive members that would land outside the destination.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_tar_gz(
    archive_path: Union[str, Path], destination: Union[str, Path] = "."
) -> None:
    """
    Decompress a gzip file and unpack the tar stream it contains.

    Args:
        archive_path: Path to the .tar.gz file
        destination: Directory to extract into (default: current directory)

    Raises:
        ArchiveExtractionError: If the file is missing or not a valid gzip/tar stream
        InsecureArchiveError: If the archive contains traversal paths

    Example:
        >>> extract_tar_gz("archive.tar.gz")
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                _validate_archive_path(member.name, destination)

            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {archive_path} into {destination}")


# ============================================================================
# Working Directory
# ============================================================================


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """
    Temporarily change the process working directory.

    The previous directory is restored on every exit path, including
    exceptions raised inside the block.

    Args:
        path: Directory to enter, relative to the current directory

    Yields:
        Absolute path of the entered directory

    Raises:
        FileNotFoundError: If path does not exist
        NotADirectoryError: If path is not a directory

    Example:
        >>> with working_directory("archive"):
        ...     call(["./configure"])
    """
    previous = Path.cwd()
    target = previous / path

    os.chdir(target)
    logger.debug(f"Entered {target}")
    try:
        yield target
    finally:
        os.chdir(previous)
        logger.debug(f"Restored working directory {previous}")


__all__ = [
    "is_relative_to",
    "extract_tar_gz",
    "working_directory",
]
