"""
Source acquisition from a git repository.

The repository is cloned straight into the fixed source directory so the
build and install steps see the same layout as for mirror archives.
"""

import logging
import subprocess
from pathlib import Path

from forgekit.core import process
from forgekit.core.exceptions import CommandError, RepositoryCheckoutError
from forgekit.targets.base import SOURCE_DIR_NAME

logger = logging.getLogger(__name__)

CLONE_TIMEOUT = 600


def checkout_repository(
    location: str, version: str, destination: str = SOURCE_DIR_NAME
) -> Path:
    """
    Clone a repository at the requested version.

    A shallow clone of ``version`` as a branch or tag is tried first. Versions
    that git can't clone by name (commit hashes, for example) fall back to a
    full clone followed by ``git checkout``.

    Args:
        location: Repository URL or path
        version: Branch, tag or commit to check out
        destination: Directory to clone into

    Returns:
        Path to the checked-out source directory

    Raises:
        RepositoryCheckoutError: If the destination exists or git fails
    """
    target = Path(destination)
    if target.exists():
        raise RepositoryCheckoutError(
            f"Cannot clone {location}: destination '{destination}' already exists"
        )

    logger.info(f"Cloning {location} at {version}")

    try:
        process.call(
            [
                "git",
                "clone",
                "--depth",
                "1",
                "--branch",
                version,
                location,
                destination,
            ],
            timeout=CLONE_TIMEOUT,
        )
        return target
    except CommandError as e:
        logger.debug(f"Shallow clone of {version} failed, trying full clone: {e}")
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RepositoryCheckoutError(f"Failed to run git: {e}") from e

    try:
        process.call(["git", "clone", location, destination], timeout=CLONE_TIMEOUT)
        process.call(
            ["git", "-C", destination, "checkout", version], timeout=CLONE_TIMEOUT
        )
    except CommandError as e:
        raise RepositoryCheckoutError(
            f"Failed to check out {version} from {location}: {e}"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise RepositoryCheckoutError(f"Checkout timed out: {e}") from e

    return target
