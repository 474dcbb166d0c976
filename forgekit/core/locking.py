"""
Workspace locking for ForgeKit.

Targets share fixed file names in the working directory (archive.tar.gz and
the extracted archive/ tree), so two ForgeKit processes running in the same
directory would clobber each other. A file lock held for the duration of an
orchestration run prevents that.

Usage:
    from forgekit.core.locking import workspace_lock

    with workspace_lock(Path("/build/tools"), timeout=10):
        orchestrator.run()
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from filelock import FileLock, Timeout as LockTimeout

from forgekit.core.exceptions import WorkspaceLockError

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".forgekit.lock"


@contextmanager
def workspace_lock(directory: Union[str, Path], timeout: float = 10) -> Iterator[Path]:
    """
    Acquire the lock for a ForgeKit working directory.

    Args:
        directory: Working directory to protect
        timeout: Maximum wait time in seconds (default: 10)

    Yields:
        Path to the lock file

    Raises:
        WorkspaceLockError: If lock can't be acquired within timeout
    """
    lock_path = Path(directory) / LOCK_FILE_NAME
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired workspace lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released workspace lock: {lock_path}")
    except LockTimeout as e:
        raise WorkspaceLockError(
            f"Could not acquire workspace lock {lock_path} after {timeout}s. "
            "Another ForgeKit process may be running in this directory."
        ) from e
