"""
Sequential orchestration of build targets.

The orchestrator walks the configured targets in order and drives each
absent one through download, build and install. Each target works in its
own subdirectory of the working directory, recreated empty for every
attempt; the whole run holds a workspace
lock and targets are never processed concurrently.
"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from forgekit.core.exceptions import TargetConfigurationError, TargetFailedError
from forgekit.core.filesystem import working_directory
from forgekit.core.locking import LOCK_FILE_NAME, workspace_lock
from forgekit.targets.base import Buildable

logger = logging.getLogger(__name__)


class TargetStatus(Enum):
    """Outcome of processing a single target."""

    PRESENT = "present"  # Required version already installed
    MISSING = "missing"  # Absent or outdated (check only)
    INSTALLED = "installed"  # Downloaded, built and installed
    FAILED = "failed"  # A lifecycle step raised


@dataclass
class TargetResult:
    """Result of processing a single target."""

    name: str
    status: TargetStatus
    step: Optional[str] = None  # Failing step for FAILED results
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status in (TargetStatus.PRESENT, TargetStatus.INSTALLED)


class Orchestrator:
    """
    Drive a list of targets through the lifecycle, one at a time.

    Attributes:
        targets: Targets in processing order
        workdir: Directory downloads and source trees are placed in
        keep_going: Continue with the next target after a failure
        force: Rebuild targets even when already present

    Example:
        >>> orchestrator = Orchestrator([Target(c) for c in config.targets])
        >>> for result in orchestrator.run():
        ...     print(result.name, result.status.value)
    """

    def __init__(
        self,
        targets: Iterable[Buildable],
        workdir: Union[str, Path] = ".",
        keep_going: bool = False,
        force: bool = False,
        lock_timeout: float = 10,
    ):
        self.targets = list(targets)
        self.workdir = Path(workdir)
        self.keep_going = keep_going
        self.force = force
        self.lock_timeout = lock_timeout

    def check(self) -> List[TargetResult]:
        """
        Probe every target without installing anything.

        Returns:
            One PRESENT, MISSING or FAILED result per target
        """
        results = []
        for target in self.targets:
            try:
                present = target.is_present()
            except Exception as e:
                logger.error(f"Failed to check {target.name()}: {e}")
                results.append(
                    TargetResult(target.name(), TargetStatus.FAILED, "check", e)
                )
                continue

            status = TargetStatus.PRESENT if present else TargetStatus.MISSING
            results.append(TargetResult(target.name(), status))
        return results

    def run(self) -> List[TargetResult]:
        """
        Ensure every target is installed.

        Returns:
            One result per processed target

        Raises:
            TargetFailedError: On the first failure, unless keep_going is set
            WorkspaceLockError: If another run holds the workspace
        """
        self.workdir.mkdir(parents=True, exist_ok=True)
        results: List[TargetResult] = []

        with workspace_lock(self.workdir, timeout=self.lock_timeout):
            logger.debug(
                f"Processing {len(self.targets)} target(s) in {self.workdir}"
            )
            for target in self.targets:
                result = self._process(target)
                results.append(result)

                if result.status is TargetStatus.FAILED and not self.keep_going:
                    raise TargetFailedError(
                        result.name, result.step, result.error
                    ) from result.error

        return results

    def _process(self, target: Buildable) -> TargetResult:
        """Run one target through its lifecycle, recording the failing step."""
        name = target.name()
        step = "check"

        try:
            if not self.force and target.is_present():
                logger.info(f"{name} is up to date")
                return TargetResult(name, TargetStatus.PRESENT)

            step = "download"
            target_dir = self._prepare_directory(name)

            with working_directory(target_dir):
                target.download()
                step = "build"
                target.build()
                step = "install"
                target.install()
        except Exception as e:
            logger.error(f"{name}: {step} failed: {e}")
            return TargetResult(name, TargetStatus.FAILED, step, e)

        logger.info(f"{name} installed")
        return TargetResult(name, TargetStatus.INSTALLED)

    def _prepare_directory(self, name: str) -> Path:
        """
        Create an empty directory for one target inside the workdir.

        Archive names are fixed, so every target gets its own directory, and
        leftovers of an earlier attempt are removed first. Target names are
        executables and may be paths; only their last component is used.

        Raises:
            TargetConfigurationError: If the name has no usable last component
        """
        component = Path(name).name
        if component in ("", ".", "..", LOCK_FILE_NAME):
            raise TargetConfigurationError(
                name, "cannot derive a working directory from this name"
            )

        target_dir = self.workdir / component
        if target_dir.exists() or target_dir.is_symlink():
            logger.debug(f"Removing leftovers in {target_dir}")
            if target_dir.is_dir() and not target_dir.is_symlink():
                shutil.rmtree(target_dir)
            else:
                target_dir.unlink()

        target_dir.mkdir(parents=True)
        return target_dir
