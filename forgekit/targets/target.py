"""
Configured build target.

Target drives one TargetConfig record through the Buildable lifecycle:
probe the installed version, acquire sources from a mirror archive or a
git repository, run configure and the build command inside the source
tree, then run the install command (through sudo when requested).
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Sequence, Type, Union

from forgekit.config.parser import TargetConfig
from forgekit.core import process
from forgekit.core.exceptions import (
    BuildError,
    CommandError,
    ConflictingSourceError,
    ForgeKitError,
    InstallError,
    MissingSourceError,
)
from forgekit.core.filesystem import working_directory
from forgekit.core.version import first_line, is_same_version
from forgekit.targets.base import SOURCE_DIR_NAME, Buildable
from forgekit.targets.mirror import download_from_mirror
from forgekit.targets.repo import checkout_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MirrorSource:
    """Source archive downloaded from a URL template."""

    url_template: str


@dataclass(frozen=True)
class RepoSource:
    """Source checked out from a git repository."""

    location: str


Source = Union[MirrorSource, RepoSource]


class Target(Buildable):
    """
    Buildable target backed by a configuration record.

    Attributes:
        config: Immutable target configuration

    Example:
        >>> target = Target(TargetConfig(
        ...     name="foo",
        ...     version_command="--version",
        ...     version="2.0",
        ...     mirror="https://example.com/foo-{version}.tar.gz",
        ... ))
        >>> if not target.is_present():
        ...     target.download()
        ...     target.build()
        ...     target.install()
    """

    def __init__(self, config: TargetConfig):
        """
        Initialize target.

        Args:
            config: Target configuration record

        Raises:
            TypeError: If config is not a TargetConfig
        """
        if not isinstance(config, TargetConfig):
            raise TypeError(f"config must be TargetConfig, got {type(config)}")

        self.config = config

    def name(self) -> str:
        return self.config.name

    @property
    def source(self) -> Source:
        """
        Resolve the acquisition strategy.

        Raises:
            ConflictingSourceError: If both mirror and repo are set
            MissingSourceError: If neither mirror nor repo is set
        """
        mirror = self.config.mirror
        repo = self.config.repo

        if mirror is not None and repo is not None:
            raise ConflictingSourceError(self.config.name)
        if mirror is None and repo is None:
            raise MissingSourceError(self.config.name)

        if mirror is not None:
            return MirrorSource(mirror)
        return RepoSource(repo)

    def is_present(self) -> bool:
        command = [self.config.name, self.config.version_command]

        try:
            output = process.probe(command)
        except OSError as e:
            logger.debug(f"{self.config.name} is not runnable: {e}")
            return False

        actual = first_line(output)
        present = is_same_version(self.config.version, actual)
        logger.debug(
            f"{self.config.name}: required {self.config.version!r}, "
            f"found {actual!r} -> {'present' if present else 'outdated'}"
        )
        return present

    def download(self) -> None:
        source = self.source

        if isinstance(source, MirrorSource):
            logger.info(f"Downloading {self.config.name} {self.config.version}")
            download_from_mirror(
                source.url_template,
                self.config.version,
                expected_sha256=self.config.sha256,
            )
        else:
            if self.config.sha256:
                logger.warning(
                    f"{self.config.name}: sha256 only applies to mirror archives"
                )
            checkout_repository(source.location, self.config.version)

    def build(self) -> None:
        logger.info(f"Building {self.config.name}")

        try:
            with working_directory(SOURCE_DIR_NAME):
                if self.config.configure:
                    self._run(["./configure"], BuildError)

                if self.config.build_command:
                    self._run(self.config.build_command, BuildError)
        except OSError as e:
            raise BuildError(
                f"{self.config.name}: cannot enter source directory: {e}"
            ) from e

    def install(self) -> None:
        logger.info(f"Installing {self.config.name}")

        if not self.config.install_command:
            logger.debug(f"{self.config.name} has no install command")
            return

        command: List[str] = list(self.config.install_command)
        if self.config.sudo_install:
            command.insert(0, "sudo")

        try:
            with working_directory(SOURCE_DIR_NAME):
                self._run(command, InstallError)
        except OSError as e:
            raise InstallError(
                f"{self.config.name}: cannot enter source directory: {e}"
            ) from e

    def _run(self, command: Sequence[str], error_type: Type[ForgeKitError]) -> None:
        """Run a step command with make_env_vars applied."""
        try:
            process.call(command, env=self.config.make_env_vars)
        except CommandError as e:
            raise error_type(f"{self.config.name}: {e}") from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise error_type(
                f"{self.config.name}: failed to run {' '.join(command)}: {e}"
            ) from e
