"""
Build targets for ForgeKit.

This package provides the lifecycle abstraction and its implementations.

Available Components:
--------------------
- Buildable: Abstract base class for target implementations
- Target: Target driven by a TargetConfig record
- MirrorSource / RepoSource: Acquisition strategies of a Target
- download_from_mirror: Download, unpack and normalize a source archive
- checkout_repository: Clone a git repository into the source directory

Example Usage:
-------------
    from forgekit.config import parse_config
    from forgekit.targets import Target

    config = parse_config(Path("forgekit.yaml"))
    for target in (Target(c) for c in config.targets):
        if not target.is_present():
            target.download()
            target.build()
            target.install()
"""

from forgekit.targets.base import Buildable, SOURCE_DIR_NAME
from forgekit.targets.mirror import (
    ARCHIVE_FILE_NAME,
    archive_directory_name,
    download_from_mirror,
    format_mirror,
)
from forgekit.targets.repo import checkout_repository
from forgekit.targets.target import MirrorSource, RepoSource, Source, Target

__all__ = [
    "Buildable",
    "SOURCE_DIR_NAME",
    "ARCHIVE_FILE_NAME",
    "archive_directory_name",
    "download_from_mirror",
    "format_mirror",
    "checkout_repository",
    "MirrorSource",
    "RepoSource",
    "Source",
    "Target",
]
