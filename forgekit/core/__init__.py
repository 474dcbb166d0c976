"""
Core functionality for ForgeKit.

This package contains the foundational modules that the target lifecycle
depends on: exceptions, version comparison, downloads, archive extraction,
subprocess helpers and workspace locking.
"""

from .exceptions import (
    ForgeKitError,
    ConfigError,
    TargetConfigurationError,
    ConflictingSourceError,
    MissingSourceError,
    ProbeError,
    AcquisitionError,
    MirrorFormatError,
    DownloadError,
    ChecksumError,
    ArchiveExtractionError,
    InsecureArchiveError,
    ArchiveRenameError,
    RepositoryCheckoutError,
    CommandError,
    BuildError,
    InstallError,
    WorkspaceLockError,
    TargetFailedError,
)

from .version import is_same_version, first_line

__all__ = [
    # Exceptions
    "ForgeKitError",
    "ConfigError",
    "TargetConfigurationError",
    "ConflictingSourceError",
    "MissingSourceError",
    "ProbeError",
    "AcquisitionError",
    "MirrorFormatError",
    "DownloadError",
    "ChecksumError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ArchiveRenameError",
    "RepositoryCheckoutError",
    "CommandError",
    "BuildError",
    "InstallError",
    "WorkspaceLockError",
    "TargetFailedError",
    # Version comparison
    "is_same_version",
    "first_line",
]
