"""
Centralized exception hierarchy for ForgeKit.

Every error raised by the target lifecycle, the acquisition helpers and the
configuration layer derives from ForgeKitError so the orchestrator and the
CLI can report failures uniformly.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class ForgeKitError(Exception):
    """Base exception for all ForgeKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(ForgeKitError):
    """Configuration parsing or validation error."""

    pass


class TargetConfigurationError(ForgeKitError):
    """Base exception for an inconsistent target definition."""

    def __init__(self, target_name: str, message: str):
        self.target_name = target_name
        super().__init__(f"{target_name}: {message}")


class ConflictingSourceError(TargetConfigurationError):
    """Raised when a target sets both a mirror and a repo."""

    def __init__(self, target_name: str):
        super().__init__(target_name, "Found both repo and mirror, use only one.")


class MissingSourceError(TargetConfigurationError):
    """Raised when a target sets neither a mirror nor a repo."""

    def __init__(self, target_name: str):
        super().__init__(target_name, "Missing repo and mirror, use at least one.")


# ============================================================================
# Probe Exceptions
# ============================================================================


class ProbeError(ForgeKitError):
    """Raised when a present executable produces undecodable version output."""

    pass


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class AcquisitionError(ForgeKitError):
    """Base exception for source acquisition errors."""

    pass


class MirrorFormatError(AcquisitionError):
    """Raised when a mirror URL template cannot be formatted."""

    pass


class DownloadError(AcquisitionError):
    """Raised when an archive transfer fails."""

    pass


class ChecksumError(DownloadError):
    """Raised when a downloaded file does not match its expected checksum."""

    pass


class ArchiveExtractionError(AcquisitionError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ArchiveRenameError(AcquisitionError):
    """Raised when the extracted tree cannot be normalized to its fixed name."""

    def __init__(self, source: str, destination: str, reason: str):
        self.source = source
        self.destination = destination
        super().__init__(
            f"Failed to rename directory '{source}' to '{destination}': {reason}"
        )


class RepositoryCheckoutError(AcquisitionError):
    """Raised when a source-control checkout fails."""

    pass


# ============================================================================
# Process Exceptions
# ============================================================================


class CommandError(ForgeKitError):
    """Raised when a subprocess exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command '{' '.join(self.command)}' exited with status {returncode}"
        if stderr:
            msg += f": {stderr.strip()}"
        super().__init__(msg)


# ============================================================================
# Build / Install Exceptions
# ============================================================================


class BuildError(ForgeKitError):
    """Raised when the build step of a target fails."""

    pass


class InstallError(ForgeKitError):
    """Raised when the install step of a target fails."""

    pass


# ============================================================================
# Orchestration Exceptions
# ============================================================================


class WorkspaceLockError(ForgeKitError):
    """Raised when the workspace lock cannot be acquired within timeout."""

    pass


class TargetFailedError(ForgeKitError):
    """Raised by the orchestrator when a target's pipeline fails."""

    def __init__(self, target_name: str, step: str, error: Exception):
        self.target_name = target_name
        self.step = step
        self.error = error
        super().__init__(f"Target '{target_name}' failed during {step}: {error}")
