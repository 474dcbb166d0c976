"""
Target lifecycle abstraction for ForgeKit.

Every acquisition strategy exposes the same four-step lifecycle so the
orchestrator can drive heterogeneous "get, build and install tool X" recipes
through one state machine:

    Unchecked -> Present
              -> Absent -> download() -> build() -> install()

Classes:
    Buildable: Abstract base class for target implementations
"""

from abc import ABC, abstractmethod

# Fixed directory every acquisition strategy materializes the source tree in.
# build() and install() only ever operate on this name.
SOURCE_DIR_NAME = "archive"


class Buildable(ABC):
    """
    Abstract base class for buildable targets.

    Abstract Methods:
        name(): Target identity
        is_present(): Check whether the required version is installed
        download(): Acquire the source tree into SOURCE_DIR_NAME
        build(): Build the acquired source tree
        install(): Install the built artifacts

    Example:
        class PrebuiltTool(Buildable):
            def name(self) -> str:
                return "tool"

            def is_present(self) -> bool:
                return shutil.which("tool") is not None

            def download(self) -> None:
                download_file(URL, "archive.tar.gz")

            def build(self) -> None:
                pass

            def install(self) -> None:
                call(["cp", "archive/tool", "/usr/local/bin"])
    """

    @abstractmethod
    def name(self) -> str:
        """
        Get the target name.

        Returns:
            Target identifier, also the executable probed for presence
        """
        pass

    @abstractmethod
    def is_present(self) -> bool:
        """
        Check whether the target is installed at the required version.

        An executable that cannot be run at all counts as absent.

        Returns:
            True if installed and up to date, False otherwise

        Raises:
            ProbeError: If the executable runs but its output is unreadable
        """
        pass

    @abstractmethod
    def download(self) -> None:
        """
        Acquire the target's source tree into the working directory.

        Raises:
            TargetConfigurationError: If the target's source is misconfigured
            AcquisitionError: If fetching or unpacking the source fails
        """
        pass

    @abstractmethod
    def build(self) -> None:
        """
        Build the acquired source tree.

        Raises:
            BuildError: If the source tree is missing or a build command fails
        """
        pass

    @abstractmethod
    def install(self) -> None:
        """
        Install the built target.

        Raises:
            InstallError: If the install command fails
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()}>"
