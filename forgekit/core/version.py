"""
Version comparison for installed tools.

Tools report their version in many shapes ("cmake version 3.28.1",
"GNU Make 4.3", "1.11.1"), so the comparison is a containment check against
the first line of the tool's version output rather than a strict parse.
"""

from forgekit.core.exceptions import ProbeError


def is_same_version(required: str, actual_line: str) -> bool:
    """
    Check whether a tool's version line satisfies the required version.

    Args:
        required: Version string from configuration (e.g., "2.0")
        actual_line: First line of the tool's version output

    Returns:
        True if actual_line contains required, False otherwise

    Example:
        >>> is_same_version("1.2.0", "version 1.2.0-rc")
        True
        >>> is_same_version("1.2.0", "1.2")
        False
    """
    return required in actual_line


def first_line(output: bytes) -> str:
    """
    Decode version command output and return its first line.

    Args:
        output: Raw standard output of the version command

    Returns:
        First line of the output, or an empty string if there is none

    Raises:
        ProbeError: If the output is not valid UTF-8 text
    """
    try:
        text = output.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProbeError(f"Version output is not valid UTF-8: {e}") from e

    # Only \n ends a line; other Unicode line breaks stay in the banner.
    return text.split("\n", 1)[0].rstrip("\r")
