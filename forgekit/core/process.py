"""
Subprocess helpers.

Thin wrappers around subprocess.run so the lifecycle code never deals with
return codes or environment merging directly.
"""

import logging
import os
import subprocess
from typing import Dict, Iterable, Optional, Sequence, Tuple

from forgekit.core.exceptions import CommandError

logger = logging.getLogger(__name__)


def build_environment(
    overrides: Optional[Iterable[Tuple[str, str]]] = None,
) -> Optional[Dict[str, str]]:
    """
    Merge ordered (key, value) overrides over the current environment.

    Args:
        overrides: Environment overrides, later pairs win

    Returns:
        Environment mapping, or None when there are no overrides
        (subprocess then inherits the parent environment)
    """
    if not overrides:
        return None

    env = dict(os.environ)
    for key, value in overrides:
        env[key] = value
    return env


def call(
    command: Sequence[str],
    env: Optional[Iterable[Tuple[str, str]]] = None,
    timeout: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """
    Run a command and check its exit status.

    Args:
        command: Program and arguments
        env: Ordered environment overrides for the child process
        timeout: Optional timeout in seconds

    Returns:
        Completed process with captured text output

    Raises:
        CommandError: If the command exits non-zero
        OSError: If the program cannot be spawned
        subprocess.TimeoutExpired: If the timeout elapses
    """
    command = list(command)
    logger.debug(f"Running: {' '.join(command)}")

    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        env=build_environment(env),
        timeout=timeout,
    )

    if result.stdout:
        logger.debug(result.stdout.rstrip())

    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stderr)

    return result


def probe(command: Sequence[str], timeout: Optional[int] = None) -> bytes:
    """
    Run a read-only command and return its raw standard output.

    The exit status is not checked: many tools print their version and
    exit non-zero.

    Raises:
        OSError: If the program cannot be spawned
    """
    result = subprocess.run(list(command), capture_output=True, timeout=timeout)
    return result.stdout
