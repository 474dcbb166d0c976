"""
Install command implementation.

Downloads, builds and installs every configured target that is missing or
outdated.
"""

import logging

from forgekit.cli.utils import load_targets, print_results
from forgekit.core.exceptions import TargetFailedError
from forgekit.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if any target failed)
    """
    targets = load_targets(args)
    orchestrator = Orchestrator(
        targets,
        workdir=args.workdir,
        keep_going=args.keep_going,
        force=args.force,
    )

    try:
        results = orchestrator.run()
    except TargetFailedError as e:
        logger.error(str(e))
        return 1

    print_results(results)

    if not all(r.ok for r in results):
        return 1
    return 0
