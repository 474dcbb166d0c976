"""
Check command implementation.

Reports which configured targets are installed at their required version.
"""

import logging

from forgekit.cli.utils import load_targets, print_results
from forgekit.orchestrator import Orchestrator, TargetStatus

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if every target is present, 1 otherwise)
    """
    targets = load_targets(args)
    results = Orchestrator(targets, workdir=args.workdir).check()

    print_results(results)

    missing = [r for r in results if r.status is not TargetStatus.PRESENT]
    if missing:
        logger.info(f"{len(missing)} of {len(results)} target(s) need installing")
        return 1
    return 0
