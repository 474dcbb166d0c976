"""
Shared utilities for CLI commands.
"""

import logging
from typing import List, Sequence

from forgekit.config.parser import parse_config
from forgekit.core.exceptions import ConfigError
from forgekit.orchestrator import TargetResult
from forgekit.targets.target import Target

logger = logging.getLogger(__name__)


def load_targets(args) -> List[Target]:
    """
    Load the configured targets, optionally filtered by name.

    Args:
        args: Parsed arguments with config and targets fields

    Returns:
        Targets in configuration order

    Raises:
        ConfigError: If the configuration is invalid or a name is unknown
    """
    config = parse_config(args.config)
    logger.debug(f"Loaded {len(config.targets)} target(s) from {args.config}")

    selected = getattr(args, "targets", None) or []
    if not selected:
        return [Target(c) for c in config.targets]

    targets = []
    for name in selected:
        target_config = config.get_target(name)
        if target_config is None:
            raise ConfigError(f"Unknown target: {name}")
        targets.append(Target(target_config))
    return targets


def print_results(results: Sequence[TargetResult]) -> None:
    """Print one status line per target."""
    width = max((len(r.name) for r in results), default=0)
    for result in results:
        line = f"  {result.name:<{width}}  {result.status.value}"
        if result.error is not None:
            line += f" ({result.step}: {result.error})"
        print(line)
