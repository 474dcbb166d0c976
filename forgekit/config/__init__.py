"""Configuration module for ForgeKit.

This module provides YAML configuration parsing and validation for
forgekit.yaml.
"""

from forgekit.config.parser import (
    TargetConfig,
    ForgeKitConfig,
    ConfigError,
    parse_config,
    parse_targets,
)

__all__ = [
    "TargetConfig",
    "ForgeKitConfig",
    "ConfigError",
    "parse_config",
    "parse_targets",
]
