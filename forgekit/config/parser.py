"""YAML configuration parser for ForgeKit.

This module provides parsing and validation for forgekit.yaml configuration
files. Each entry under ``targets`` becomes an immutable TargetConfig record.

Mirror/repo exclusivity is intentionally not checked here: a target with
both or neither is reported when its download step runs.
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from forgekit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = ("make",)
DEFAULT_INSTALL_COMMAND = ("make", "install")


@dataclass(frozen=True)
class TargetConfig:
    """Configuration for a single target."""

    name: str
    version_command: str
    version: str
    mirror: Optional[str] = None  # URL template with a {version} placeholder
    repo: Optional[str] = None  # git URL or path
    sha256: Optional[str] = None  # expected digest of the mirror archive
    make_env_vars: Tuple[Tuple[str, str], ...] = ()
    configure: bool = False
    sudo_install: bool = False
    build_command: Tuple[str, ...] = DEFAULT_BUILD_COMMAND
    install_command: Tuple[str, ...] = DEFAULT_INSTALL_COMMAND

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.name:
            raise ValueError("Target name cannot be empty")


@dataclass
class ForgeKitConfig:
    """Complete ForgeKit configuration."""

    version: int
    targets: List[TargetConfig] = field(default_factory=list)

    def get_target(self, name: str) -> Optional[TargetConfig]:
        """Look up a target by name."""
        for target in self.targets:
            if target.name == name:
                return target
        return None


def parse_config(config_path: Path) -> ForgeKitConfig:
    """
    Parse forgekit.yaml configuration file.

    Args:
        config_path: Path to forgekit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def _parse_and_validate(data: dict) -> ForgeKitConfig:
    """Parse and validate configuration data."""
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    return ForgeKitConfig(
        version=data["version"],
        targets=parse_targets(data.get("targets") or []),
    )


def parse_targets(data: Any) -> List[TargetConfig]:
    """
    Parse a list of target definitions.

    Args:
        data: Already-loaded list of target mappings

    Returns:
        Target records in configuration order

    Raises:
        ConfigError: If a definition is invalid or a name is duplicated
    """
    if not isinstance(data, list):
        raise ConfigError("targets must be a list")

    targets = []
    names = set()

    for index, target_data in enumerate(data):
        target = _parse_target(target_data, index)

        if target.name in names:
            raise ConfigError(f"Duplicate target name: {target.name}")

        names.add(target.name)
        targets.append(target)

    return targets


def _parse_target(data: Any, index: int) -> TargetConfig:
    """Parse a single target definition."""
    if not isinstance(data, dict):
        raise ConfigError(f"Target #{index} must be a mapping")

    for field_name in ("name", "version_command", "version"):
        if field_name not in data:
            raise ConfigError(
                f"Target #{index} missing required field: {field_name}"
            )

    name = _parse_string(data["name"], "name", index)
    if not name:
        raise ConfigError(f"Target #{index} has an empty name")

    kwargs = {}
    if "build_command" in data:
        kwargs["build_command"] = _parse_command(data["build_command"], name)
    if "install_command" in data:
        kwargs["install_command"] = _parse_command(data["install_command"], name)

    return TargetConfig(
        name=name,
        version_command=_parse_string(
            data["version_command"], "version_command", name
        ),
        version=_parse_string(data["version"], "version", name),
        mirror=_parse_optional_string(data.get("mirror"), "mirror", name),
        repo=_parse_optional_string(data.get("repo"), "repo", name),
        sha256=_parse_optional_string(data.get("sha256"), "sha256", name),
        make_env_vars=_parse_env_vars(data.get("make_env_vars"), name),
        configure=_parse_bool(data.get("configure", False), "configure", name),
        sudo_install=_parse_bool(
            data.get("sudo_install", False), "sudo_install", name
        ),
        **kwargs,
    )


def _parse_string(value: Any, field_name: str, owner: Any) -> str:
    """Parse a scalar string field, accepting unquoted YAML numbers."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float):
            logger.warning(
                f"{owner}: {field_name} {value!r} was parsed as a number; "
                "quote it in YAML to keep trailing zeros"
            )
        return str(value)
    raise ConfigError(f"{owner}: {field_name} must be a string")


def _parse_optional_string(value: Any, field_name: str, owner: str) -> Optional[str]:
    """Parse an optional string field."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{owner}: {field_name} must be a string")
    return value


def _parse_bool(value: Any, field_name: str, owner: str) -> bool:
    """Parse a boolean field."""
    if not isinstance(value, bool):
        raise ConfigError(f"{owner}: {field_name} must be true or false")
    return value


def _parse_env_vars(value: Any, owner: str) -> Tuple[Tuple[str, str], ...]:
    """
    Parse make_env_vars.

    Accepts a list of [key, value] pairs or a mapping. Order is preserved.
    """
    if value is None:
        return ()

    if isinstance(value, dict):
        items = list(value.items())
    elif isinstance(value, list):
        items = []
        for pair in value:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ConfigError(
                    f"{owner}: make_env_vars entries must be [key, value] pairs"
                )
            items.append((pair[0], pair[1]))
    else:
        raise ConfigError(f"{owner}: make_env_vars must be a list or mapping")

    env_vars = []
    for key, val in items:
        if not isinstance(key, str) or not key:
            raise ConfigError(
                f"{owner}: make_env_vars keys must be non-empty strings"
            )
        env_vars.append((key, _parse_string(val, f"make_env_vars.{key}", owner)))

    return tuple(env_vars)


def _parse_command(value: Any, owner: str) -> Tuple[str, ...]:
    """Parse a command given as a list of arguments or a shell-like string."""
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list) and all(isinstance(arg, str) for arg in value):
        return tuple(value)
    raise ConfigError(f"{owner}: commands must be a string or a list of strings")
