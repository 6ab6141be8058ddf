"""YAML configuration parser for crossshell.

This module provides parsing and validation for crossshell.yaml files,
which declare the cross-compilation target, the host tools and the target
libraries of a development shell.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from crossshell.core.exceptions import ConfigError

CONFIG_FILENAME = "crossshell.yaml"

VALID_RESOLVERS = ["nix", "catalog"]


@dataclass
class ResolverConfig:
    """Delegate resolver configuration."""

    name: str = "nix"  # 'nix', 'catalog'
    nixpkgs: str = "<nixpkgs>"  # search path, tarball URL or local path
    pure: bool = False
    nix_args: List[str] = field(default_factory=list)


@dataclass
class ShellConfig:
    """Complete crossshell configuration."""

    version: int
    target: str
    native_build_inputs: List[str] = field(default_factory=list)
    build_inputs: List[str] = field(default_factory=list)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)


def default_config() -> ShellConfig:
    """
    Configuration for an ARM64 Linux shell with gcc, pkg-config and alsa-lib.

    Returns:
        Default ShellConfig written by ``crossshell init``
    """
    return ShellConfig(
        version=1,
        target="aarch64-unknown-linux-gnu",
        native_build_inputs=["gcc", "pkg-config"],
        build_inputs=["alsa-lib"],
    )


def parse_config(config_path: Path) -> ShellConfig:
    """
    Parse crossshell.yaml configuration file.

    Args:
        config_path: Path to crossshell.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    return parse_config_data(data)


def parse_config_data(data: Any) -> ShellConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    # Check version
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    if "target" not in data or not data["target"]:
        raise ConfigError("Missing required field: target")

    if not isinstance(data["target"], str):
        raise ConfigError("target must be a string (e.g., aarch64-unknown-linux-gnu)")

    return ShellConfig(
        version=data["version"],
        target=data["target"],
        native_build_inputs=_parse_name_list(data, "native_build_inputs"),
        build_inputs=_parse_name_list(data, "build_inputs"),
        resolver=_parse_resolver_config(data.get("resolver")),
    )


def _parse_name_list(data: dict, key: str) -> List[str]:
    """Parse a list of package names."""
    names = data.get(key)
    if names is None:
        return []

    if not isinstance(names, list):
        raise ConfigError(f"{key} must be a list of package names")

    for name in names:
        if not isinstance(name, str) or not name:
            raise ConfigError(f"{key} contains an invalid package name: {name!r}")

    return list(names)


def _parse_resolver_config(data: Any) -> ResolverConfig:
    """Parse resolver configuration."""
    if data is None:
        return ResolverConfig()

    # Shorthand: `resolver: nix`
    if isinstance(data, str):
        data = {"name": data}

    if not isinstance(data, dict):
        raise ConfigError("resolver must be a name or a mapping")

    name = data.get("name", "nix")
    if name not in VALID_RESOLVERS:
        raise ConfigError(
            f"Invalid resolver: {name} (expected one of {VALID_RESOLVERS})"
        )

    nix_args = data.get("nix_args", [])
    if not isinstance(nix_args, list) or not all(
        isinstance(arg, str) for arg in nix_args
    ):
        raise ConfigError("resolver.nix_args must be a list of strings")

    nixpkgs = data.get("nixpkgs", "<nixpkgs>")
    if not isinstance(nixpkgs, str) or not nixpkgs:
        raise ConfigError("resolver.nixpkgs must be a non-empty string")

    return ResolverConfig(
        name=name,
        nixpkgs=nixpkgs,
        pure=bool(data.get("pure", False)),
        nix_args=nix_args,
    )


def config_to_dict(config: ShellConfig) -> Dict[str, Any]:
    """Convert configuration to a plain dictionary."""
    return {
        "version": config.version,
        "target": config.target,
        "native_build_inputs": list(config.native_build_inputs),
        "build_inputs": list(config.build_inputs),
        "resolver": {
            "name": config.resolver.name,
            "nixpkgs": config.resolver.nixpkgs,
            "pure": config.resolver.pure,
            "nix_args": list(config.resolver.nix_args),
        },
    }


def dump_config(config: ShellConfig) -> str:
    """
    Serialize configuration as YAML.

    Args:
        config: Configuration to serialize

    Returns:
        YAML document that parse_config() reads back
    """
    return yaml.safe_dump(config_to_dict(config), sort_keys=False)
