"""Configuration module for crossshell.

This module provides YAML configuration parsing and validation for crossshell.yaml.
"""

from crossshell.config.parser import (
    CONFIG_FILENAME,
    ConfigError,
    ResolverConfig,
    ShellConfig,
    config_to_dict,
    default_config,
    dump_config,
    parse_config,
    parse_config_data,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ResolverConfig",
    "ShellConfig",
    "config_to_dict",
    "default_config",
    "dump_config",
    "parse_config",
    "parse_config_data",
]
