"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from crossshell.config.parser import (
    CONFIG_FILENAME,
    ShellConfig,
    default_config,
    parse_config,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def get_config_path(args) -> Path:
    """
    Path of the configuration file selected by the arguments.

    Args:
        args: Parsed arguments with config and project_root

    Returns:
        --config if given, otherwise <project-root>/crossshell.yaml
    """
    if getattr(args, "config", None):
        return Path(args.config).resolve()
    return resolve_project_root(getattr(args, "project_root", None)) / CONFIG_FILENAME


def load_config(args) -> ShellConfig:
    """
    Load the configuration for a command.

    An explicit --config must exist. Without it, crossshell.yaml in the
    project root is used when present, and the default ARM64 Linux
    configuration otherwise.

    Args:
        args: Parsed command-line arguments

    Returns:
        ShellConfig with command-line overrides applied

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    config_file = get_config_path(args)

    if getattr(args, "config", None) or config_file.exists():
        logger.debug(f"Loading configuration from {config_file}")
        config = parse_config(config_file)
    else:
        logger.debug(f"No {CONFIG_FILENAME} found, using default configuration")
        config = default_config()

    return apply_overrides(config, args)


def apply_overrides(config: ShellConfig, args) -> ShellConfig:
    """
    Apply --target, --native and --build overrides.

    Each override given on the command line replaces the corresponding
    configuration value as a whole.

    Args:
        config: Loaded configuration
        args: Parsed command-line arguments

    Returns:
        New ShellConfig
    """
    changes: Dict[str, Any] = {}
    if getattr(args, "target", None):
        changes["target"] = args.target
    if getattr(args, "native", None):
        changes["native_build_inputs"] = list(args.native)
    if getattr(args, "build", None):
        changes["build_inputs"] = list(args.build)

    if changes:
        logger.debug(f"Command-line overrides: {changes}")
        config = dataclasses.replace(config, **changes)
    return config


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_success_message(
    title: str,
    details: Dict[str, Any],
    next_steps: Optional[list] = None,
    width: int = 70,
) -> str:
    """
    Format a standardized success message.

    Args:
        title: Success message title
        details: Key-value pairs to display
        next_steps: Optional list of next step instructions
        width: Width of message box

    Returns:
        Formatted message string
    """
    lines = []
    lines.append("=" * width)
    lines.append(title)
    lines.append("=" * width)
    lines.append("")

    for key, value in details.items():
        lines.append(f"{key}: {value}")

    if next_steps:
        lines.append("")
        lines.append("Next steps:")
        for step in next_steps:
            lines.append(f"  {step}")

    lines.append("")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()
