"""
Init command implementation.

Writes a crossshell.yaml describing an ARM64 Linux shell with gcc,
pkg-config and alsa-lib.
"""

import dataclasses
import logging

from crossshell.cli.utils import (
    format_success_message,
    get_config_path,
    print_error,
)
from crossshell.config.parser import default_config, dump_config
from crossshell.cross.targets import TargetDescriptor

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the init command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger.debug(f"Arguments: {args}")

    config_file = get_config_path(args)

    if config_file.exists() and not args.force:
        logger.error("Project already initialized")
        print_error(
            "Project already initialized",
            f"Configuration file exists: {config_file}\n  Use --force to reinitialize",
        )
        return 1

    config = default_config()
    if args.target:
        # Fails with UnsupportedTargetError for unknown triples
        TargetDescriptor.parse(args.target)
        config = dataclasses.replace(config, target=args.target)

    logger.debug(f"Writing configuration to {config_file}")
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(dump_config(config), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write configuration file: {e}")
        print_error("Failed to write configuration file", str(e))
        return 1

    print(
        format_success_message(
            "crossshell initialized",
            {
                "Configuration": config_file,
                "Target": config.target,
                "Native build inputs": ", ".join(config.native_build_inputs),
                "Build inputs": ", ".join(config.build_inputs),
            },
            next_steps=[
                "crossshell compose   # inspect the environment",
                "crossshell shell     # enter the cross shell",
            ],
        )
    )
    return 0
