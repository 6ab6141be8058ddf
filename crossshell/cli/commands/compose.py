"""
Compose command implementation.

Prints the environment descriptor declared by crossshell.yaml and the
command-line overrides, without resolving it.
"""

import json
import logging

import yaml

from crossshell.cli.utils import load_config
from crossshell.session import build_descriptor

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the compose command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    descriptor = build_descriptor(config)
    data = descriptor.to_dict()

    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, sort_keys=False), end="")
    return 0
