"""
Resolve command implementation.

Resolves the environment with the delegate resolver and reports the
resulting handle.
"""

import logging

from crossshell.cli.utils import (
    format_success_message,
    load_config,
    print_error,
    resolve_project_root,
)
from crossshell.core.exceptions import ResolverError
from crossshell.session import create_resolver, open_environment

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    config = load_config(args)
    project_root = resolve_project_root(args.project_root)
    resolver = create_resolver(config, project_root, args.resolver)

    try:
        handle = open_environment(config, resolver, project_root)
    except ResolverError as e:
        logger.debug(f"Resolution failed: {type(e).__name__}")
        print_error(f"{type(e).__name__}: {e}")
        return 1

    print(format_success_message("Environment resolved", handle.summary()))
    return 0
