"""
Shell command implementation.

Resolves the environment and starts a shell inside it, or runs a single
command there with --run.
"""

import logging
import os
import subprocess

from crossshell.cli.utils import load_config, print_error, resolve_project_root
from crossshell.core.exceptions import ResolverError
from crossshell.session import create_resolver, open_environment

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the shell command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code of the shell or command, 1 if resolution fails
    """
    config = load_config(args)
    project_root = resolve_project_root(args.project_root)
    resolver = create_resolver(config, project_root, args.resolver)

    try:
        handle = open_environment(config, resolver, project_root)
        command = handle.run_command(args.run)
    except ResolverError as e:
        logger.debug(f"Resolution failed: {type(e).__name__}")
        print_error(f"{type(e).__name__}: {e}")
        return 1

    env = dict(os.environ)
    env.update(handle.environment)

    logger.info(f"Entering {handle.descriptor.target.triple} environment")
    logger.debug(f"Running: {' '.join(command)}")
    result = subprocess.run(list(command), cwd=project_root, env=env)
    return result.returncode
