"""
Render command implementation.

Prints the Nix expression handed to the resolver, or a CMake toolchain
snippet for the target.
"""

import logging

from crossshell.cli.utils import load_config
from crossshell.cross.targets import generate_cmake_snippet
from crossshell.resolvers.nix import render_expression
from crossshell.session import build_descriptor

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the render command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    descriptor = build_descriptor(config)

    if args.format == "cmake":
        content = generate_cmake_snippet(descriptor.target)
    else:
        content = render_expression(descriptor, config.resolver.nixpkgs)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {args.format} output to {args.output}")
    else:
        print(content, end="")
    return 0
