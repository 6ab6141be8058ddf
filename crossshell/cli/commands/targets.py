"""
Targets command implementation.

Lists the target triples crossshell knows.
"""

import logging

from crossshell.core.platform import detect_host
from crossshell.cross.targets import KNOWN_TARGETS

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the targets command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        host_triple = detect_host().triple
    except RuntimeError as e:
        logger.debug(f"Host detection failed: {e}")
        host_triple = None

    width = max(len(triple) for triple in KNOWN_TARGETS)
    print(f"{'TARGET'.ljust(width)}  {'NIX SYSTEM'.ljust(18)}  CMAKE SYSTEM")
    for triple in sorted(KNOWN_TARGETS):
        info = KNOWN_TARGETS[triple]
        marker = "  (host)" if triple == host_triple else ""
        print(
            f"{triple.ljust(width)}  {info.nix_system.ljust(18)}  "
            f"{info.cmake_system_name}/{info.cmake_system_processor}{marker}"
        )
    return 0
