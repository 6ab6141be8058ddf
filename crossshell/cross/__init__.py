"""
Cross-compilation target support for crossshell.

This module provides the target descriptor, the table of known targets
and CMake toolchain variable generation.
"""

from crossshell.cross.targets import (
    KNOWN_TARGETS,
    TargetDescriptor,
    TargetInfo,
    generate_cmake_snippet,
    generate_cmake_variables,
)

__all__ = [
    "KNOWN_TARGETS",
    "TargetDescriptor",
    "TargetInfo",
    "generate_cmake_snippet",
    "generate_cmake_variables",
]
