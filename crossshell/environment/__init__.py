"""
Environment composition for crossshell.
"""

from crossshell.environment.composer import (
    DependencyRole,
    DependencySpec,
    EnvironmentDescriptor,
    compose,
)

__all__ = [
    "DependencyRole",
    "DependencySpec",
    "EnvironmentDescriptor",
    "compose",
]
