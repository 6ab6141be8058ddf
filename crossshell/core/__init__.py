"""
Core functionality for crossshell.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CrossShellError,
    ConfigError,
    ResolverError,
    ResolverNotFoundError,
    PackageNotFoundError,
    CrossCompilationUnsupportedError,
    BuildFailureError,
    TargetError,
    UnsupportedTargetError,
)

from .platform import (
    HostPlatform,
    detect_host,
    clear_host_cache,
)

__all__ = [
    "CrossShellError",
    "ConfigError",
    "ResolverError",
    "ResolverNotFoundError",
    "PackageNotFoundError",
    "CrossCompilationUnsupportedError",
    "BuildFailureError",
    "TargetError",
    "UnsupportedTargetError",
    "HostPlatform",
    "detect_host",
    "clear_host_cache",
]
