"""
Centralized exception hierarchy for crossshell.

This module defines all custom exceptions used across the codebase
so that callers can tell configuration problems apart from failures
reported by the package manager that resolves an environment.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class CrossShellError(Exception):
    """Base exception for all crossshell errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(CrossShellError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Resolver Exceptions
# ============================================================================


class ResolverError(CrossShellError):
    """Base exception for errors reported by a delegate resolver."""

    pass


class ResolverNotFoundError(ResolverError):
    """Resolver is not registered or its executable is not installed."""

    pass


class PackageNotFoundError(ResolverError):
    """Raised when a dependency does not exist in the resolver's catalog."""

    def __init__(self, package_name: str, details: str = ""):
        self.package_name = package_name
        self.details = details
        msg = f"Package not found: {package_name}"
        if details:
            msg += f"\n{details}"
        super().__init__(msg)


class CrossCompilationUnsupportedError(ResolverError):
    """Raised when a dependency cannot be built for the requested target."""

    pass


class BuildFailureError(ResolverError):
    """Raised when a dependency could not be built or fetched."""

    def __init__(self, message: str, diagnostics: str = ""):
        self.diagnostics = diagnostics
        if diagnostics:
            message = f"{message}\n{diagnostics}"
        super().__init__(message)


# ============================================================================
# Target Exceptions
# ============================================================================


class TargetError(CrossShellError):
    """Base exception for cross-compilation target errors."""

    pass


class UnsupportedTargetError(TargetError, ResolverError):
    """Raised when a target triple is not recognized."""

    def __init__(self, target: str, details: str = ""):
        self.target = target
        self.details = details
        msg = f"Unsupported target: {target}"
        if details:
            msg += f"\n{details}"
        super().__init__(msg)
