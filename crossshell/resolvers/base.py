"""
Delegate resolver abstraction for crossshell.

A resolver is the package manager that actually realises an environment:
it resolves dependency names against its catalog, builds or fetches them
for the requested target, and returns a handle that can be entered.
crossshell never retries or rewrites the errors a resolver reports.

Classes:
    EnvironmentHandle: A ready-to-use environment returned by a resolver
    Resolver: Abstract base class for resolver implementations

Exceptions (see crossshell.core.exceptions):
    PackageNotFoundError: A dependency is not in the resolver's catalog
    CrossCompilationUnsupportedError: A dependency cannot target the platform
    BuildFailureError: A dependency could not be built or fetched
    UnsupportedTargetError: The target triple is not recognized
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from crossshell.core.exceptions import ResolverError
from crossshell.environment.composer import EnvironmentDescriptor


@dataclass(frozen=True)
class EnvironmentHandle:
    """
    Ready environment returned by a resolver.

    Attributes:
        descriptor: The environment descriptor that was resolved
        resolver: Name of the resolver that produced the handle
        command: Argument vector that enters the environment
        environment: Extra environment variables to set when entering
        expression_path: File holding the resolver input, if any
        derivation: Resolver-specific identifier of the built environment

    Example:
        handle = resolver.resolve(descriptor)
        subprocess.run(handle.command)
    """

    descriptor: EnvironmentDescriptor
    resolver: str
    command: Tuple[str, ...] = ()
    environment: Dict[str, str] = field(default_factory=dict)
    expression_path: Optional[Path] = None
    derivation: Optional[str] = None

    def run_command(self, command: Optional[str] = None) -> Tuple[str, ...]:
        """
        Argument vector to enter the environment, optionally running a command.

        Args:
            command: Shell command to run inside the environment

        Returns:
            Argument vector for subprocess

        Raises:
            ResolverError: If the resolver produced no way to enter the environment
        """
        if not self.command:
            raise ResolverError(
                f"Resolver '{self.resolver}' does not provide an enterable environment"
            )
        if command is None:
            return self.command
        return self.command + ("--run", command)

    def summary(self) -> Dict[str, object]:
        """Key facts about the handle for display."""
        details: Dict[str, object] = {
            "Resolver": self.resolver,
            "Target": self.descriptor.target.triple,
            "Native build inputs": ", ".join(
                d.name for d in self.descriptor.native_build_inputs
            )
            or "(none)",
            "Build inputs": ", ".join(d.name for d in self.descriptor.build_inputs)
            or "(none)",
        }
        if self.derivation:
            details["Derivation"] = self.derivation
        if self.expression_path:
            details["Expression"] = str(self.expression_path)
        if self.command:
            details["Command"] = " ".join(self.command)
        return details


class Resolver(ABC):
    """
    Abstract base class for delegate resolvers.

    Implementations must provide get_name(), supported_targets() and
    resolve(). They report failures with the exceptions listed in the
    module docstring and must not retry.

    Example:
        class MyResolver(Resolver):
            def get_name(self) -> str:
                return 'mine'

            def supported_targets(self):
                return frozenset({'aarch64-unknown-linux-gnu'})

            def resolve(self, descriptor):
                return EnvironmentHandle(descriptor, 'mine')
    """

    @abstractmethod
    def get_name(self) -> str:
        """
        Get the resolver name.

        Returns:
            Resolver name (e.g., 'nix', 'catalog')
        """
        pass

    @abstractmethod
    def supported_targets(self) -> FrozenSet[str]:
        """
        Target triples this resolver can cross-compile for.

        Returns:
            Frozen set of target triples
        """
        pass

    @abstractmethod
    def resolve(self, descriptor: EnvironmentDescriptor) -> EnvironmentHandle:
        """
        Resolve an environment descriptor into a ready environment.

        Args:
            descriptor: Environment to resolve

        Returns:
            EnvironmentHandle for the resolved environment

        Raises:
            UnsupportedTargetError: If the target is not supported
            PackageNotFoundError: If a dependency is not in the catalog
            CrossCompilationUnsupportedError: If a dependency cannot target the platform
            BuildFailureError: If a dependency fails to build
        """
        pass

    def check_target(self, descriptor: EnvironmentDescriptor) -> None:
        """
        Ensure the descriptor's target is one this resolver supports.

        Raises:
            UnsupportedTargetError: If the target is not supported
        """
        descriptor.target.validate(self.supported_targets())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.get_name()!r})"
