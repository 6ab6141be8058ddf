"""
Resolver registry.

This module provides a central registry mapping resolver names (as used
in crossshell.yaml and on the command line) to resolver classes.
"""

from typing import Dict, List, Type

from crossshell.core.exceptions import ResolverNotFoundError
from crossshell.resolvers.base import Resolver


class ResolverRegistry:
    """
    Registry of resolver classes by name.

    Example:
        registry = ResolverRegistry()
        registry.register('nix', NixResolver)
        resolver = registry.create('nix', pure=True)
    """

    def __init__(self):
        """Initialize empty registry."""
        self._resolvers: Dict[str, Type[Resolver]] = {}

    def register(self, name: str, resolver_cls: Type[Resolver]) -> None:
        """
        Register a resolver class.

        Args:
            name: Resolver name (e.g., 'nix')
            resolver_cls: Resolver subclass

        Raises:
            ValueError: If a resolver with the same name is already registered
        """
        if name in self._resolvers:
            raise ValueError(f"Resolver '{name}' is already registered")
        self._resolvers[name] = resolver_cls

    def unregister(self, name: str) -> None:
        """Remove a resolver; unknown names are ignored."""
        self._resolvers.pop(name, None)

    def get(self, name: str) -> Type[Resolver]:
        """
        Get a resolver class by name.

        Raises:
            ResolverNotFoundError: If no resolver is registered under name
        """
        if name not in self._resolvers:
            raise ResolverNotFoundError(
                f"Resolver '{name}' not found. Available: {', '.join(self.names())}"
            )
        return self._resolvers[name]

    def create(self, name: str, **options) -> Resolver:
        """
        Instantiate a resolver by name.

        Args:
            name: Resolver name
            **options: Keyword arguments for the resolver constructor

        Returns:
            Resolver instance
        """
        return self.get(name)(**options)

    def has(self, name: str) -> bool:
        return name in self._resolvers

    def names(self) -> List[str]:
        return sorted(self._resolvers)


_global_registry = None


def get_global_registry() -> ResolverRegistry:
    """
    Get the global resolver registry singleton.

    The built-in 'nix' and 'catalog' resolvers are registered on first use.

    Returns:
        Global ResolverRegistry instance
    """
    global _global_registry
    if _global_registry is None:
        from crossshell.resolvers.catalog import CatalogResolver
        from crossshell.resolvers.nix import NixResolver

        _global_registry = ResolverRegistry()
        _global_registry.register("nix", NixResolver)
        _global_registry.register("catalog", CatalogResolver)
    return _global_registry


def reset_global_registry() -> None:
    """Reset the global registry (for testing)."""
    global _global_registry
    _global_registry = None


__all__ = ["ResolverRegistry", "get_global_registry", "reset_global_registry"]
