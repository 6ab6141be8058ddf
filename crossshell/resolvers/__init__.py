"""
Delegate resolvers for crossshell.

Resolvers realise an environment descriptor with an actual package
manager. Nix is the production resolver; the catalog resolver checks
descriptors offline.
"""

from crossshell.resolvers.base import EnvironmentHandle, Resolver
from crossshell.resolvers.catalog import CatalogResolver, DEFAULT_CATALOG
from crossshell.resolvers.nix import (
    NixResolver,
    classify_nix_error,
    render_expression,
)
from crossshell.resolvers.registry import (
    ResolverRegistry,
    get_global_registry,
    reset_global_registry,
)

__all__ = [
    "EnvironmentHandle",
    "Resolver",
    "CatalogResolver",
    "DEFAULT_CATALOG",
    "NixResolver",
    "classify_nix_error",
    "render_expression",
    "ResolverRegistry",
    "get_global_registry",
    "reset_global_registry",
]
