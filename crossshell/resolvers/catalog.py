"""
In-memory catalog resolver.

Resolves environment descriptors against a fixed package catalog without
invoking any external tool. Used for offline checks of a configuration and
as a deterministic resolver in tests.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from crossshell.core.exceptions import (
    BuildFailureError,
    CrossCompilationUnsupportedError,
    PackageNotFoundError,
)
from crossshell.cross.targets import KNOWN_TARGETS
from crossshell.environment.composer import EnvironmentDescriptor
from crossshell.resolvers.base import EnvironmentHandle, Resolver

logger = logging.getLogger(__name__)

_LINUX = frozenset({"linux"})

# Package name -> operating systems it can be built for (None = any)
DEFAULT_CATALOG: Dict[str, Optional[FrozenSet[str]]] = {
    "gcc": None,
    "clang": None,
    "pkg-config": None,
    "cmake": None,
    "ninja": None,
    "meson": None,
    "gnumake": None,
    "zlib": None,
    "openssl": None,
    "libusb1": None,
    "alsa-lib": _LINUX,
    "libpulseaudio": _LINUX,
    "pipewire": _LINUX,
    "jack2": None,
}


class CatalogResolver(Resolver):
    """
    Resolver backed by an in-memory package catalog.

    Attributes:
        catalog: Mapping of package name to the set of target operating
            systems it supports (None means any)
        broken: Package names that fail to build
        targets: Supported target triples

    Example:
        resolver = CatalogResolver()
        handle = resolver.resolve(descriptor)
    """

    def __init__(
        self,
        catalog: Optional[Mapping[str, Optional[Iterable[str]]]] = None,
        broken: Iterable[str] = (),
        targets: Optional[Iterable[str]] = None,
    ):
        source = DEFAULT_CATALOG if catalog is None else catalog
        self.catalog: Dict[str, Optional[FrozenSet[str]]] = {
            name: None if platforms is None else frozenset(platforms)
            for name, platforms in source.items()
        }
        self.broken = frozenset(broken)
        self.targets = frozenset(KNOWN_TARGETS if targets is None else targets)

    def get_name(self) -> str:
        return "catalog"

    def supported_targets(self) -> FrozenSet[str]:
        return self.targets

    def resolve(self, descriptor: EnvironmentDescriptor) -> EnvironmentHandle:
        """
        Check every dependency against the catalog.

        Build inputs are checked against the target operating system;
        native build inputs run on the host and are only looked up.

        Raises:
            UnsupportedTargetError: If the target is not supported
            PackageNotFoundError: If a dependency is not in the catalog
            CrossCompilationUnsupportedError: If a build input excludes the target OS
            BuildFailureError: If a dependency is marked broken
        """
        self.check_target(descriptor)
        target = descriptor.target

        for dep in descriptor.native_build_inputs:
            self._lookup(dep.name)

        for dep in descriptor.build_inputs:
            platforms = self._lookup(dep.name)
            if platforms is not None and target.os not in platforms:
                raise CrossCompilationUnsupportedError(
                    f"Package '{dep.name}' is not available for {target.triple} "
                    f"(supported: {', '.join(sorted(platforms))})"
                )

        for dep in descriptor.dependencies:
            if dep.name in self.broken:
                raise BuildFailureError(
                    f"Failed to build '{dep.name}' for {target.triple}",
                    f"error: package '{dep.name}' is marked as broken",
                )

        logger.debug(
            f"Catalog resolved {len(descriptor.dependencies)} dependencies "
            f"for {target.triple}"
        )
        return EnvironmentHandle(descriptor=descriptor, resolver=self.get_name())

    def _lookup(self, name: str) -> Optional[FrozenSet[str]]:
        if name not in self.catalog:
            raise PackageNotFoundError(name)
        return self.catalog[name]
