"""
Environment composition.

This module turns a target descriptor and two dependency lists (tools that
run on the host and libraries built for the target) into an immutable
environment descriptor, the input handed to a delegate resolver.

Classes:
    DependencyRole: Whether a dependency runs on the host or targets the cross platform
    DependencySpec: A named dependency with its role
    EnvironmentDescriptor: Fully specified environment for a resolver

Functions:
    compose: Build an EnvironmentDescriptor from a target and dependency lists
"""

import dataclasses
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from crossshell.cross.targets import TargetDescriptor

logger = logging.getLogger(__name__)

# A nixpkgs attribute path: identifiers joined by dots (e.g. 'python3Packages.numpy')
_ATTR_SEGMENT = r"[A-Za-z_][A-Za-z0-9_'-]*"
_ATTR_PATH_RE = re.compile(rf"^{_ATTR_SEGMENT}(\.{_ATTR_SEGMENT})*$")


class DependencyRole(Enum):
    """Role of a dependency inside the environment."""

    NATIVE_BUILD_INPUT = "native_build_input"  # runs on the host
    BUILD_INPUT = "build_input"  # linked for the target


@dataclass(frozen=True)
class DependencySpec:
    """
    A named dependency of the environment.

    Attributes:
        name: Package attribute path in the resolver's catalog (e.g., 'alsa-lib')
        role: Whether the package runs on the host or is built for the target
    """

    name: str
    role: DependencyRole

    def __post_init__(self):
        """Validate dependency after initialization."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Dependency name cannot be empty")
        if not _ATTR_PATH_RE.match(self.name):
            raise ValueError(f"Invalid dependency name: {self.name!r}")
        if not isinstance(self.role, DependencyRole):
            raise TypeError(f"role must be DependencyRole, got {type(self.role)}")

    @property
    def attribute_root(self) -> str:
        """Top-level attribute of the name (e.g., 'python3Packages')."""
        return self.name.split(".", 1)[0]


DependencyLike = Union[DependencySpec, str]


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """
    Fully specified cross-compilation environment.

    Created once per invocation and consumed once by a resolver. Both
    dependency sequences keep the order they were given in.

    Attributes:
        target: Cross-compilation target
        native_build_inputs: Dependencies run on the host (compilers, pkg-config)
        build_inputs: Dependencies built for the target (libraries)
    """

    target: TargetDescriptor
    native_build_inputs: Tuple[DependencySpec, ...] = ()
    build_inputs: Tuple[DependencySpec, ...] = ()

    @property
    def dependencies(self) -> Tuple[DependencySpec, ...]:
        """All dependencies, native ones first."""
        return self.native_build_inputs + self.build_inputs

    def to_dict(self) -> dict:
        """
        Convert descriptor to a plain dictionary.

        Returns:
            Dictionary suitable for YAML/JSON serialization
        """
        return {
            "target": self.target.triple,
            "native_build_inputs": [dep.name for dep in self.native_build_inputs],
            "build_inputs": [dep.name for dep in self.build_inputs],
        }


def _coerce(items: Iterable[DependencyLike], role: DependencyRole):
    specs = []
    for item in items:
        if isinstance(item, DependencySpec):
            if item.role is not role:
                logger.warning(
                    f"Dependency '{item.name}' declared as {item.role.value} "
                    f"is listed with {role.value}s; treating it as {role.value}"
                )
                item = dataclasses.replace(item, role=role)
            specs.append(item)
        else:
            specs.append(DependencySpec(item, role))
    return tuple(specs)


def compose(
    target: Union[TargetDescriptor, str],
    natives: Iterable[DependencyLike] = (),
    builds: Iterable[DependencyLike] = (),
    supported: Optional[Iterable[str]] = None,
) -> EnvironmentDescriptor:
    """
    Compose an environment descriptor.

    The position of a dependency decides its role: everything in
    ``natives`` becomes a native build input, everything in ``builds`` a
    build input. Order within each list is preserved.

    Args:
        target: Target descriptor, or a triple string to parse
        natives: Host tools (DependencySpec or package names)
        builds: Target libraries (DependencySpec or package names)
        supported: Supported target triples (defaults to KNOWN_TARGETS)

    Returns:
        EnvironmentDescriptor for the delegate resolver

    Raises:
        ValueError: If target is None or a dependency name is invalid
        UnsupportedTargetError: If the target is not in the supported set

    Example:
        >>> env = compose("aarch64-unknown-linux-gnu", ["gcc", "pkg-config"], [])
        >>> [d.name for d in env.native_build_inputs]
        ['gcc', 'pkg-config']
    """
    if target is None:
        raise ValueError("Target is required")
    if isinstance(target, str):
        target = TargetDescriptor.parse(target, supported)
    elif isinstance(target, TargetDescriptor):
        target.validate(supported)
    else:
        raise TypeError(f"target must be TargetDescriptor, got {type(target)}")

    native_specs = _coerce(natives, DependencyRole.NATIVE_BUILD_INPUT)
    build_specs = _coerce(builds, DependencyRole.BUILD_INPUT)

    if not native_specs:
        logger.warning(
            f"No native build inputs for {target.triple}; "
            "the environment will have no cross toolchain tools"
        )

    logger.debug(
        f"Composed environment for {target.triple}: "
        f"{len(native_specs)} native, {len(build_specs)} build inputs"
    )

    return EnvironmentDescriptor(
        target=target,
        native_build_inputs=native_specs,
        build_inputs=build_specs,
    )
