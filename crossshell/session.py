"""
One-shot environment sessions.

Ties configuration, target parsing, composition and resolution together:
a session is a single synchronous pass from crossshell.yaml to a ready
environment handle. Resolver errors propagate unchanged; nothing here
retries.

Usage:
    from crossshell.config import parse_config
    from crossshell.session import open_environment

    config = parse_config(Path('crossshell.yaml'))
    handle = open_environment(config, project_root=Path.cwd())
"""

import logging
from pathlib import Path
from typing import Optional

from crossshell.config.parser import ShellConfig
from crossshell.core.platform import detect_host
from crossshell.cross.targets import TargetDescriptor
from crossshell.environment.composer import EnvironmentDescriptor, compose
from crossshell.resolvers.base import EnvironmentHandle, Resolver
from crossshell.resolvers.registry import get_global_registry

logger = logging.getLogger(__name__)

WORK_DIR_NAME = ".crossshell"


def build_descriptor(
    config: ShellConfig, resolver: Optional[Resolver] = None
) -> EnvironmentDescriptor:
    """
    Compose the environment descriptor declared by a configuration.

    Args:
        config: Parsed configuration
        resolver: If given, the target is checked against its supported targets

    Returns:
        EnvironmentDescriptor

    Raises:
        UnsupportedTargetError: If the target is not supported
        ValueError: If a dependency name is invalid
    """
    supported = resolver.supported_targets() if resolver is not None else None
    target = TargetDescriptor.parse(config.target, supported)

    try:
        host = detect_host()
    except RuntimeError as e:
        logger.debug(f"Host detection failed: {e}")
    else:
        if host.triple == target.triple:
            logger.warning(
                f"Target {target.triple} matches the host; "
                "the environment is a native build, not a cross build"
            )

    return compose(
        target, config.native_build_inputs, config.build_inputs, supported
    )


def create_resolver(
    config: ShellConfig,
    project_root: Optional[Path] = None,
    name: Optional[str] = None,
) -> Resolver:
    """
    Instantiate the resolver selected by configuration.

    Args:
        config: Parsed configuration
        project_root: Project root; Nix expressions go to <root>/.crossshell
        name: Resolver name overriding the configured one

    Returns:
        Resolver instance

    Raises:
        ResolverNotFoundError: If the resolver name is not registered
    """
    resolver_name = name or config.resolver.name
    options = {}
    if resolver_name == "nix":
        root = project_root if project_root is not None else Path.cwd()
        options = {
            "nixpkgs": config.resolver.nixpkgs,
            "work_dir": root / WORK_DIR_NAME,
            "pure": config.resolver.pure,
            "nix_args": config.resolver.nix_args,
        }

    logger.debug(f"Using resolver: {resolver_name}")
    return get_global_registry().create(resolver_name, **options)


def open_environment(
    config: ShellConfig,
    resolver: Optional[Resolver] = None,
    project_root: Optional[Path] = None,
) -> EnvironmentHandle:
    """
    Resolve the environment declared by a configuration.

    Args:
        config: Parsed configuration
        resolver: Resolver to use (defaults to the configured one)
        project_root: Project root for resolver working files

    Returns:
        EnvironmentHandle from the resolver

    Raises:
        UnsupportedTargetError, PackageNotFoundError,
        CrossCompilationUnsupportedError, BuildFailureError:
            Propagated from the resolver as-is
    """
    if resolver is None:
        resolver = create_resolver(config, project_root)

    descriptor = build_descriptor(config, resolver)
    logger.info(
        f"Resolving {descriptor.target.triple} environment with {resolver.get_name()}"
    )
    handle = resolver.resolve(descriptor)
    logger.info(f"Environment ready for {descriptor.target.triple}")
    return handle
