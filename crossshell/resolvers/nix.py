"""
Nix delegate resolver for crossshell.

This module renders an environment descriptor as a Nix expression that
imports nixpkgs with a ``crossSystem`` and builds a ``mkShell`` through
``callPackage``, then lets Nix evaluate and realise it.

Classes:
    NixResolver: Resolver implementation driving nix-instantiate and nix-shell

Functions:
    render_expression: Render the Nix expression for a descriptor
    classify_nix_error: Map Nix diagnostics to crossshell exceptions

Example:
    from crossshell.resolvers.nix import NixResolver

    resolver = NixResolver(work_dir=Path('.crossshell'))
    handle = resolver.resolve(descriptor)
    subprocess.run(handle.command)
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from crossshell.core.exceptions import (
    BuildFailureError,
    CrossCompilationUnsupportedError,
    PackageNotFoundError,
    ResolverError,
    ResolverNotFoundError,
    UnsupportedTargetError,
)
from crossshell.cross.targets import KNOWN_TARGETS
from crossshell.environment.composer import EnvironmentDescriptor
from crossshell.resolvers.base import EnvironmentHandle, Resolver

logger = logging.getLogger(__name__)

DEFAULT_NIXPKGS = "<nixpkgs>"

_MISSING_PACKAGE_PATTERNS = [
    re.compile(r"called without required argument ['\"‘]([^'\"’]+)['\"’]"),
    re.compile(r"undefined variable ['\"‘]([^'\"’]+)['\"’]"),
    re.compile(r"attribute ['\"‘]([^'\"’]+)['\"’] missing"),
]
_UNSUPPORTED_PLATFORM_PATTERNS = [
    re.compile(r"is not available on the requested hostPlatform"),
    re.compile(r"is not supported on ['\"‘]"),
    re.compile(r"[Uu]nsupported platform"),
]
_UNSUPPORTED_TARGET_PATTERNS = [
    re.compile(r"Unknown (CPU type|kernel|vendor|ABI)"),
    re.compile(r"components is ambiguous"),
]


def _nix_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")
    return f'"{escaped}"'


def _is_search_path(nixpkgs: str) -> bool:
    return re.match(r"^<[^<>\s]+>$", nixpkgs) is not None


def _is_url(nixpkgs: str) -> bool:
    return nixpkgs.startswith(("http://", "https://"))


def _nixpkgs_source(nixpkgs: str) -> str:
    """
    Render the nixpkgs source for ``import``.

    Args:
        nixpkgs: Search path ('<nixpkgs>'), tarball URL, or filesystem path

    Returns:
        Nix expression evaluating to the nixpkgs source
    """
    if _is_search_path(nixpkgs):
        return nixpkgs
    if _is_url(nixpkgs):
        return f"(builtins.fetchTarball {_nix_string(nixpkgs)})"
    path = Path(nixpkgs).expanduser().resolve()
    return f"(/. + {_nix_string(path.as_posix())})"


def render_expression(
    descriptor: EnvironmentDescriptor, nixpkgs: str = DEFAULT_NIXPKGS
) -> str:
    """
    Render the Nix expression for an environment descriptor.

    Dependencies are requested as ``callPackage`` arguments, so Nix splices
    native build inputs from the build platform package set and build
    inputs from the cross package set.

    Args:
        descriptor: Environment to render
        nixpkgs: nixpkgs source (search path, URL or path)

    Returns:
        Nix expression as a string

    Example:
        >>> print(render_expression(descriptor))
        let
          crossPkgs = import <nixpkgs> {
        ...
    """
    args: List[str] = ["mkShell"]
    for dep in descriptor.dependencies:
        if dep.attribute_root not in args:
            args.append(dep.attribute_root)

    natives = " ".join(dep.name for dep in descriptor.native_build_inputs)
    builds = " ".join(dep.name for dep in descriptor.build_inputs)

    lines = [
        "let",
        f"  crossPkgs = import {_nixpkgs_source(nixpkgs)} {{",
        "    crossSystem = {",
        f"      config = {_nix_string(descriptor.target.triple)};",
        "    };",
        "  };",
        "in",
        "  crossPkgs.callPackage (",
        f"    {{ {', '.join(args)} }}:",
        "    mkShell {",
        f"      nativeBuildInputs = [ {natives + ' ' if natives else ''}];",
        f"      buildInputs = [ {builds + ' ' if builds else ''}];",
        "    }",
        "  ) {}",
    ]
    return "\n".join(lines) + "\n"


def _requested_name(name: str, descriptor: EnvironmentDescriptor) -> str:
    # Nix reports the failing segment only; recover the full attribute path
    for dep in descriptor.dependencies:
        if dep.name == name:
            return name
    for dep in descriptor.dependencies:
        if dep.name.endswith(f".{name}") or dep.attribute_root == name:
            return dep.name
    return name


def classify_nix_error(
    stderr: str, descriptor: EnvironmentDescriptor, message: str
) -> ResolverError:
    """
    Map Nix diagnostics to a crossshell exception.

    The diagnostics are carried verbatim on the returned exception.

    Args:
        stderr: Standard error produced by Nix
        descriptor: Environment being resolved
        message: Summary used when the failure is a build failure

    Returns:
        Exception instance to raise
    """
    for pattern in _MISSING_PACKAGE_PATTERNS:
        match = pattern.search(stderr)
        if match:
            name = _requested_name(match.group(1), descriptor)
            return PackageNotFoundError(name, stderr)

    for pattern in _UNSUPPORTED_TARGET_PATTERNS:
        if pattern.search(stderr):
            return UnsupportedTargetError(descriptor.target.triple, stderr)

    for pattern in _UNSUPPORTED_PLATFORM_PATTERNS:
        if pattern.search(stderr):
            return CrossCompilationUnsupportedError(
                f"Dependencies cannot be built for {descriptor.target.triple}\n{stderr}"
            )

    return BuildFailureError(message, stderr)


class NixResolver(Resolver):
    """
    Resolver backed by Nix.

    Attributes:
        nixpkgs: nixpkgs source used in the rendered expression
        work_dir: Directory where rendered expressions are written
        pure: Whether entered shells are pure (``nix-shell --pure``)
        nix_args: Extra arguments passed to every Nix invocation

    Example:
        resolver = NixResolver(nixpkgs='<nixpkgs>', work_dir=Path('.crossshell'))
        handle = resolver.resolve(descriptor)
    """

    def __init__(
        self,
        nixpkgs: str = DEFAULT_NIXPKGS,
        work_dir: Optional[Path] = None,
        pure: bool = False,
        nix_args: Iterable[str] = (),
    ):
        self.nixpkgs = nixpkgs
        self.work_dir = work_dir if work_dir is not None else Path.cwd() / ".crossshell"
        self.pure = pure
        self.nix_args = list(nix_args)

    def get_name(self) -> str:
        return "nix"

    def supported_targets(self) -> FrozenSet[str]:
        return frozenset(KNOWN_TARGETS)

    def render(self, descriptor: EnvironmentDescriptor) -> str:
        """Render the Nix expression for a descriptor."""
        return render_expression(descriptor, self.nixpkgs)

    def write_expression(self, descriptor: EnvironmentDescriptor) -> Path:
        """
        Write the rendered expression to the work directory.

        Returns:
            Path to the written expression file

        Raises:
            ResolverError: If the file cannot be written
        """
        expression_path = self.work_dir / f"{descriptor.target.triple}.nix"
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            expression_path.write_text(self.render(descriptor), encoding="utf-8")
        except OSError as e:
            raise ResolverError(
                f"Failed to write Nix expression to {expression_path}: {e}"
            ) from e
        logger.debug(f"Wrote Nix expression: {expression_path}")
        return expression_path

    def resolve(self, descriptor: EnvironmentDescriptor) -> EnvironmentHandle:
        """
        Evaluate and realise the environment with Nix.

        Runs ``nix-instantiate`` to evaluate the expression, then
        ``nix-shell --run true`` to build or fetch every dependency.

        Raises:
            ResolverNotFoundError: If Nix is not installed
            UnsupportedTargetError: If the target is not supported
            PackageNotFoundError: If a dependency is not in nixpkgs
            CrossCompilationUnsupportedError: If a dependency cannot target the platform
            BuildFailureError: If a dependency fails to build
        """
        self.check_target(descriptor)
        nix_instantiate = self._find_executable("nix-instantiate")
        nix_shell = self._find_executable("nix-shell")

        expression_path = self.write_expression(descriptor)
        triple = descriptor.target.triple

        logger.info(f"Evaluating environment for {triple}")
        result = self._run(
            [nix_instantiate, str(expression_path), *self.nix_args],
        )
        if result.returncode != 0:
            raise classify_nix_error(
                result.stderr,
                descriptor,
                f"nix-instantiate failed with exit code {result.returncode}",
            )
        output = result.stdout.strip()
        derivation = output.splitlines()[-1] if output else None

        shell_command = [nix_shell, str(expression_path)]
        if self.pure:
            shell_command.append("--pure")
        shell_command.extend(self.nix_args)

        logger.info(f"Realising dependencies for {triple}")
        result = self._run(shell_command + ["--run", "true"])
        if result.returncode != 0:
            raise classify_nix_error(
                result.stderr,
                descriptor,
                f"nix-shell failed with exit code {result.returncode}",
            )

        return EnvironmentHandle(
            descriptor=descriptor,
            resolver=self.get_name(),
            command=tuple(shell_command),
            environment=self._environment(descriptor, expression_path),
            expression_path=expression_path,
            derivation=derivation,
        )

    def _environment(
        self, descriptor: EnvironmentDescriptor, expression_path: Path
    ) -> Dict[str, str]:
        """
        Variables exported into the entered shell.

        A local nixpkgs checkout is also put on NIX_PATH so that Nix
        commands run inside the shell see the same package set.
        """
        environment = {
            "CROSSSHELL_TARGET": descriptor.target.triple,
            "CROSSSHELL_EXPRESSION": str(expression_path),
        }
        if not _is_search_path(self.nixpkgs) and not _is_url(self.nixpkgs):
            local = Path(self.nixpkgs).expanduser().resolve().as_posix()
            environment["NIX_PATH"] = f"nixpkgs={local}"
        return environment

    def _find_executable(self, name: str) -> str:
        path = shutil.which(name)
        if path is None:
            raise ResolverNotFoundError(
                f"'{name}' not found in PATH. Install Nix: https://nixos.org/download"
            )
        return path

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ResolverError(
                f"Failed to execute Nix: {e}\nCommand: {' '.join(cmd)}"
            ) from e
