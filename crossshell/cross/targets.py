"""
Cross-compilation target descriptors.

This module provides the immutable description of a cross-compilation
target (architecture, vendor, operating system and ABI), the table of
targets crossshell knows how to hand to Nix, and helpers that turn a
target into CMake cross-compilation variables.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from crossshell.core.exceptions import UnsupportedTargetError


@dataclass(frozen=True)
class TargetInfo:
    """
    Static metadata for a known target triple.

    Attributes:
        nix_system: Nix system double (e.g., 'aarch64-linux')
        cmake_system_name: Value for CMAKE_SYSTEM_NAME (e.g., 'Linux')
        cmake_system_processor: Value for CMAKE_SYSTEM_PROCESSOR (e.g., 'aarch64')
    """

    nix_system: str
    cmake_system_name: str
    cmake_system_processor: str


# Mirrors the cross targets of nixpkgs lib.systems.examples.
KNOWN_TARGETS: Dict[str, TargetInfo] = {
    "aarch64-unknown-linux-gnu": TargetInfo("aarch64-linux", "Linux", "aarch64"),
    "aarch64-unknown-linux-musl": TargetInfo("aarch64-linux", "Linux", "aarch64"),
    "aarch64-unknown-linux-android": TargetInfo(
        "aarch64-linux", "Android", "aarch64"
    ),
    "armv6l-unknown-linux-gnueabihf": TargetInfo("armv6l-linux", "Linux", "armv6l"),
    "armv7l-unknown-linux-gnueabihf": TargetInfo("armv7l-linux", "Linux", "armv7l"),
    "i686-unknown-linux-gnu": TargetInfo("i686-linux", "Linux", "i686"),
    "x86_64-unknown-linux-gnu": TargetInfo("x86_64-linux", "Linux", "x86_64"),
    "x86_64-unknown-linux-musl": TargetInfo("x86_64-linux", "Linux", "x86_64"),
    "riscv64-unknown-linux-gnu": TargetInfo("riscv64-linux", "Linux", "riscv64"),
    "powerpc64le-unknown-linux-gnu": TargetInfo(
        "powerpc64le-linux", "Linux", "ppc64le"
    ),
    "aarch64-apple-darwin": TargetInfo("aarch64-darwin", "Darwin", "arm64"),
    "x86_64-apple-darwin": TargetInfo("x86_64-darwin", "Darwin", "x86_64"),
    "x86_64-w64-mingw32": TargetInfo("x86_64-windows", "Windows", "AMD64"),
    "wasm32-unknown-wasi": TargetInfo("wasm32-wasi", "WASI", "wasm32"),
}


@dataclass(frozen=True)
class TargetDescriptor:
    """
    Cross-compilation target specification.

    A pure value object identifying the platform binaries are produced for.
    Use :meth:`parse` or :meth:`from_fields` to build one that is checked
    against a set of supported targets.

    Attributes:
        architecture: Target CPU architecture (e.g., 'aarch64', 'armv7l')
        os: Target operating system (e.g., 'linux', 'darwin')
        abi: Target ABI (e.g., 'gnu', 'musl', 'gnueabihf'), empty if the
            triple has only three components
        vendor: Target vendor (e.g., 'unknown', 'apple', 'w64')

    Example:
        >>> target = TargetDescriptor.parse("aarch64-unknown-linux-gnu")
        >>> target.architecture, target.os, target.abi
        ('aarch64', 'linux', 'gnu')
    """

    architecture: str
    os: str
    abi: str = ""
    vendor: str = "unknown"

    def __post_init__(self):
        """Validate descriptor fields after initialization."""
        for field_name in ("architecture", "os", "vendor"):
            value = getattr(self, field_name)
            if not value or "-" in value:
                raise UnsupportedTargetError(
                    self._join(), f"Invalid {field_name}: {value!r}"
                )
        if "-" in self.abi:
            raise UnsupportedTargetError(self._join(), f"Invalid abi: {self.abi!r}")

    def _join(self) -> str:
        parts = [self.architecture, self.vendor, self.os]
        if self.abi:
            parts.append(self.abi)
        return "-".join(parts)

    @property
    def triple(self) -> str:
        """Target triple string (architecture-vendor-os[-abi])."""
        return self._join()

    @property
    def toolchain_prefix(self) -> str:
        """
        Prefix of the cross compiler binaries.

        For example 'aarch64-unknown-linux-gnu-', as in
        'aarch64-unknown-linux-gnu-gcc'.
        """
        return f"{self.triple}-"

    @property
    def info(self) -> Optional[TargetInfo]:
        """Metadata from :data:`KNOWN_TARGETS`, or None for unlisted targets."""
        return KNOWN_TARGETS.get(self.triple)

    def validate(self, supported: Optional[Iterable[str]] = None) -> "TargetDescriptor":
        """
        Check the target against a set of supported triples.

        Args:
            supported: Supported target triples (defaults to KNOWN_TARGETS)

        Returns:
            This descriptor, for chaining

        Raises:
            UnsupportedTargetError: If the triple is not supported
        """
        supported_set = set(KNOWN_TARGETS if supported is None else supported)
        if self.triple not in supported_set:
            raise UnsupportedTargetError(
                self.triple,
                f"Supported targets: {', '.join(sorted(supported_set))}",
            )
        return self

    @classmethod
    def parse(
        cls, triple: str, supported: Optional[Iterable[str]] = None
    ) -> "TargetDescriptor":
        """
        Build a descriptor from a target triple string.

        Args:
            triple: Triple such as 'aarch64-unknown-linux-gnu' or 'x86_64-w64-mingw32'
            supported: Supported target triples (defaults to KNOWN_TARGETS)

        Returns:
            Validated TargetDescriptor whose ``triple`` equals the input

        Raises:
            UnsupportedTargetError: If the triple is malformed or not supported

        Example:
            >>> TargetDescriptor.parse("aarch64-unknown-linux-gnu").triple
            'aarch64-unknown-linux-gnu'
        """
        if not isinstance(triple, str) or not triple:
            raise UnsupportedTargetError(
                str(triple), "Target triple must be a non-empty string"
            )

        parts = triple.split("-")
        if len(parts) == 3:
            architecture, vendor, os_name = parts
            abi = ""
        elif len(parts) == 4:
            architecture, vendor, os_name, abi = parts
            if not abi:
                raise UnsupportedTargetError(triple, "Empty ABI component")
        else:
            raise UnsupportedTargetError(
                triple,
                "Expected 'architecture-vendor-os' or 'architecture-vendor-os-abi'",
            )

        target = cls(architecture=architecture, os=os_name, abi=abi, vendor=vendor)
        return target.validate(supported)

    @classmethod
    def from_fields(
        cls,
        architecture: str,
        os: str,
        abi: str = "",
        vendor: str = "unknown",
        supported: Optional[Iterable[str]] = None,
    ) -> "TargetDescriptor":
        """
        Build a descriptor from its component fields.

        Raises:
            UnsupportedTargetError: If the combination is not supported
        """
        target = cls(architecture=architecture, os=os, abi=abi, vendor=vendor)
        return target.validate(supported)

    def __str__(self) -> str:
        return self.triple


def generate_cmake_variables(target: TargetDescriptor) -> dict:
    """
    Generate CMake variables for cross-compilation.

    The compilers and pkg-config are referred to by their prefixed names,
    which is how Nix exposes them inside a cross shell.

    Args:
        target: Cross-compilation target

    Returns:
        Dictionary of CMake variable names to values

    Example:
        >>> target = TargetDescriptor.parse("aarch64-unknown-linux-gnu")
        >>> generate_cmake_variables(target)["CMAKE_SYSTEM_NAME"]
        'Linux'
    """
    info = target.info
    if info is not None:
        system_name = info.cmake_system_name
        processor = info.cmake_system_processor
    else:
        system_name = target.os.capitalize()
        processor = target.architecture

    prefix = target.toolchain_prefix
    return {
        "CMAKE_SYSTEM_NAME": system_name,
        "CMAKE_SYSTEM_PROCESSOR": processor,
        "CMAKE_C_COMPILER": f"{prefix}gcc",
        "CMAKE_CXX_COMPILER": f"{prefix}g++",
        "PKG_CONFIG_EXECUTABLE": f"{prefix}pkg-config",
        "CMAKE_FIND_ROOT_PATH_MODE_PROGRAM": "NEVER",
        "CMAKE_FIND_ROOT_PATH_MODE_LIBRARY": "ONLY",
        "CMAKE_FIND_ROOT_PATH_MODE_INCLUDE": "ONLY",
    }


def generate_cmake_snippet(target: TargetDescriptor) -> str:
    """
    Generate a CMake toolchain snippet for the target.

    Example:
        >>> target = TargetDescriptor.parse("aarch64-unknown-linux-gnu")
        >>> print(generate_cmake_snippet(target).splitlines()[0])
        # Cross-compilation for aarch64-unknown-linux-gnu
    """
    lines = [f"# Cross-compilation for {target.triple}", ""]

    for key, value in generate_cmake_variables(target).items():
        lines.append(f'set({key} "{value}")')

    return "\n".join(lines) + "\n"
