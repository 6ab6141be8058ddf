"""
Host platform detection for crossshell.

This module detects the machine crossshell runs on and expresses it as a
target triple, so a composed environment can be checked for being a real
cross build (target differs from host) or a native one.

Usage:
    from crossshell.core.platform import detect_host

    host = detect_host()
    print(f"Host triple: {host.triple}")
    print(f"Nix system: {host.nix_system}")
"""

import functools
import platform
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True)
class HostPlatform:
    """
    Host platform information.

    Attributes:
        os: Normalized operating system ('linux', 'darwin', 'windows')
        arch: Machine architecture in triple spelling ('x86_64', 'aarch64', ...)
        libc: C library on Linux ('gnu', 'musl') or empty elsewhere
    """

    os: str
    arch: str
    libc: str = ""

    @property
    def triple(self) -> str:
        """
        Target triple describing the host.

        Example:
            >>> HostPlatform("linux", "x86_64", "gnu").triple
            'x86_64-unknown-linux-gnu'
        """
        if self.os == "darwin":
            return f"{self.arch}-apple-darwin"
        if self.os == "windows":
            return f"{self.arch}-pc-windows-msvc"
        if self.libc:
            return f"{self.arch}-unknown-{self.os}-{self.libc}"
        return f"{self.arch}-unknown-{self.os}"

    @property
    def nix_system(self) -> str:
        """Nix system double (e.g. 'x86_64-linux')."""
        return f"{self.arch}-{self.os}"

    def __str__(self) -> str:
        return self.triple


@functools.lru_cache(maxsize=1)
def detect_host() -> HostPlatform:
    """
    Detect current host platform.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform for the running machine

    Raises:
        RuntimeError: If the operating system is not supported
    """
    os_name = _detect_os()
    arch = _detect_architecture()
    libc = _detect_linux_libc() if os_name == "linux" else ""
    return HostPlatform(os=os_name, arch=arch, libc=libc)


def _detect_os() -> str:
    system = platform.system().lower()

    if system in ("linux", "darwin", "windows"):
        return system
    raise RuntimeError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture using triple spelling.

    Returns:
        Architecture name: 'x86_64', 'aarch64', 'i686', 'armv7l', 'riscv64', ...
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64"):
        return "aarch64"
    elif machine in ("i386", "i686", "x86"):
        return "i686"
    elif machine.startswith("armv7"):
        return "armv7l"
    else:
        # Return original for unknown architectures
        return machine


def _detect_linux_libc() -> str:
    """
    Detect Linux C library.

    Returns:
        'musl' or 'gnu'
    """
    try:
        result = subprocess.run(
            ["ldd", "--version"], capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.SubprocessError):
        return "gnu"

    output = result.stdout.lower() + result.stderr.lower()
    if "musl" in output:
        return "musl"
    return "gnu"


def clear_host_cache():
    """
    Clear the host detection cache.

    This forces the next call to detect_host() to re-detect.
    """
    detect_host.cache_clear()
