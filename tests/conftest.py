"""
Pytest configuration and shared fixtures for crossshell tests.
"""

import pytest
from pathlib import Path

from crossshell.cross.targets import TargetDescriptor
from crossshell.environment.composer import compose


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require a working Nix installation",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def arm64_target() -> TargetDescriptor:
    """The ARM64 Linux target."""
    return TargetDescriptor.parse("aarch64-unknown-linux-gnu")


@pytest.fixture
def alsa_descriptor(arm64_target):
    """ARM64 environment with gcc, pkg-config and alsa-lib."""
    return compose(arm64_target, ["gcc", "pkg-config"], ["alsa-lib"])


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    """Create sample crossshell.yaml configuration."""
    config_file = tmp_path / "crossshell.yaml"
    config_file.write_text(
        """version: 1
target: aarch64-unknown-linux-gnu
native_build_inputs:
  - gcc
  - pkg-config
build_inputs:
  - alsa-lib
resolver:
  name: catalog
"""
    )
    return config_file


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches and registries between tests."""
    from crossshell.core import platform
    from crossshell.resolvers.registry import reset_global_registry

    platform.clear_host_cache()
    reset_global_registry()

    yield

    reset_global_registry()
