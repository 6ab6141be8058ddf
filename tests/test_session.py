"""
Tests for one-shot environment sessions.
"""

import dataclasses
import logging
from unittest.mock import Mock, patch

import pytest

from crossshell.config.parser import ResolverConfig, default_config
from crossshell.core.exceptions import (
    BuildFailureError,
    PackageNotFoundError,
    UnsupportedTargetError,
)
from crossshell.core.platform import HostPlatform
from crossshell.environment.composer import DependencyRole
from crossshell.resolvers.catalog import CatalogResolver
from crossshell.resolvers.nix import NixResolver
from crossshell.session import build_descriptor, create_resolver, open_environment


class TestBuildDescriptor:
    """Tests for build_descriptor."""

    def test_default_config(self):
        """Test descriptor for the default configuration."""
        descriptor = build_descriptor(default_config())

        assert descriptor.target.triple == "aarch64-unknown-linux-gnu"
        assert [d.name for d in descriptor.native_build_inputs] == ["gcc", "pkg-config"]
        assert [d.name for d in descriptor.build_inputs] == ["alsa-lib"]
        assert all(
            d.role is DependencyRole.NATIVE_BUILD_INPUT
            for d in descriptor.native_build_inputs
        )

    def test_unknown_target(self):
        """Test that unknown targets fail."""
        config = dataclasses.replace(default_config(), target="made-up-arch-vendor-os")

        with pytest.raises(UnsupportedTargetError):
            build_descriptor(config)

    def test_resolver_target_set(self):
        """Test that the resolver's supported targets are used."""
        resolver = CatalogResolver(targets=["x86_64-unknown-linux-gnu"])

        with pytest.raises(UnsupportedTargetError):
            build_descriptor(default_config(), resolver)

    @patch("crossshell.session.detect_host")
    def test_native_build_warning(self, mock_detect, caplog):
        """Test warning when target equals host."""
        mock_detect.return_value = HostPlatform("linux", "aarch64", "gnu")

        with caplog.at_level(logging.WARNING):
            build_descriptor(default_config())

        assert "matches the host" in caplog.text


class TestCreateResolver:
    """Tests for create_resolver."""

    def test_nix_resolver_options(self, tmp_path):
        """Test that Nix options come from the configuration."""
        config = dataclasses.replace(
            default_config(),
            resolver=ResolverConfig(
                name="nix", nixpkgs="<unstable>", pure=True, nix_args=["-j4"]
            ),
        )

        resolver = create_resolver(config, tmp_path)

        assert isinstance(resolver, NixResolver)
        assert resolver.nixpkgs == "<unstable>"
        assert resolver.work_dir == tmp_path / ".crossshell"
        assert resolver.pure is True
        assert resolver.nix_args == ["-j4"]

    def test_name_override(self, tmp_path):
        """Test overriding the configured resolver."""
        resolver = create_resolver(default_config(), tmp_path, "catalog")

        assert isinstance(resolver, CatalogResolver)


class TestOpenEnvironment:
    """Tests for open_environment."""

    def test_catalog_resolution(self):
        """Test resolving the default configuration offline."""
        handle = open_environment(default_config(), CatalogResolver())

        assert handle.descriptor.target.triple == "aarch64-unknown-linux-gnu"
        assert handle.resolver == "catalog"

    def test_errors_surface_verbatim(self):
        """Test that resolver errors are not wrapped or retried."""
        error = BuildFailureError("nix-shell failed", "error: verbatim output")
        resolver = Mock(spec=CatalogResolver)
        resolver.get_name.return_value = "mock"
        resolver.supported_targets.return_value = frozenset(
            {"aarch64-unknown-linux-gnu"}
        )
        resolver.resolve.side_effect = error

        with pytest.raises(BuildFailureError) as exc_info:
            open_environment(default_config(), resolver)

        assert exc_info.value is error
        assert resolver.resolve.call_count == 1

    def test_missing_package(self):
        """Test missing packages from configuration."""
        config = dataclasses.replace(default_config(), build_inputs=["libnope"])

        with pytest.raises(PackageNotFoundError, match="libnope"):
            open_environment(config, CatalogResolver())

    def test_configured_resolver_used(self, tmp_path):
        """Test that the configured resolver is created when none is given."""
        config = dataclasses.replace(
            default_config(), resolver=ResolverConfig(name="catalog")
        )

        handle = open_environment(config, project_root=tmp_path)

        assert handle.resolver == "catalog"
