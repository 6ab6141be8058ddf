"""
Unit tests for environment composition.
"""

import dataclasses
import logging

import pytest

from crossshell.core.exceptions import UnsupportedTargetError
from crossshell.cross.targets import TargetDescriptor
from crossshell.environment.composer import (
    DependencyRole,
    DependencySpec,
    EnvironmentDescriptor,
    compose,
)

NATIVE = DependencyRole.NATIVE_BUILD_INPUT
BUILD = DependencyRole.BUILD_INPUT


class TestDependencySpec:
    """Tests for DependencySpec validation."""

    def test_valid_names(self):
        """Test typical nixpkgs attribute names."""
        names = ["gcc", "pkg-config", "alsa-lib", "python3Packages.numpy", "qt5.qtbase"]
        for name in names:
            assert DependencySpec(name, BUILD).name == name

    @pytest.mark.parametrize(
        "name", ["", "1abc", "foo bar", "foo..bar", ".foo", "foo/"]
    )
    def test_invalid_names(self, name):
        """Test that malformed names are rejected."""
        with pytest.raises(ValueError):
            DependencySpec(name, BUILD)

    def test_invalid_role(self):
        """Test that role must be a DependencyRole."""
        with pytest.raises(TypeError):
            DependencySpec("gcc", "native_build_input")

    def test_attribute_root(self):
        """Test top-level attribute extraction."""
        assert DependencySpec("python3Packages.numpy", BUILD).attribute_root == (
            "python3Packages"
        )
        assert DependencySpec("gcc", NATIVE).attribute_root == "gcc"


class TestCompose:
    """Tests for compose()."""

    def test_reference_environment(self, arm64_target):
        """Test gcc + pkg-config natives and alsa-lib build input."""
        env = compose(arm64_target, ["gcc", "pkg-config"], ["alsa-lib"])

        assert env.target == arm64_target
        assert env.native_build_inputs == (
            DependencySpec("gcc", NATIVE),
            DependencySpec("pkg-config", NATIVE),
        )
        assert env.build_inputs == (DependencySpec("alsa-lib", BUILD),)
        assert len(env.dependencies) == 3

    def test_target_round_trips(self, arm64_target):
        """Test that the target field is the input target."""
        env = compose(arm64_target, ["gcc"], [])

        assert env.target is arm64_target
        assert env.target.triple == "aarch64-unknown-linux-gnu"

    def test_order_preserved(self, arm64_target):
        """Test that list order is kept."""
        a = DependencySpec("b-tool", NATIVE)
        b = DependencySpec("a-tool", NATIVE)
        c = DependencySpec("zlib", BUILD)

        env = compose(arm64_target, [a, b], [c])

        assert env.native_build_inputs == (a, b)
        assert env.build_inputs == (c,)

    def test_duplicates_preserved(self, arm64_target):
        """Test that duplicates are not collapsed."""
        env = compose(arm64_target, ["gcc", "gcc"], [])

        assert [d.name for d in env.native_build_inputs] == ["gcc", "gcc"]

    def test_idempotent(self, arm64_target):
        """Test that identical inputs give equal descriptors."""
        first = compose(arm64_target, ["gcc", "pkg-config"], ["alsa-lib"])
        second = compose(arm64_target, ["gcc", "pkg-config"], ["alsa-lib"])

        assert first == second
        assert first is not second

    def test_accepts_triple_string(self):
        """Test that a triple string is parsed."""
        env = compose("aarch64-unknown-linux-gnu", ["gcc"], ["alsa-lib"])

        assert env.target == TargetDescriptor.parse("aarch64-unknown-linux-gnu")

    def test_unknown_triple_string(self):
        """Test that an unknown triple fails instead of defaulting."""
        with pytest.raises(UnsupportedTargetError):
            compose("made-up-arch-vendor-os", ["gcc"], [])

    def test_unknown_descriptor_instance(self):
        """Test that a directly constructed unknown target is rejected."""
        target = TargetDescriptor("made", "os", "abi", "up")

        with pytest.raises(UnsupportedTargetError, match="made-up-os-abi"):
            compose(target, ["gcc"], [])

    def test_custom_supported_set(self):
        """Test that a caller-provided supported set is honored."""
        target = TargetDescriptor("sparc64", "linux", "gnu")

        env = compose(target, ["gcc"], [], supported={"sparc64-unknown-linux-gnu"})

        assert env.target is target
        with pytest.raises(UnsupportedTargetError):
            compose(
                "aarch64-unknown-linux-gnu", ["gcc"], [], supported={target.triple}
            )

    def test_none_target(self):
        """Test that a target is required."""
        with pytest.raises(ValueError, match="Target is required"):
            compose(None, ["gcc"], [])

    def test_empty_lists(self, arm64_target):
        """Test that empty dependency lists are allowed."""
        env = compose(arm64_target)

        assert env.native_build_inputs == ()
        assert env.build_inputs == ()

    def test_empty_natives_warns(self, arm64_target, caplog):
        """Test warning about a missing native toolchain."""
        with caplog.at_level(logging.WARNING):
            compose(arm64_target, [], ["alsa-lib"])

        assert "No native build inputs" in caplog.text

    def test_role_follows_list(self, arm64_target, caplog):
        """Test that a spec listed in the other list takes that list's role."""
        misplaced = DependencySpec("alsa-lib", BUILD)

        with caplog.at_level(logging.WARNING):
            env = compose(arm64_target, ["gcc", misplaced], [])

        assert env.native_build_inputs[1] == DependencySpec("alsa-lib", NATIVE)
        assert "treating it as native_build_input" in caplog.text

    def test_invalid_name_in_list(self, arm64_target):
        """Test that invalid names raise ValueError."""
        with pytest.raises(ValueError):
            compose(arm64_target, ["gcc"], ["not a package"])


class TestEnvironmentDescriptor:
    """Tests for EnvironmentDescriptor."""

    def test_immutable(self, alsa_descriptor):
        """Test that descriptors cannot be mutated."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            alsa_descriptor.build_inputs = ()

    def test_to_dict(self, alsa_descriptor):
        """Test plain dictionary conversion."""
        assert alsa_descriptor.to_dict() == {
            "target": "aarch64-unknown-linux-gnu",
            "native_build_inputs": ["gcc", "pkg-config"],
            "build_inputs": ["alsa-lib"],
        }

    def test_default_lists(self, arm64_target):
        """Test defaults of the dataclass."""
        env = EnvironmentDescriptor(target=arm64_target)

        assert env.dependencies == ()
