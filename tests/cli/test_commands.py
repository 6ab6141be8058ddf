"""
Tests for CLI command implementations.
"""

import json
from unittest.mock import Mock, patch

import yaml

from crossshell.cli.parser import CLI
from crossshell.config.parser import default_config, parse_config
from crossshell.core.platform import HostPlatform
from crossshell.cross.targets import KNOWN_TARGETS
from tests.fixtures.expressions import REFERENCE_EXPRESSION


HOST = HostPlatform("linux", "x86_64", "gnu")


def run_cli(tmp_path, *argv):
    return CLI().run(["--project-root", str(tmp_path), *argv])


class TestInitCommand:
    """Tests for 'crossshell init'."""

    def test_writes_default_config(self, tmp_path, capsys):
        """Test that init writes the default configuration."""
        assert run_cli(tmp_path, "init") == 0

        config = parse_config(tmp_path / "crossshell.yaml")
        assert config == default_config()
        assert "crossshell initialized" in capsys.readouterr().out

    def test_refuses_overwrite(self, tmp_path, capsys):
        """Test that an existing file is kept without --force."""
        (tmp_path / "crossshell.yaml").write_text("version: 1\n")

        assert run_cli(tmp_path, "init") == 1
        assert (tmp_path / "crossshell.yaml").read_text() == "version: 1\n"
        assert "already initialized" in capsys.readouterr().err

    def test_force_and_target(self, tmp_path):
        """Test --force with another target."""
        (tmp_path / "crossshell.yaml").write_text("version: 1\n")

        rc = run_cli(tmp_path, "init", "--force", "--target", "x86_64-w64-mingw32")
        assert rc == 0
        assert parse_config(tmp_path / "crossshell.yaml").target == "x86_64-w64-mingw32"

    def test_unknown_target(self, tmp_path):
        """Test that init rejects unknown targets."""
        assert run_cli(tmp_path, "init", "--target", "made-up-arch-vendor-os") == 1
        assert not (tmp_path / "crossshell.yaml").exists()

    def test_explicit_config_path(self, tmp_path):
        """Test init with --config."""
        target = tmp_path / "envs" / "arm.yaml"

        assert CLI().run(["--config", str(target), "init"]) == 0
        assert target.exists()


class TestTargetsCommand:
    """Tests for 'crossshell targets'."""

    def test_lists_known_targets(self, tmp_path, capsys):
        """Test that every known target is listed."""
        assert run_cli(tmp_path, "targets") == 0

        out = capsys.readouterr().out
        for triple in KNOWN_TARGETS:
            assert triple in out
        assert "aarch64-linux" in out


class TestComposeCommand:
    """Tests for 'crossshell compose'."""

    def test_default_yaml(self, tmp_path, capsys):
        """Test composing the default configuration without a config file."""
        assert run_cli(tmp_path, "compose") == 0

        data = yaml.safe_load(capsys.readouterr().out)
        assert data == {
            "target": "aarch64-unknown-linux-gnu",
            "native_build_inputs": ["gcc", "pkg-config"],
            "build_inputs": ["alsa-lib"],
        }

    def test_json_with_overrides(self, tmp_path, capsys):
        """Test command-line overrides and JSON output."""
        code = run_cli(
            tmp_path,
            "compose",
            "--target",
            "riscv64-unknown-linux-gnu",
            "--build",
            "zlib",
            "--build",
            "alsa-lib",
            "--format",
            "json",
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["target"] == "riscv64-unknown-linux-gnu"
        assert data["native_build_inputs"] == ["gcc", "pkg-config"]
        assert data["build_inputs"] == ["zlib", "alsa-lib"]

    def test_reads_project_config(self, tmp_path, capsys):
        """Test that crossshell.yaml in the project root is used."""
        (tmp_path / "crossshell.yaml").write_text(
            "version: 1\ntarget: armv7l-unknown-linux-gnueabihf\n"
            "native_build_inputs: [clang]\n"
        )

        assert run_cli(tmp_path, "compose") == 0

        data = yaml.safe_load(capsys.readouterr().out)
        assert data["target"] == "armv7l-unknown-linux-gnueabihf"
        assert data["native_build_inputs"] == ["clang"]
        assert data["build_inputs"] == []

    def test_unknown_target(self, tmp_path, capsys):
        """Test that unknown targets fail the command."""
        code = run_cli(tmp_path, "compose", "--target", "made-up-arch-vendor-os")

        assert code == 1
        assert "Unsupported target" in capsys.readouterr().err

    def test_missing_explicit_config(self, tmp_path, capsys):
        """Test that an explicit --config must exist."""
        code = CLI().run(["--config", str(tmp_path / "nope.yaml"), "compose"])

        assert code == 1
        assert "not found" in capsys.readouterr().err


class TestRenderCommand:
    """Tests for 'crossshell render'."""

    def test_nix(self, tmp_path, capsys):
        """Test rendering the Nix expression."""
        assert run_cli(tmp_path, "render") == 0
        assert capsys.readouterr().out == REFERENCE_EXPRESSION

    def test_cmake(self, tmp_path, capsys):
        """Test rendering the CMake snippet."""
        assert run_cli(tmp_path, "render", "--format", "cmake") == 0
        assert 'set(CMAKE_SYSTEM_PROCESSOR "aarch64")' in capsys.readouterr().out

    def test_output_file(self, tmp_path):
        """Test writing to a file."""
        output = tmp_path / "out" / "shell.nix"

        assert run_cli(tmp_path, "render", "-o", str(output)) == 0
        assert output.read_text() == REFERENCE_EXPRESSION


class TestResolveCommand:
    """Tests for 'crossshell resolve'."""

    def test_catalog(self, tmp_path, capsys):
        """Test offline resolution."""
        assert run_cli(tmp_path, "resolve", "--resolver", "catalog") == 0

        out = capsys.readouterr().out
        assert "Environment resolved" in out
        assert "Resolver: catalog" in out

    def test_missing_package(self, tmp_path, capsys):
        """Test that missing packages are reported with their name."""
        code = run_cli(
            tmp_path, "resolve", "--resolver", "catalog", "--build", "libnope"
        )

        assert code == 1
        assert "PackageNotFoundError: Package not found: libnope" in (
            capsys.readouterr().err
        )

    @patch("shutil.which", return_value=None)
    def test_nix_missing(self, mock_which, tmp_path, capsys):
        """Test Nix resolver without Nix installed."""
        assert run_cli(tmp_path, "resolve", "--resolver", "nix") == 1
        assert "ResolverNotFoundError" in capsys.readouterr().err


class TestShellCommand:
    """Tests for 'crossshell shell'."""

    @patch("crossshell.session.detect_host", return_value=HOST)
    @patch("shutil.which", side_effect=lambda name: f"/nix/bin/{name}")
    @patch("subprocess.run")
    def test_runs_command_in_shell(self, mock_run, mock_which, mock_host, tmp_path):
        """Test that --run is passed to nix-shell and the exit code propagates."""
        mock_run.side_effect = [
            Mock(returncode=0, stdout="/nix/store/x.drv", stderr=""),
            Mock(returncode=0, stdout="", stderr=""),
            Mock(returncode=7),
        ]

        assert run_cli(tmp_path, "shell", "--run", "make") == 7

        work_dir = tmp_path.resolve() / ".crossshell"
        expression = work_dir / "aarch64-unknown-linux-gnu.nix"
        final_cmd = mock_run.call_args_list[2][0][0]
        assert final_cmd == ["/nix/bin/nix-shell", str(expression), "--run", "make"]
        env = mock_run.call_args_list[2][1]["env"]
        assert env["CROSSSHELL_TARGET"] == "aarch64-unknown-linux-gnu"

    def test_catalog_cannot_enter(self, tmp_path, capsys):
        """Test that catalog-only configurations cannot open a shell."""
        (tmp_path / "crossshell.yaml").write_text(
            "version: 1\ntarget: aarch64-unknown-linux-gnu\nresolver: catalog\n"
            "native_build_inputs: [gcc]\n"
        )

        assert run_cli(tmp_path, "shell") == 1
        assert "does not provide" in capsys.readouterr().err

    @patch("crossshell.session.detect_host", return_value=HOST)
    @patch("subprocess.run")
    def test_resolver_override(self, mock_run, mock_host, tmp_path, capsys):
        """Test that --resolver replaces the configured resolver."""
        (tmp_path / "crossshell.yaml").write_text(
            "version: 1\ntarget: aarch64-unknown-linux-gnu\nresolver: nix\n"
            "native_build_inputs: [gcc]\n"
        )

        assert run_cli(tmp_path, "shell", "--resolver", "catalog") == 1

        mock_run.assert_not_called()
        assert "does not provide" in capsys.readouterr().err
