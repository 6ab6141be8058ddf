"""
crossshell CLI argument parser.

This module implements the command-line interface for crossshell using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from crossshell import __version__

logger = logging.getLogger(__name__)


class CLI:
    """crossshell command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="crossshell",
            description="crossshell - Declarative cross-compilation development shells",
            epilog='Use "crossshell COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"crossshell {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./crossshell.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_init_command(subparsers)
        self._add_targets_command(subparsers)
        self._add_compose_command(subparsers)
        self._add_render_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_shell_command(subparsers)

        return parser

    def _add_environment_overrides(self, parser):
        """Options overriding the environment declared in crossshell.yaml."""
        parser.add_argument(
            "--target",
            metavar="TRIPLE",
            help="Cross-compilation target (e.g., aarch64-unknown-linux-gnu)",
        )
        parser.add_argument(
            "--native",
            action="append",
            metavar="PACKAGE",
            help="Native build input, run on the host (can be used multiple times)",
        )
        parser.add_argument(
            "--build",
            action="append",
            metavar="PACKAGE",
            help="Build input, built for the target (can be used multiple times)",
        )

    def _add_resolver_option(self, parser):
        parser.add_argument(
            "--resolver",
            choices=["nix", "catalog"],
            metavar="NAME",
            help="Resolver to use (nix|catalog) [default: from config]",
        )

    def _add_init_command(self, subparsers):
        """Add 'init' subcommand."""
        parser = subparsers.add_parser(
            "init",
            help="Create crossshell.yaml",
            description="Create a crossshell.yaml for an ARM64 Linux shell",
        )
        parser.add_argument(
            "--target",
            metavar="TRIPLE",
            help="Initial target triple (default: aarch64-unknown-linux-gnu)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing configuration file",
        )

    def _add_targets_command(self, subparsers):
        """Add 'targets' subcommand."""
        subparsers.add_parser(
            "targets",
            help="List known targets",
            description="List the target triples crossshell can cross-compile for",
        )

    def _add_compose_command(self, subparsers):
        """Add 'compose' subcommand."""
        parser = subparsers.add_parser(
            "compose",
            help="Show the composed environment",
            description="Compose the environment descriptor without resolving it",
        )
        self._add_environment_overrides(parser)
        parser.add_argument(
            "--format",
            choices=["yaml", "json"],
            default="yaml",
            metavar="FORMAT",
            help="Output format (yaml|json) [default: yaml]",
        )

    def _add_render_command(self, subparsers):
        """Add 'render' subcommand."""
        parser = subparsers.add_parser(
            "render",
            help="Render resolver input",
            description="Render the Nix expression or a CMake toolchain snippet",
        )
        self._add_environment_overrides(parser)
        parser.add_argument(
            "--format",
            choices=["nix", "cmake"],
            default="nix",
            metavar="FORMAT",
            help="Output format (nix|cmake) [default: nix]",
        )
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            metavar="FILE",
            help="Write to FILE instead of standard output",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve the environment",
            description="Resolve the environment with the delegate resolver",
        )
        self._add_environment_overrides(parser)
        self._add_resolver_option(parser)

    def _add_shell_command(self, subparsers):
        """Add 'shell' subcommand."""
        parser = subparsers.add_parser(
            "shell",
            help="Enter the environment",
            description="Resolve the environment and start a shell inside it",
        )
        self._add_environment_overrides(parser)
        self._add_resolver_option(parser)
        parser.add_argument(
            "--run",
            metavar="CMD",
            help="Run CMD inside the environment instead of an interactive shell",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "init": "crossshell.cli.commands.init",
            "targets": "crossshell.cli.commands.targets",
            "compose": "crossshell.cli.commands.compose",
            "render": "crossshell.cli.commands.render",
            "resolve": "crossshell.cli.commands.resolve",
            "shell": "crossshell.cli.commands.shell",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)

        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
