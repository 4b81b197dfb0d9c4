"""
Buildpack CLI argument parser.

This module implements the ``sops-buildpack`` command-line interface
using argparse. The ``bin/`` scripts invoked by the build orchestrator
delegate to it.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sops_buildpack.cli.utils import configure_logging, print_error
from sops_buildpack.core.exceptions import BuildpackError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("sops-buildpack")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """sops buildpack command-line interface."""

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
            prog="sops-buildpack",
            description="Heroku buildpack installing the sops secrets tool",
            epilog='Use "sops-buildpack COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"sops-buildpack {__version__}"
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

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_detect_command(subparsers)
        self._add_compile_command(subparsers)
        self._add_release_command(subparsers)

        return parser

    def _add_detect_command(self, subparsers):
        """Add 'detect' subcommand."""
        parser = subparsers.add_parser(
            "detect",
            help="Report whether the buildpack applies",
            description="Print the buildpack name; sops applies to every app",
        )
        parser.add_argument(
            "build_dir", nargs="?", type=Path, help="Application source directory"
        )

    def _add_compile_command(self, subparsers):
        """Add 'compile' subcommand."""
        parser = subparsers.add_parser(
            "compile",
            help="Install sops into the build output",
            description=(
                "Install sops into BUILD_DIR using CACHE_DIR for downloads and "
                "config vars from ENV_DIR"
            ),
        )
        # Filled verbatim by CLI.parse_args; arity checked by parse_invocation
        parser.add_argument(
            "paths",
            nargs="*",
            metavar="DIR",
            help="BUILD_DIR CACHE_DIR ENV_DIR",
        )

    def _add_release_command(self, subparsers):
        """Add 'release' subcommand."""
        parser = subparsers.add_parser(
            "release",
            help="Print release metadata",
            description="Print the YAML release document for the build",
        )
        parser.add_argument(
            "build_dir", nargs="?", type=Path, help="Application build directory"
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Everything after the ``compile`` command is taken verbatim as its
        paths, so values starting with "-" and surplus arguments reach
        parse_invocation unchanged.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        args = list(sys.argv[1:] if args is None else args)

        command_index = next(
            (i for i, arg in enumerate(args) if not arg.startswith("-")), None
        )
        if command_index is not None and args[command_index] == "compile":
            parsed = self.parser.parse_args(args[: command_index + 1])
            parsed.paths = args[command_index + 1 :]
            return parsed

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

        configure_logging(verbose=parsed_args.verbose, quiet=parsed_args.quiet)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            print_error("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except BuildpackError as e:
            print_error(str(e))
            logger.debug("Buildpack error details", exc_info=True)
            return e.exit_code
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "detect": "sops_buildpack.cli.commands.detect",
            "compile": "sops_buildpack.cli.commands.compile",
            "release": "sops_buildpack.cli.commands.release",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            print_error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
