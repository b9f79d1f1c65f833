"""
SwiftSetup CLI argument parser.

This module implements the command-line interface for SwiftSetup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from swiftsetup import __version__
from swiftsetup.cli.utils import ActionsLogFormatter, running_in_actions
from swiftsetup.core.exceptions import SwiftSetupError

logger = logging.getLogger(__name__)


class CLI:
    """SwiftSetup command-line interface."""

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
            prog="swiftsetup",
            description="SwiftSetup - Install the Swift toolchain on CI runners",
            epilog='Use "swiftsetup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"SwiftSetup {__version__}"
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
            help="Path to configuration file (default: ./swiftsetup.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_versions_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install Swift on this machine",
            description="Resolve, download, verify and install a Swift toolchain",
        )
        parser.add_argument(
            "--swift-version",
            metavar="VERSION",
            help="Swift version to install (e.g., 5.6.1, 5.6, 5, latest)",
        )
        parser.add_argument(
            "--tool-cache",
            type=Path,
            metavar="PATH",
            dest="tool_cache_dir",
            help="Tool cache directory (default: RUNNER_TOOL_CACHE)",
        )
        parser.add_argument(
            "--install-dir",
            type=Path,
            metavar="PATH",
            help="Directory the Ubuntu toolchain is extracted into",
        )
        parser.add_argument(
            "--keyserver",
            metavar="HOST",
            help="Refresh Swift signing keys from this keyserver",
        )
        parser.add_argument(
            "--skip-build-tools",
            action="store_true",
            default=None,
            help="Do not provision Visual Studio build tools (Windows)",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show the package a version resolves to",
            description="Resolve a Swift version to a downloadable package",
        )
        parser.add_argument("swift_version", metavar="VERSION", help="Swift version")
        parser.add_argument(
            "--os", dest="os_name", metavar="NAME", help="Target OS (ubuntu, windows)"
        )
        parser.add_argument(
            "--os-version", metavar="VERSION", help="Target OS version (e.g., 20.04)"
        )
        parser.add_argument(
            "--arch", metavar="ARCH", help="Target architecture (x64, arm64)"
        )

    def _add_versions_command(self, subparsers):
        """Add 'versions' subcommand."""
        parser = subparsers.add_parser(
            "versions",
            help="List known Swift releases",
            description="List Swift releases in the catalogue, newest first",
        )
        parser.add_argument(
            "--platforms",
            action="store_true",
            help="Also list supported OS versions",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """Parse command-line arguments."""
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

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except SwiftSetupError as e:
            logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Under GitHub Actions records are rendered as workflow commands and
        debug output is always emitted (the runner hides it unless step
        debugging is enabled).
        """
        if args.quiet:
            level = logging.ERROR
        elif args.verbose or running_in_actions():
            level = logging.DEBUG
        else:
            level = logging.INFO

        handler = logging.StreamHandler(sys.stdout)
        if running_in_actions():
            handler.setFormatter(ActionsLogFormatter())
        elif args.verbose:
            handler.setFormatter(
                logging.Formatter("%(levelname)s [%(name)s] %(message)s")
            )
        else:
            handler.setFormatter(logging.Formatter("%(message)s"))

        logging.basicConfig(
            level=level,
            handlers=[handler],
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "swiftsetup.cli.commands.install",
            "resolve": "swiftsetup.cli.commands.resolve",
            "versions": "swiftsetup.cli.commands.versions",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
