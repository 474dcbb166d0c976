"""
ForgeKit CLI argument parser.

This module implements the command-line interface for ForgeKit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("forgekit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """ForgeKit command-line interface."""

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
            prog="forgekit",
            description="ForgeKit - Declarative build and install of external tools",
            epilog='Use "forgekit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"ForgeKit {__version__}"
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
            default=Path("forgekit.yaml"),
            help="Path to configuration file (default: ./forgekit.yaml)",
        )
        parser.add_argument(
            "--workdir",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Directory for downloads and source trees (default: cwd)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_check_command(subparsers)
        self._add_install_command(subparsers)

        return parser

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        parser = subparsers.add_parser(
            "check",
            help="Report which targets are installed",
            description="Probe installed target versions without changing anything",
        )
        parser.add_argument(
            "targets",
            nargs="*",
            metavar="TARGET",
            help="Targets to check (default: all configured targets)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download, build and install missing targets",
            description="Ensure every target is installed at its required version",
        )
        parser.add_argument(
            "targets",
            nargs="*",
            metavar="TARGET",
            help="Targets to install (default: all configured targets)",
        )
        parser.add_argument(
            "--keep-going",
            "-k",
            action="store_true",
            help="Continue with remaining targets after a failure",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Rebuild targets even if the required version is present",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
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

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

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
        from forgekit.cli.commands import check, install

        command_map = {
            "check": check.run,
            "install": install.run,
        }

        handler = command_map.get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
