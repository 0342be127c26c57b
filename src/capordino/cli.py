"""
capordino.cli - Command-line interface.

Main entry point for the capordino CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from capordino import __version__
from capordino.commands import config_cmd, convert, frameworks


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="capordino",
        description="Convert CPRT framework exports to OSCAL catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  capordino convert --export cprt.json --metadata meta.json -o catalog.json
  capordino convert --fetch --framework SP_800_171_3_0_0 -o catalog.json
  capordino convert --export cprt.json --metadata meta.json --format markdown
  capordino frameworks          # List known framework descriptors

Configuration:
  capordino config path         # Show config file location
  capordino config show         # View all settings

For detailed command help: capordino <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"capordino {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a CPRT export to an OSCAL catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  capordino convert --export cprt.json --metadata meta.json
  capordino convert --fetch --framework SP_800_171_3_0_0 -o out/catalog.json

The metadata file may be the full CPRT metadata listing (select a version
with --framework) or a single version entry.
""",
    )
    convert_parser.add_argument(
        "--export",
        type=Path,
        help="CPRT export JSON file",
        metavar="FILE",
    )
    convert_parser.add_argument(
        "--metadata",
        type=Path,
        help="CPRT metadata JSON file",
        metavar="FILE",
    )
    convert_parser.add_argument(
        "--framework",
        help="Framework version identifier (e.g., SP_800_171_3_0_0)",
        metavar="ID",
    )
    convert_parser.add_argument(
        "--fetch",
        action="store_true",
        help="Download export and metadata from the CPRT API",
    )
    convert_parser.add_argument(
        "--format",
        choices=["json", "markdown"],
        default="json",
        help="Output format: OSCAL JSON or a Markdown preview (default: json)",
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file path (default: stdout)",
        metavar="PATH",
    )

    # frameworks command
    frameworks_parser = subparsers.add_parser(
        "frameworks",
        help="List framework descriptors",
    )
    frameworks_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("path", help="Show config file location")
    config_subparsers.add_parser("show", help="Show effective configuration")

    return parser


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Configure root logging from the global flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "convert":
            return convert.run(args)
        elif args.command == "frameworks":
            return frameworks.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
