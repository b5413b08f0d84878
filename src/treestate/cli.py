"""
treestate.cli - Command-line interface.

Main entry point for the treestate CLI tool.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from treestate import __version__
from treestate.commands import selected, show
from treestate.config import get_config


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="treestate",
        description="Inspect hierarchical node data and its UI state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  treestate show nodes.json                    # Print the top level
  treestate show nodes.json --expand-all       # Print every node
  treestate show nodes.json --select n1        # Mark n1 as selected
  cat nodes.json | treestate show -            # Read from stdin
  treestate selected nodes.json --select n1    # Export n1 with its ancestors

Input is a JSON array of nodes. Each node may carry an "id", a
"children" array, a partial "state" object and any other fields.

Configuration:
  .treestate.toml is looked up from the working directory upwards.
  TREESTATE_<SECTION>_<KEY> environment variables override it.
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"treestate {__version__}",
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
        help="Verbose output (debug logging, full tracebacks)",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Print the tree as indented text",
    )
    show_parser.add_argument("file", help="JSON file with nodes, or - for stdin")
    show_parser.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every node",
    )
    show_parser.add_argument(
        "--expand",
        action="append",
        help="Expand a node (can be repeated)",
        metavar="ID",
    )
    show_parser.add_argument(
        "--hide",
        action="append",
        help="Hide a node (can be repeated)",
        metavar="ID",
    )
    show_parser.add_argument(
        "--select",
        help="Select a node",
        metavar="ID",
    )
    show_parser.add_argument(
        "--show-hidden",
        action="store_true",
        help="Include hidden nodes",
    )

    # selected command
    selected_parser = subparsers.add_parser(
        "selected",
        help="Export the selected subset as JSON",
    )
    selected_parser.add_argument("file", help="JSON file with nodes, or - for stdin")
    selected_parser.add_argument(
        "--select",
        required=True,
        help="Node to select",
        metavar="ID",
    )
    selected_parser.add_argument(
        "--flat",
        action="store_true",
        help="Export only the selected nodes, without ancestors or children",
    )
    selected_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def configure_logging(verbose: bool, level: str) -> None:
    """Configure the root logger for CLI use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install treestate[completion]
    # Then activate: eval "$(register-python-argcomplete treestate)"
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.resolved_config = get_config(args.config)
        configure_logging(args.verbose, str(args.resolved_config["logging"].get("level", "WARNING")))

        # Dispatch to command handlers
        if args.command == "show":
            return show.run(args)
        elif args.command == "selected":
            return selected.run(args)
        elif args.command == "version":
            print(f"treestate {__version__}")
            return 0
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
