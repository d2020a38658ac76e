"""
graphql-headerkit CLI Entry Point

1. Initializes logging from the environment configuration.
2. Parses the management command.
3. Dispatches to the command handler and exits with its status.
"""

import argparse
import sys

from graphql_headerkit import __version__
from graphql_headerkit.cli.cli_tools import setup_cli_parser
from graphql_headerkit.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphql-headerkit",
        description="graphql-headerkit - GraphQL resource-name extraction",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Register all subcommands
    setup_cli_parser(subparsers)
    return parser


def main(argv=None):
    """
    Orchestrates the command dispatch.
    """
    logger = setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except Exception as e:
        logger.error(f"❌ Command '{args.command}' failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
