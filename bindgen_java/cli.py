from __future__ import annotations

import argparse
import logging
from typing import Sequence

from rich.console import Console

from .codegen import __version__
from .codegen.cli_integration import create_generate_subparser
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


class CLIHandler:
    """Dispatch parsed command-line arguments to subcommands."""

    def __init__(self) -> None:
        self.console = Console()
        self.parser = build_parser()
        logger.debug("CLIHandler initialized")

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Parse ``argv`` and run the selected subcommand.

        Args:
            argv: Command-line arguments (defaults to ``sys.argv[1:]``).

        Returns:
            Exit code (0 for success, non-zero for failure).
        """
        args = self.parser.parse_args(argv)

        if args.verbosity >= 2:
            setup_logging(logging.DEBUG)
        elif args.verbosity == 1:
            setup_logging(logging.INFO)
        else:
            setup_logging(logging.WARNING)

        handler = getattr(args, "func", None)
        if handler is None:
            self.parser.print_help()
            return 1

        logger.info("Running command: %s", args.command)
        try:
            return handler(args)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Interrupted[/yellow]")
            return 130


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="bindgen-java",
        description="Generate Java bindings for native components",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        dest="verbosity",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(dest="command")
    create_generate_subparser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Console script entry point."""
    return CLIHandler().run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
