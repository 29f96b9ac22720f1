import sys
from argparse import ArgumentParser, Namespace
from typing import Callable, List, Optional

from .description import description_arguments, description_subparser
from .listing import list_arguments, list_subparser
from .utils import Parser, configure_debug_logging


def _verbosity(parser: ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding details"
    )


def _run(parser: ArgumentParser, argv: Optional[List[str]]) -> int:
    try:
        args = parser.parse_args(argv)
    except Exception as e:  # pylint: disable=broad-except
        sys.stderr.write(f"error: {e}\n")
        return 1

    configure_debug_logging("DEBUG" if args.verbose else "WARNING")
    command: Callable[[Namespace], int] = args.command
    return command(args)


def main(argv: Optional[List[str]] = None) -> int:
    parser = Parser(prog="odcpio")

    def no_command(_args: Namespace) -> int:
        parser.print_help()
        return 1

    parser.set_defaults(command=no_command, verbose=False)
    _verbosity(parser)
    subparsers = parser.add_subparsers(dest="subparser_name")
    description_subparser(subparsers)
    list_subparser(subparsers)
    return _run(parser, argv)


def main_description(argv: Optional[List[str]] = None) -> int:
    parser = Parser(
        prog="odcpio-description",
        description="Extract the 'description' entry from an odc CPIO archive.",
    )
    _verbosity(parser)
    description_arguments(parser)
    return _run(parser, argv)


def main_list(argv: Optional[List[str]] = None) -> int:
    parser = Parser(
        prog="odcpio-list", description="List the entries of an odc CPIO archive."
    )
    _verbosity(parser)
    list_arguments(parser)
    return _run(parser, argv)
