"""Extract the 'description' entry from an odc CPIO archive.

Unlike listing, extraction is strict: a partially indexed archive is an error.
"""
import logging
import sys
from argparse import ArgumentParser, Namespace, _SubParsersAction
from pathlib import Path
from typing import Optional

from ..errors import OdcpioError
from ..parse.archive import open_archive
from .utils import output_or_stdout, path_exists

LOG = logging.getLogger(__name__)


def description_from_cpio(input_cpio: Path) -> bytes:
    with open_archive(input_cpio) as index:
        if index.error is not None:
            raise index.error
        return index.read_description()


def description_to_file(input_cpio: Path, output_path: Optional[Path]) -> None:
    data = description_from_cpio(input_cpio)
    if output_path is None:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    else:
        LOG.debug("Writing %d bytes to '%s'", len(data), output_path)
        output_path.write_bytes(data)


def description_command(args: Namespace) -> int:
    try:
        description_to_file(args.input_cpio, args.output_path)
    except (OdcpioError, OSError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    return 0


def description_arguments(parser: ArgumentParser) -> None:
    parser.set_defaults(command=description_command)
    parser.add_argument("input_cpio", type=path_exists)
    parser.add_argument(
        "output_path", type=output_or_stdout, help="Output file, or '-' for stdout"
    )


def description_subparser(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("description", description=__doc__)
    description_arguments(parser)
