"""List the entries of an odc CPIO archive.

Listing is best-effort. If the archive can only be partially indexed, the
entries that were found are still listed, and the manifest records why the
scan stopped.
"""
import logging
import sys
from argparse import ArgumentParser, Namespace, _SubParsersAction
from pathlib import Path
from typing import Optional

from ..errors import OdcpioError
from ..parse.archive import open_archive
from .manifest import ArchiveManifest
from .utils import dir_exists, path_exists

LOG = logging.getLogger(__name__)


def cpio_to_manifest(input_cpio: Path) -> ArchiveManifest:
    with open_archive(input_cpio) as index:
        return ArchiveManifest.from_index(index)


def list_cpio(input_cpio: Path, output_json: Optional[Path]) -> ArchiveManifest:
    manifest = cpio_to_manifest(input_cpio)
    if manifest.error:
        sys.stderr.write(f"warning: archive partially indexed: {manifest.error}\n")

    if output_json is None:
        for entry in manifest.entries:
            sys.stdout.write(f"{entry.name}\n")
    else:
        LOG.debug("Writing manifest to '%s'", output_json)
        output_json.write_text(
            manifest.model_dump_json(exclude_defaults=True, indent=2),
            encoding="utf-8",
        )
    return manifest


def list_command(args: Namespace) -> int:
    try:
        list_cpio(args.input_cpio, args.output_json)
    except (OdcpioError, OSError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    return 0


def list_arguments(parser: ArgumentParser) -> None:
    parser.set_defaults(command=list_command)
    parser.add_argument("input_cpio", type=path_exists)
    parser.add_argument("output_json", type=dir_exists, default=None, nargs="?")


def list_subparser(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("list", description=__doc__)
    list_arguments(parser)
