"""Decode "odc" (portable ASCII, magic ``070707``) CPIO headers.

Each header is 76 bytes of fixed-width, zero-padded ASCII octal fields,
followed by the entry name (including its terminating NUL), followed by the
payload. Nothing is padded or aligned. The codec only knows about a single
header; walking the chain of headers is done by the archive index.

Names are decoded as UTF-8. Bytes that aren't valid UTF-8 are kept with
``surrogateescape``, so every name round-trips to its on-disk bytes.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from struct import Struct
from typing import BinaryIO, List, Union

from ..errors import (
    BadMagicError,
    InvalidNameLengthError,
    TruncatedFieldError,
    TruncatedNameError,
    assert_eq,
    assert_ge,
    assert_octal,
)
from .utils import SourceReader, octal_to_int, zterm

MAGIC = b"070707"
TRAILER_NAME = "TRAILER!!!"

HEADER = Struct("6s 6s 6s 6s 6s 6s 6s 6s 11s 6s 11s")
assert HEADER.size == 76, HEADER.size
HEADER_FIELDS = (
    "magic",
    "device",
    "inode",
    "mode",
    "uid",
    "gid",
    "link_count",
    "rdev",
    "modify_time",
    "name_length",
    "data_size",
)
FIELD_WIDTHS = [int(code[:-1]) for code in HEADER.format.split()]
FIXED_HEADER_SIZE = HEADER.size

FILE_TYPE_MASK = 0o170000
PERMISSION_MASK = 0o7777

LOG = logging.getLogger(__name__)


class FileType(Enum):
    Unknown = 0
    Fifo = 0o010000
    CharDevice = 0o020000
    Directory = 0o040000
    BlockDevice = 0o060000
    Regular = 0o100000
    Symlink = 0o120000
    Socket = 0o140000

    @classmethod
    def _missing_(cls, value: object) -> "FileType":
        return cls.Unknown

    @classmethod
    def from_mode(cls, mode: int) -> "FileType":
        return cls(mode & FILE_TYPE_MASK)


@dataclass(frozen=True)
class HeaderRecord:
    device: int
    inode: int
    mode: int
    uid: int
    gid: int
    link_count: int
    rdev: int
    modify_time: int
    name_length: int
    data_size: int
    name: str
    header_offset: int

    @property
    def data_offset(self) -> int:
        return self.header_offset + FIXED_HEADER_SIZE + self.name_length

    @property
    def next_offset(self) -> int:
        return self.data_offset + self.data_size

    @property
    def file_type(self) -> FileType:
        return FileType.from_mode(self.mode)

    @property
    def permissions(self) -> int:
        return self.mode & PERMISSION_MASK

    @property
    def modified(self) -> datetime:
        return datetime.fromtimestamp(self.modify_time, tz=timezone.utc)

    @property
    def raw_name(self) -> bytes:
        return self.name.encode("utf-8", errors="surrogateescape")

    @property
    def display_name(self) -> str:
        """The name with undecodable bytes replaced, safe to print or serialize."""
        return self.raw_name.decode("utf-8", errors="replace")

    @property
    def is_trailer(self) -> bool:
        return self.name == TRAILER_NAME


def _truncated_field(raw: bytes, offset: int) -> TruncatedFieldError:
    pos = 0
    for name, width in zip(HEADER_FIELDS, FIELD_WIDTHS):
        if len(raw) < pos + width:
            got = max(len(raw) - pos, 0)
            return TruncatedFieldError(
                f"{name}: {got} < {width} bytes (at {offset + pos})"
            )
        pos += width
    raise ValueError("Header is not truncated")  # pragma: no cover


def _read_fields(raw: bytes, offset: int) -> List[int]:
    # the magic is checked first, even if the rest of the header is missing
    magic = raw[: FIELD_WIDTHS[0]]
    if len(magic) == len(MAGIC):
        assert_eq("magic", MAGIC, magic, offset, BadMagicError)
    if len(raw) < HEADER.size:
        raise _truncated_field(raw, offset)

    _, *fields = HEADER.unpack(raw)
    values = []
    location = offset + FIELD_WIDTHS[0]
    for name, width, field in zip(HEADER_FIELDS[1:], FIELD_WIDTHS[1:], fields):
        with assert_octal(name, field, location):
            value = octal_to_int(field)
        LOG.debug("Read %s %r = %d at %d", name, field, value, location)
        values.append(value)
        location += width
    return values


def read_header(source: Union[BinaryIO, SourceReader], offset: int) -> HeaderRecord:
    """Decode the header (and name) that starts at ``offset``.

    The source's cursor is left just past the name, the payload is not read.

    :raises BadMagicError: If the header doesn't start with the magic.
    :raises TruncatedFieldError: If the source ends inside the fixed fields.
    :raises MalformedOctalError: If a numeric field isn't octal.
    :raises InvalidNameLengthError: If the name length is zero.
    :raises TruncatedNameError: If the source ends inside the name.
    """
    reader = source if isinstance(source, SourceReader) else SourceReader(source)

    LOG.debug("Reading header at %d", offset)
    raw = reader.read_at(offset, FIXED_HEADER_SIZE)
    (
        device,
        inode,
        mode,
        uid,
        gid,
        link_count,
        rdev,
        modify_time,
        name_length,
        data_size,
    ) = _read_fields(raw, offset)

    name_location = offset + FIXED_HEADER_SIZE
    assert_ge("name length", 1, name_length, name_location, InvalidNameLengthError)

    raw_name = reader.read(name_length)
    if len(raw_name) != name_length:
        raise TruncatedNameError(
            f"name: {len(raw_name)} != {name_length} bytes (at {name_location})"
        )
    stem = zterm(raw_name)
    name = stem.decode("utf-8", errors="surrogateescape")
    if not stem.isascii():
        LOG.debug("Name %r at %d is not ASCII", stem, name_location)

    record = HeaderRecord(
        device=device,
        inode=inode,
        mode=mode,
        uid=uid,
        gid=gid,
        link_count=link_count,
        rdev=rdev,
        modify_time=modify_time,
        name_length=name_length,
        data_size=data_size,
        name=name,
        header_offset=offset,
    )
    LOG.debug(
        "Entry '%s', header at %d, data from %d to %d",
        name,
        offset,
        record.data_offset,
        record.next_offset,
    )
    return record
