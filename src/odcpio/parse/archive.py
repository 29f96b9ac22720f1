"""Index the entries of an "odc" CPIO archive.

The archive is a chain of headers. Each header is followed by its name and
payload, and the next header starts right after the payload. The chain ends
with an entry named ``TRAILER!!!``, which is never indexed.

Indexing is best-effort: if a header can't be decoded, the scan stops, the
entries found so far are kept, and the failure is stored on the index.

Entry names may not be unique. By default, a later entry replaces an earlier
one of the same name, but this can be changed with :class:`DuplicatePolicy`.
"""
import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, Optional

from ..errors import (
    DuplicateEntryError,
    EntryNotFoundError,
    HeaderDecodeError,
    SeekFailedError,
    ShortReadError,
    TruncatedPayloadError,
)
from .header import FileType, HeaderRecord, read_header
from .utils import SourceReader

DESCRIPTION_NAME = "description"
EMPTY_TYPES = (FileType.Directory, FileType.Fifo)

LOG = logging.getLogger(__name__)


class DuplicatePolicy(Enum):
    KeepLast = "keep-last"
    KeepFirst = "keep-first"
    Reject = "reject"


class ArchiveIndex:
    def __init__(
        self, source: BinaryIO, policy: DuplicatePolicy = DuplicatePolicy.KeepLast
    ):
        self._reader = SourceReader(source)
        self._headers: Dict[str, HeaderRecord] = {}
        self.policy = policy
        self.error: Optional[HeaderDecodeError] = None
        self.trailer_offset: Optional[int] = None

    @classmethod
    def scan(
        cls, source: BinaryIO, policy: DuplicatePolicy = DuplicatePolicy.KeepLast
    ) -> "ArchiveIndex":
        """Build an index of the archive in ``source``.

        :raises SeekFailedError: If the source isn't seekable.
        :raises DuplicateEntryError: If the policy rejects duplicates, and one
            was found.
        """
        index = cls(source, policy)
        index._scan()
        return index

    def _scan(self) -> None:
        size = self._reader.size()
        LOG.debug("Indexing archive, %d bytes...", size)

        offset = 0
        while True:
            if offset >= size:
                LOG.warning("Archive ended without a trailer at %d", offset)
                break

            try:
                record = read_header(self._reader, offset)
                if record.is_trailer:
                    LOG.debug("Trailer at %d", offset)
                    self.trailer_offset = offset
                    break

                if record.next_offset > size:
                    raise TruncatedPayloadError(
                        f"data: {record.next_offset} > {size} "
                        f"(at {record.data_offset})"
                    )
            except HeaderDecodeError as e:
                LOG.warning("Stopped indexing, could not read header: %s", e)
                self.error = e
                break

            if record.file_type in EMPTY_TYPES and record.data_size != 0:
                LOG.warning(
                    "Entry '%s' is a %s with %d bytes of data",
                    record.name,
                    record.file_type.name,
                    record.data_size,
                )

            self._add(record)
            offset = record.next_offset

        LOG.debug("Indexed %d entries", len(self._headers))

    def _add(self, record: HeaderRecord) -> None:
        name = record.name
        existing = self._headers.get(name)
        if existing is None:
            self._headers[name] = record
            return

        if self.policy == DuplicatePolicy.Reject:
            raise DuplicateEntryError(
                f"name: {name!r} duplicates entry at {existing.header_offset} "
                f"(at {record.header_offset})"
            )

        LOG.warning(
            "Duplicate entry '%s' at %d and %d, keeping %s",
            name,
            existing.header_offset,
            record.header_offset,
            "first" if self.policy == DuplicatePolicy.KeepFirst else "last",
        )
        if self.policy == DuplicatePolicy.KeepLast:
            self._headers[name] = record

    @property
    def partial(self) -> bool:
        return self.error is not None

    @property
    def count(self) -> int:
        return len(self)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, name: object) -> bool:
        return name in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __getitem__(self, name: str) -> HeaderRecord:
        try:
            return self._headers[name]
        except KeyError:
            raise EntryNotFoundError(f"Entry '{name}' not found") from None

    def has(self, name: str) -> bool:
        return name in self._headers

    def get(self, name: str) -> Optional[HeaderRecord]:
        return self._headers.get(name)

    def names(self) -> List[str]:
        return list(self._headers)

    def records(self) -> List[HeaderRecord]:
        return list(self._headers.values())

    def read_entry_bytes(self, name: str) -> bytes:
        """Return the payload of the named entry.

        The source's cursor is left after the payload.

        :raises EntryNotFoundError: If there is no entry of that name.
        :raises SeekFailedError: If the payload starts beyond the source.
        :raises ShortReadError: If the payload is cut short.
        """
        record = self[name]
        start = record.data_offset
        size = self._reader.size()
        if start > size:
            raise SeekFailedError(f"data: {start} > {size} (at {start})")

        data = self._reader.read_at(start, record.data_size)
        if len(data) != record.data_size:
            raise ShortReadError(
                f"data: {len(data)} != {record.data_size} bytes (at {start})"
            )
        LOG.debug("Read '%s', data from %d to %d", name, start, record.next_offset)
        return data

    def read_description(self) -> bytes:
        return self.read_entry_bytes(DESCRIPTION_NAME)


@contextmanager
def open_archive(
    path: Path, policy: DuplicatePolicy = DuplicatePolicy.KeepLast
) -> Iterator[ArchiveIndex]:
    with Path(path).open("rb") as f:
        yield ArchiveIndex.scan(f, policy)
