from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..parse.archive import ArchiveIndex
from ..parse.header import HeaderRecord


class EntryInfo(BaseModel):
    name: str
    file_type: str
    mode: int
    uid: int
    gid: int
    device: int
    inode: int
    link_count: int
    rdev: int = 0
    modified: datetime
    header_offset: int
    data_offset: int
    data_size: int

    @classmethod
    def from_record(cls, record: HeaderRecord) -> EntryInfo:
        return cls(
            name=record.display_name,
            file_type=record.file_type.name,
            mode=record.mode,
            uid=record.uid,
            gid=record.gid,
            device=record.device,
            inode=record.inode,
            link_count=record.link_count,
            rdev=record.rdev,
            modified=record.modified,
            header_offset=record.header_offset,
            data_offset=record.data_offset,
            data_size=record.data_size,
        )


class ArchiveManifest(BaseModel):
    entries: List[EntryInfo]
    trailer_offset: Optional[int] = None
    partial: bool = False
    error: Optional[str] = None

    @classmethod
    def from_index(cls, index: ArchiveIndex) -> ArchiveManifest:
        return cls(
            entries=[EntryInfo.from_record(record) for record in index.records()],
            trailer_offset=index.trailer_offset,
            partial=index.partial,
            error=str(index.error) if index.error else None,
        )
