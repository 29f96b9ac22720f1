import json
from io import BytesIO

from odcpio.convert.manifest import ArchiveManifest, EntryInfo
from odcpio.parse.archive import ArchiveIndex
from odcpio.parse.header import read_header


def test_entry_info_from_record(entry):
    record = read_header(BytesIO(entry("bin", mode=0o040755, inode=7)), 0)
    info = EntryInfo.from_record(record)

    assert info.name == "bin"
    assert info.file_type == "Directory"
    assert info.mode == 0o040755
    assert info.inode == 7
    assert info.data_offset == 80
    assert info.data_size == 0
    assert info.modified == record.modified


def test_manifest_from_index(archive):
    index = ArchiveIndex.scan(BytesIO(archive([("a", b"1"), ("b", b"22")])))
    manifest = ArchiveManifest.from_index(index)

    assert [info.name for info in manifest.entries] == ["a", "b"]
    assert manifest.trailer_offset == index.trailer_offset
    assert not manifest.partial
    assert manifest.error is None

    dumped = json.loads(manifest.model_dump_json(exclude_defaults=True))
    assert "partial" not in dumped
    assert "error" not in dumped
    assert dumped["entries"][1]["data_size"] == 2
    assert "rdev" not in dumped["entries"][1]


def test_manifest_undecodable_name(archive):
    data = archive([(b"caf\xe9\0", b"1"), ("description", b"d")])
    manifest = ArchiveManifest.from_index(ArchiveIndex.scan(BytesIO(data)))

    dumped = json.loads(manifest.model_dump_json())
    assert [entry["name"] for entry in dumped["entries"]] == ["caf�", "description"]


def test_manifest_partial(archive):
    data = archive([("a", b"1")], trailer=False) + b"not a header" * 10
    manifest = ArchiveManifest.from_index(ArchiveIndex.scan(BytesIO(data)))

    assert manifest.partial
    assert manifest.error is not None
    assert "magic" in manifest.error

    dumped = json.loads(manifest.model_dump_json(exclude_defaults=True))
    assert dumped["partial"] is True
    assert "trailer_offset" not in dumped
