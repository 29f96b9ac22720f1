import logging
from typing import Callable, Iterable, Optional, Tuple, Union

import pytest

Name = Union[str, bytes]


def cpio_entry(  # pylint: disable=too-many-arguments
    name: Name,
    data: bytes = b"",
    mode: int = 0o100644,
    uid: int = 1000,
    gid: int = 100,
    modify_time: int = 1234567890,
    device: int = 0o777,
    inode: int = 1,
    link_count: int = 1,
    rdev: int = 0,
    name_length: Optional[int] = None,
    data_size: Optional[int] = None,
    magic: bytes = b"070707",
) -> bytes:
    raw_name = name if isinstance(name, bytes) else name.encode("utf-8") + b"\0"
    if name_length is None:
        name_length = len(raw_name)
    if data_size is None:
        data_size = len(data)
    fields = (
        f"{device:06o}{inode:06o}{mode:06o}{uid:06o}{gid:06o}{link_count:06o}"
        f"{rdev:06o}{modify_time:011o}{name_length:06o}{data_size:011o}"
    )
    return magic + fields.encode("ascii") + raw_name + data


def cpio_archive(entries: Iterable[Tuple[Name, bytes]], trailer: bool = True) -> bytes:
    parts = [cpio_entry(name, data) for name, data in entries]
    if trailer:
        parts.append(cpio_entry("TRAILER!!!", mode=0, link_count=1))
    return b"".join(parts)


@pytest.fixture(name="entry")
def entry_fixture() -> Callable[..., bytes]:
    return cpio_entry


@pytest.fixture(name="archive")
def archive_fixture() -> Callable[..., bytes]:
    return cpio_archive


@pytest.fixture(autouse=True)
def reset_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    # the CLI configures the package logger not to propagate
    logger = logging.getLogger("odcpio")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
