from io import SEEK_END
from typing import BinaryIO

from ..errors import SeekFailedError

OCTAL_DIGITS = frozenset(b"01234567")


def octal_to_int(buf: bytes) -> int:
    """Return the value of a fixed-width, zero-padded ASCII octal field.

    Unlike ``int(buf, 8)``, only the digits 0-7 are accepted. Signs,
    whitespace, underscores and the ``0o`` prefix are all rejected.

    :raises ValueError: If the buffer is empty or contains a non-octal digit.
    """
    if not buf or not all(c in OCTAL_DIGITS for c in buf):
        raise ValueError(f"Not an octal number ({buf!r})")
    return int(buf, 8)


def zterm(buf: bytes) -> bytes:
    """Return a zero-terminated buffer up to its first null character.

    Anything after the terminator is ignored. If there is no null character,
    the whole buffer is returned.
    """
    null_index = buf.find(b"\0")
    if null_index > -1:
        return buf[:null_index]
    return buf


class SourceReader:
    """Positioned reads over a seekable binary file object.

    Every read names its offset, so callers never depend on where a
    previous read left the underlying cursor.
    """

    def __init__(self, source: BinaryIO):
        self.source = source
        self.offset = 0

    def size(self) -> int:
        try:
            return self.source.seek(0, SEEK_END)
        except (OSError, ValueError) as e:
            raise SeekFailedError(f"Cannot determine source size: {e}") from e

    def seek(self, offset: int) -> None:
        try:
            self.source.seek(offset)
        except (OSError, ValueError) as e:
            raise SeekFailedError(f"Cannot seek to {offset}: {e}") from e
        self.offset = offset

    def read(self, length: int) -> bytes:
        try:
            value = self.source.read(length)
        except (OSError, ValueError) as e:
            raise SeekFailedError(f"Cannot read at {self.offset}: {e}") from e
        self.offset += len(value)
        return value

    def read_at(self, offset: int, length: int) -> bytes:
        self.seek(offset)
        return self.read(length)
