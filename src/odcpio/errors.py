from contextlib import contextmanager
from typing import Any, Iterator, Type, TypeVar, Union

from typing_extensions import Protocol

T = TypeVar("T", bound="Comparable")


class Comparable(Protocol):
    def __lt__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __le__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __gt__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __ge__(self: T, other: T) -> bool:
        pass  # pragma: no cover


class OdcpioError(Exception):
    """Base error for all errors in the library."""


class HeaderDecodeError(OdcpioError):
    """An error when decoding an entry header."""


class BadMagicError(HeaderDecodeError):
    """The header does not start with '070707'."""


class TruncatedFieldError(HeaderDecodeError):
    """Fewer bytes than a fixed-width field needs."""


class MalformedOctalError(HeaderDecodeError):
    """A numeric field contains a character that isn't an octal digit."""


class InvalidNameLengthError(HeaderDecodeError):
    """The name length doesn't leave room for the terminator."""


class TruncatedNameError(HeaderDecodeError):
    """Fewer name bytes than the name length says."""


class TruncatedPayloadError(HeaderDecodeError):
    """The entry's payload extends past the end of the archive."""


class ExtractError(OdcpioError):
    """An error when extracting an entry's payload."""


class EntryNotFoundError(ExtractError, KeyError):
    """No entry of that name was indexed."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class SeekFailedError(ExtractError):
    """The source can't be positioned at the requested offset."""


class ShortReadError(ExtractError):
    """Fewer payload bytes than the data size says."""


class DuplicateEntryError(OdcpioError):
    """An entry name occurs more than once, and duplicates are rejected."""


def _assert_base(  # pylint: disable=too-many-arguments
    result: bool,
    operator: str,
    name: str,
    expected: Any,
    actual: Any,
    location: Union[int, str],
    error_class: Type[OdcpioError] = HeaderDecodeError,
) -> None:
    if not result:
        raise error_class(f"{name}: {actual!r} {operator} {expected!r} (at {location})")


def assert_eq(
    name: str,
    expected: T,
    actual: T,
    location: Union[int, str],
    error_class: Type[OdcpioError] = HeaderDecodeError,
) -> None:
    result = actual == expected
    _assert_base(result, "==", name, expected, actual, location, error_class)


def assert_ge(
    name: str,
    expected: T,
    actual: T,
    location: Union[int, str],
    error_class: Type[OdcpioError] = HeaderDecodeError,
) -> None:
    result = actual >= expected
    _assert_base(result, ">=", name, expected, actual, location, error_class)


@contextmanager
def assert_octal(
    name: str,
    actual: bytes,
    location: Union[int, str],
    error_class: Type[OdcpioError] = MalformedOctalError,
) -> Iterator[None]:
    try:
        yield
    except ValueError as e:
        raise error_class(f"{name}: {actual!r} is not octal (at {location})") from e
