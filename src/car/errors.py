import operator
from typing import Any, Callable, Dict, Type, TypeVar, Union

from typing_extensions import Protocol

T = TypeVar("T", bound="Comparable")


class Comparable(Protocol):
    def __le__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __ge__(self: T, other: T) -> bool:
        pass  # pragma: no cover


class CarError(Exception):
    """Base error for all errors in the library."""


class CarParseError(CarError):
    """An error when parsing data."""


class CarArchiveError(CarParseError):
    """An error when reading or writing an archive."""


Location = Union[int, str]
ErrorClass = Type[CarError]

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "<=": operator.le,
    ">=": operator.ge,
}


def _check(
    op: str,
    name: str,
    expected: Any,
    actual: Any,
    location: Location,
    error_class: ErrorClass,
) -> None:
    """Raise ``error_class`` unless ``actual op expected`` holds.

    The message reads ``name: actual op expected (at location)``, where the
    location is usually a byte offset into the archive.
    """
    if not _OPERATORS[op](actual, expected):
        raise error_class(f"{name}: {actual!r} {op} {expected!r} (at {location})")


def assert_eq(
    name: str,
    expected: Any,
    actual: Any,
    location: Location,
    error_class: ErrorClass = CarParseError,
) -> None:
    _check("==", name, expected, actual, location, error_class)


def assert_le(
    name: str,
    expected: T,
    actual: T,
    location: Location,
    error_class: ErrorClass = CarParseError,
) -> None:
    _check("<=", name, expected, actual, location, error_class)


def assert_ge(
    name: str,
    expected: T,
    actual: T,
    location: Location,
    error_class: ErrorClass = CarParseError,
) -> None:
    _check(">=", name, expected, actual, location, error_class)
