"""Lightweight Result types (Ok/Err).

Every public detection entry point returns one of these instead of raising,
so callers can tell an unreadable image (``DiscReadError``) from an
unrecognised one (``DiscFormatError``) by inspecting ``Err.error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, Type, TypeGuard, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception

    def is_a(self, error_type: Type[Exception]) -> bool:
        return isinstance(self.error, error_type)


Result = Union[Ok[T], Err]


def is_ok(result: Result[T]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[T]) -> TypeGuard[Err]:
    return isinstance(result, Err)


def unwrap(result: Result[T]) -> T:
    if isinstance(result, Ok):
        return result.value
    raise result.error


def unwrap_or(result: Result[T], default: T) -> T:
    if isinstance(result, Ok):
        return result.value
    return default


def map_ok(result: Result[T], func: Callable[[T], U]) -> Result[U]:
    """Apply ``func`` to an Ok value; pass an Err through untouched."""
    if isinstance(result, Ok):
        return Ok(func(result.value))
    return result


def error_message(result: Result[T]) -> Optional[str]:
    if isinstance(result, Err):
        return str(result.error)
    return None
