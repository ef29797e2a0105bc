"""Result types for lookups that can fail without raising.

Usage:
    result = geo.lookup("8.8.8.8")
    if isinstance(result, Success):
        payload = result.value
    else:
        print(result.error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result = Union[Success[T], Failure[E]]
