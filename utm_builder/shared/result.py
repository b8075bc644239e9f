"""
Typed success/failure results.

Validators, the URL engine and shortener providers return ``Ok`` or ``Err``
instead of raising, so every expected failure is a value the caller has to
look at. ``unwrap()`` turns an ``Err`` back into a raised ``AppError`` at the
HTTP boundary, where the global handler renders it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from utm_builder.errors import AppError

T = TypeVar("T")
E = TypeVar("E", bound=AppError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Union[Ok[T], Err[E]]
