"""Outcome of a repository mutation.

Mutations never raise for bad input; they return a ``MutationResult`` that
callers (API handlers, the CLI, tests) can branch on.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "MutationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def invalid(cls, error: str) -> "MutationResult[T]":
        return cls(ok=False, error=error, kind=ErrorKind.VALIDATION)

    @classmethod
    def not_found(cls, error: str) -> "MutationResult[T]":
        return cls(ok=False, error=error, kind=ErrorKind.NOT_FOUND)
