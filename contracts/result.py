"""OperationResult: the return type of every client operation.

A closed union of ``Success[T]`` and ``Failure``. Callers branch on ``ok``
(or ``isinstance`` / ``match``) and never see a partial result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, Union

from contracts.errors import ChromaClientError, ClientError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: ClientError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> NoReturn:
        raise ChromaClientError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default


OperationResult = Union[Success[T], Failure]


def fail(
    kind: ErrorKind,
    message: str,
    *,
    status_code: int | None = None,
    detail: dict[str, Any] | None = None,
) -> Failure:
    """Shorthand for building a Failure."""
    return Failure(
        ClientError(
            kind=kind,
            message=message,
            status_code=status_code,
            detail=detail or {},
        )
    )
