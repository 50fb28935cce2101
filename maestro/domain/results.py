from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a read against the store.

    ``data`` always holds something usable: on failure it is the empty
    default for the query (``[]``, ``None``, zeroed counts) and ``error``
    carries the reason. Callers that only read ``data`` get the fail-soft
    behaviour; callers that check ``ok`` can tell an empty store from a
    broken one.
    """

    data: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "QueryResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, default: T, reason: str) -> "QueryResult[T]":
        return cls(data=default, error=reason)
