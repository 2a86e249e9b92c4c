"""Outcome types shared by provider clients and the race coordinator.

A provider lookup produces a :class:`Success` or a :class:`Failure`. A race over
several lookups produces exactly one of :class:`Resolved`, :class:`AllFailed`
or :class:`TimedOut`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar, Union


T = TypeVar("T")
E = TypeVar("E")

ProviderErrorKind = Literal["not_found", "timeout", "transport_error", "decode_error"]


@dataclass(frozen=True, slots=True)
class ProviderError:
    provider: str
    kind: ProviderErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Failure(Generic[E]):
    error: E


@dataclass(frozen=True, slots=True)
class Resolved(Generic[T]):
    value: T
    provider: str


@dataclass(frozen=True, slots=True)
class AllFailed(Generic[E]):
    errors: list[E] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TimedOut:
    timeout: float


Result = Union[Success[T], Failure[E]]
RaceOutcome = Union[Resolved[T], AllFailed[E], TimedOut]
