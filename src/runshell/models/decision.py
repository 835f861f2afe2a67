"""Tagged result for decisions that fall back silently on bad input."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Decision(Generic[T]):
    """A resolved value plus the branch that produced it."""

    value: T
    source: str
    fallback: bool = False
