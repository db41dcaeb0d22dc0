"""Single failure contract shared by every generation operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class GenerationError(Exception):
    """Raised (or carried in an Outcome) when an operation cannot produce its artifact."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation}: {message}")


@dataclass
class Outcome(Generic[T]):
    """Result of one operation.

    ``value`` is None only when nothing usable was produced. ``fallback`` marks
    a value built from static content after the upstream call failed; ``error``
    then still records why.
    """

    value: T | None
    error: GenerationError | None = None
    fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the carried error when there is none."""
        if self.value is None:
            raise self.error or GenerationError("produce a result", "no value")
        return self.value

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: GenerationError) -> "Outcome[T]":
        return cls(value=None, error=error)

    @classmethod
    def degraded(cls, value: T, error: GenerationError) -> "Outcome[T]":
        return cls(value=value, error=error, fallback=True)
