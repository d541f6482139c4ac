"""Result type for recoverable outcomes.

Parsing a version or reading build info can fail in ways callers are expected
to branch on routinely, so those operations return `Ok` or `Err` values instead
of raising.

Usage:
    result = classify("v1.2.4-0.20230105120000-abc123def456")
    match result:
        case Ok(parsed):
            print(parsed.kind)
        case Err(malformed):
            print(f"unknown version: {malformed.reason}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result carrying `value`."""

    value: T

    def unwrap(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result carrying `error`."""

    error: E

    def unwrap(self) -> None:
        """Raises ValueError, since there is no value.

        Raises:
            ValueError: Always, containing the error.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
