"""
Core Type Definitions for the Kudu Connector

Implements a small Result/Either pair for non-raising decomposition
and the value types shared by the naming and session layers.

Design Principles:
- Never use null for absence (use Optional or Result)
- Value objects are immutable and hashable
- Naming failures that callers must skip are returned, not raised

Complexity: O(1) for all type operations
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import (
    Any,
    Generic,
    Literal,
    NamedTuple,
    TypeVar,
    Union,
)

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result monad.

    Immutable, hashable container for successful computation results.
    """

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result monad.

    When the carried error is an exception, ``unwrap()`` re-raises it
    so call sites that want raising semantics keep the original type.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Attempting to unwrap an error is a programming error.

        Raises:
            The carried exception, or RuntimeError with error context
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# LOGICAL TABLE NAME
# =============================================================================
class SchemaTableName(NamedTuple):
    """
    Two-level name the query engine uses to address a table.

    A plain ``(schema, table)`` pair: equal to the matching tuple,
    ordered by schema then table.
    """

    schema: str
    table: str

    def __str__(self) -> str:
        return f"{self.schema}.{self.table}"


# =============================================================================
# TIMESTAMP WITH NANOSECOND PRECISION
# =============================================================================
@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """
    High-precision timestamp for error correlation.

    Stores nanoseconds since Unix epoch.
    """

    nanos: int

    @classmethod
    def now(cls) -> Timestamp:
        """Capture current time with nanosecond precision."""
        return cls(nanos=time.time_ns())

    def __repr__(self) -> str:
        return f"Timestamp({self.nanos}ns)"
