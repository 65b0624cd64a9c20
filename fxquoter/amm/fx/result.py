"""Explicit success/failure results for FX curve math."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import MathError

T = TypeVar("T")


@dataclass(frozen=True)
class MathResult(Generic[T]):
    """Result of a curve math evaluation.

    Curve math fails for ordinary pool states (halts, convergence failure,
    invariant violation). Callers that must not raise receive the failure as
    a value instead of an exception.

    Attributes:
        value: The computed value, or None if the evaluation failed
        error: The MathError that stopped the evaluation, if any

    Examples:
        result = evaluate(exact_token_in_for_token_out, pair, 1000)
        amount = result.unwrap_or(0)
    """

    value: T | None
    error: MathError | None = None

    @property
    def is_valid(self) -> bool:
        """True if the evaluation produced a value."""
        return self.error is None

    @property
    def is_error(self) -> bool:
        """True if the evaluation failed."""
        return self.error is not None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or `default` if the evaluation failed."""
        if self.error is not None or self.value is None:
            return default
        return self.value

    @classmethod
    def ok(cls, value: T) -> MathResult[T]:
        """Create a successful result."""
        return cls(value=value)

    @classmethod
    def failed(cls, error: MathError) -> MathResult[T]:
        """Create a failed result."""
        return cls(value=None, error=error)


def evaluate(fn: Callable[..., T], *args: object, **kwargs: object) -> MathResult[T]:
    """Call `fn`, capturing a MathError as a failed result.

    Other exceptions (including StructuralError) propagate.
    """
    try:
        return MathResult.ok(fn(*args, **kwargs))
    except MathError as e:
        return MathResult.failed(e)
