"""FX pool error classes.

MathError subclasses map to the CurveMath contract's revert reasons.
"""


class FxPoolError(Exception):
    """Base error for FX pool operations."""

    pass


class StructuralError(FxPoolError):
    """Pool or pair data is unusable: missing curve field, unknown token, missing oracle data."""

    pass


class MathError(FxPoolError):
    """Curve math could not produce a result for this pool state."""

    pass


class LowerHalt(MathError):
    """CurveMath/lower-halt: a balance fell below the alpha band."""

    pass


class UpperHalt(MathError):
    """CurveMath/upper-halt: a balance rose above the alpha band."""

    pass


class SwapInvariantViolation(MathError):
    """CurveMath/swap-invariant-violation: utility decreased past MAX_DIFF."""

    pass


class SwapConvergenceFailed(MathError):
    """CurveMath/swap-convergence-failed: trade iteration hit its bound."""

    pass


class CannotSwap(MathError):
    """The requested amount cannot be swapped (e.g. negative amount)."""

    pass


class CurveDomainError(MathError):
    """A numeraire reserve left the curve's valid domain (zero or negative)."""

    pass


class LimitError(FxPoolError):
    """Swap limit headroom could not be computed."""

    pass
