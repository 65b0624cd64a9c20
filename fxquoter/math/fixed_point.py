"""Fixed-point helpers and curve parameter replication.

The FX pool contract stores its curve parameters (alpha, beta, delta,
epsilon, lambda) as ABDK 64.64 fixed-point numbers. Converting a uint256
with 18 decimals into 64.64 (`(_param + 1).divu(1e18)`) is lossy, and the
pool math on-chain only ever sees the lossy value. This module replicates
that round trip exactly so that off-chain quotes match executed amounts.

For example, epsilon `0.0015` is held on-chain as
0.001500000000000000952796869180261296. Read back as a uint256 it is
0.001500000000000000 again, and the curve math keeps three fractional
digits rounded up, giving 0.002.

All helpers operate on Python ints or Decimals; floats are never used.
"""

from __future__ import annotations

import re
from decimal import (
    ROUND_CEILING,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)

from fxquoter.constants import (
    CURVE_PARAM_DECIMALS,
    CURVE_PARAM_PLACES,
    FIXED_64X64_SHIFT,
    FX_DECIMAL_PRECISION,
    ONE_18,
    ONE_36,
)

__all__ = [
    "fx_context",
    "parse_fixed",
    "format_fixed",
    "div_trunc",
    "to_64x64",
    "from_64x64",
    "replicated_value",
    "parse_fixed_curve_param",
]

_FIXED_RE = re.compile(r"^(-?)(\d*)(?:\.(\d*))?$")


def fx_context() -> Context:
    """Decimal context used by every FX pool computation.

    Arithmetic faults raise instead of producing NaN or Infinity, so the
    math layer can translate them into MathError.
    """
    return Context(
        prec=FX_DECIMAL_PRECISION,
        rounding=ROUND_HALF_EVEN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )


def parse_fixed(value: str, decimals: int) -> int:
    """Parse a decimal string into an integer scaled by 10^decimals.

    Matches ethers' parseFixed: trailing zeros past `decimals` are
    tolerated, any other excess precision is rejected.

    Args:
        value: Decimal string such as "1000.5" or "-0.25"
        decimals: Number of fractional digits in the fixed representation

    Returns:
        The scaled integer

    Raises:
        ValueError: If value is malformed or has too many fractional digits
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    match = _FIXED_RE.match(value.strip())
    if match is None or (not match.group(2) and not match.group(3)):
        raise ValueError(f"Invalid decimal string: '{value}'")

    sign, whole, fraction = match.group(1), match.group(2) or "0", match.group(3) or ""

    fraction = fraction.rstrip("0") if len(fraction) > decimals else fraction
    if len(fraction) > decimals:
        raise ValueError(f"Fractional component of '{value}' exceeds {decimals} decimals")

    scaled = int(whole) * 10**decimals + int(fraction.ljust(decimals, "0") or "0")
    return -scaled if sign else scaled


def format_fixed(value: int, decimals: int) -> str:
    """Format a scaled integer as a decimal string (inverse of parse_fixed).

    Always emits at least one fractional digit, e.g. "1000.0".
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{fraction_str or '0'}"


def div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero (matching Solidity).

    Python's // operator rounds toward negative infinity, but Solidity
    truncates toward zero. This matters for negative numbers.

    Raises:
        ZeroDivisionError: If b is zero
    """
    if b == 0:
        raise ZeroDivisionError("Division by zero in div_trunc")

    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def to_64x64(value: int) -> int:
    """Convert an 18-decimal uint to 64.64 fixed point as the contract does.

    The contract adds one wei before `divu(1e18)`. The bias applies to every
    input, so zero maps to a small nonzero 64.64 value (18).
    """
    return ((value + 1) << FIXED_64X64_SHIFT) // ONE_18


def from_64x64(q: int) -> int:
    """Convert a 64.64 value back to a 36-decimal fixed-point integer."""
    return (q * ONE_36) >> FIXED_64X64_SHIFT


def replicated_value(param: str) -> Decimal:
    """Return the exact value the contract computes with for a curve parameter.

    For "0.0015" this is 0.001500000000000000952796869180261296.
    """
    raw = from_64x64(to_64x64(parse_fixed(param, CURVE_PARAM_DECIMALS)))
    return Decimal(raw).scaleb(-36, context=fx_context())


def parse_fixed_curve_param(param: str) -> Decimal:
    """Replicate the contract's lossy handling of a curve parameter.

    Steps:
        1. Scale the decimal string to 18 decimals (P)
        2. Widen to 64.64 with the +1 bias: Q = ((P + 1) << 64) / 1e18
        3. Read back as an 18-decimal uint: (Q * 1e36 >> 64) / 1e18
        4. Round up to three fractional digits

    The result is idempotent: feeding it back in returns the same value.

    Args:
        param: Curve parameter (alpha, beta, lambda, delta or epsilon)

    Returns:
        The decoded parameter as a Decimal with at most 3 fractional digits

    Raises:
        ValueError: If param is not a valid decimal string
    """
    raw = from_64x64(to_64x64(parse_fixed(param, CURVE_PARAM_DECIMALS)))
    wei = raw // ONE_18
    quantum = Decimal(1).scaleb(-CURVE_PARAM_PLACES)
    context = fx_context()
    value = Decimal(wei).scaleb(-CURVE_PARAM_DECIMALS, context=context)
    return value.quantize(quantum, rounding=ROUND_CEILING, context=context)
