"""FX pool implementation.

This package quotes swaps against oracle-anchored FX curve pools, matching
the on-chain CurveMath contract, including its lossy 64.64 parameter storage.
"""

# Config
from .config import DEFAULT_CURVE_CONFIG, FxCurveConfig

# Curve math
from .curve_math import (
    TradeResult,
    calculate_fee,
    calculate_micro_fee,
    calculate_trade,
    enforce_halts,
    enforce_swap_invariant,
    exact_token_in_for_token_out,
    solve_trade,
    token_in_for_exact_token_out,
)

# Errors
from .errors import (
    CannotSwap,
    CurveDomainError,
    FxPoolError,
    LimitError,
    LowerHalt,
    MathError,
    StructuralError,
    SwapConvergenceFailed,
    SwapInvariantViolation,
    UpperHalt,
)

# Limits
from .limits import compute_limit_amount, max_swap_amount

# Numeraire conversion
from .numeraire import (
    ReservesInNumeraire,
    given_amount_in_numeraire,
    pool_balances_to_numeraire,
    view_numeraire_amount,
    view_raw_amount,
)

# Pool facade
from .pool import FxPool

# Pool dataclasses
from .pools import CurveParams, FxPoolPairData, FxToken, OracleQuote

# Pricing
from .pricing import derivative_spot_price_after_swap, normalized_liquidity, spot_price_after_swap

# Result
from .result import MathResult, evaluate

__all__ = [
    # Pool
    "FxPool",
    "CurveParams",
    "FxPoolPairData",
    "FxToken",
    "OracleQuote",
    # Config
    "FxCurveConfig",
    "DEFAULT_CURVE_CONFIG",
    # Errors
    "FxPoolError",
    "StructuralError",
    "MathError",
    "LowerHalt",
    "UpperHalt",
    "SwapInvariantViolation",
    "SwapConvergenceFailed",
    "CannotSwap",
    "CurveDomainError",
    "LimitError",
    # Numeraire
    "ReservesInNumeraire",
    "view_numeraire_amount",
    "view_raw_amount",
    "given_amount_in_numeraire",
    "pool_balances_to_numeraire",
    # Curve math
    "TradeResult",
    "calculate_micro_fee",
    "calculate_fee",
    "calculate_trade",
    "enforce_halts",
    "enforce_swap_invariant",
    "solve_trade",
    "exact_token_in_for_token_out",
    "token_in_for_exact_token_out",
    # Pricing
    "spot_price_after_swap",
    "derivative_spot_price_after_swap",
    "normalized_liquidity",
    # Limits
    "compute_limit_amount",
    "max_swap_amount",
    # Result
    "MathResult",
    "evaluate",
]
