"""Swap size limits for FX pools.

A swap can grow the receiving side of the pool up to the upper halt,
(1 + alpha) * ideal, where the ideal is half the total numeraire liquidity.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, localcontext

import structlog

from fxquoter.amm.base import SwapType
from fxquoter.math.fixed_point import fx_context

from .errors import LimitError
from .numeraire import numeraire_to_token_in, numeraire_to_token_out, pool_balances_to_numeraire
from .pools import FxPoolPairData

logger = structlog.get_logger()

_HALF = Decimal("0.5")


def compute_limit_amount(pair: FxPoolPairData, swap_type: SwapType) -> int:
    """Largest amount of the given side the pool accepts before halting.

    Exact-in limits are in raw token_in, exact-out limits in raw token_out.

    Raises:
        LimitError: If the headroom cannot be computed (zero rate, bad data)
    """
    try:
        reserves = pool_balances_to_numeraire(pair)
        with localcontext(fx_context()):
            max_limit = (1 + pair.curve.alpha) * reserves.total_liquidity * _HALF
            if swap_type == SwapType.EXACT_IN:
                headroom = max_limit - reserves.token_in_reserves
                raw = numeraire_to_token_in(pair, headroom)
            else:
                headroom = max_limit - reserves.token_out_reserves
                raw = numeraire_to_token_out(pair, headroom)
            limit = int(raw.to_integral_value(rounding=ROUND_FLOOR))
    except (ArithmeticError, ValueError, TypeError) as e:
        raise LimitError(f"Cannot compute swap limit for pool {pair.id}: {e!r}") from e

    return max(limit, 0)


def max_swap_amount(pair: FxPoolPairData, swap_type: SwapType) -> int:
    """Swap limit that never raises; 0 when the limit is not computable."""
    try:
        return compute_limit_amount(pair, swap_type)
    except LimitError as e:
        logger.debug(
            "fx_limit_failed",
            pool_id=pair.id,
            swap_type=swap_type.value,
            error=str(e),
        )
        return 0
