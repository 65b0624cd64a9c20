"""FX pool spot price and price sensitivity.

Spot prices are marginal rates of the curve at the reserve point reached
after a hypothetical trade, quoted as token_in per token_out in whole-token
units. The marginal numeraire rate comes from differentiating the trade
relation

    in + out + k * (omega - psi(balances)) = 0

where k is 1 while the trade adds fee (psi > omega) and lambda while it
earns a rebate. With g = grad(psi) over [token_in, token_out] balances:

    |d out| / d in = (1 - k * g_in) / (1 - k * g_out)
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from fxquoter.amm.base import SwapType
from fxquoter.constants import CURVEMATH_MAX
from fxquoter.models.types import is_same_address

from .config import DEFAULT_CURVE_CONFIG, FxCurveConfig
from .curve_math import ONE, ZERO, TradeResult, curve_math_context, solve_trade
from .errors import CannotSwap, CurveDomainError
from .numeraire import numeraire_to_token_out, pool_balances_to_numeraire
from .pools import CurveParams, FxPoolPairData


def fee_gradient(
    liquidity: Decimal,
    balances: Sequence[Decimal],
    beta: Decimal,
    delta: Decimal,
    weights: Sequence[Decimal],
    max_fee: Decimal = CURVEMATH_MAX,
) -> tuple[Decimal, ...]:
    """Partial derivatives of the total micro fee with respect to each balance.

    Liquidity is the sum of balances, so every ideal (liquidity * weight)
    moves with every balance.
    """
    gradient = [ZERO] * len(balances)

    for i, (balance, weight) in enumerate(zip(balances, weights, strict=True)):
        ideal = liquidity * weight

        # margin = sign * (balance - threshold); d threshold / d b_j = band * weight
        if balance < ideal:
            band = ONE - beta
            margin = ideal * band - balance
            sign = -1
        else:
            band = ONE + beta
            margin = balance - ideal * band
            sign = 1
        if margin <= 0:
            continue

        capped = margin / ideal * delta > max_fee
        for j in range(len(balances)):
            d_margin = sign * ((ONE if i == j else ZERO) - band * weight)
            if capped:
                gradient[j] += max_fee * d_margin
            else:
                # fee = delta * margin^2 / ideal
                gradient[j] += delta * (
                    2 * margin * d_margin / ideal - margin * margin * weight / (ideal * ideal)
                )

    return tuple(gradient)


def marginal_rate(
    trade: TradeResult,
    curve: CurveParams,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> Decimal:
    """Numeraire received per numeraire paid at the post-trade point.

    Raises:
        CurveDomainError: If the curve has no positive marginal rate here
    """
    g_in, g_out = fee_gradient(
        trade.new_liquidity,
        trade.new_balances,
        curve.beta,
        curve.delta,
        config.weights,
        config.max_fee,
    )

    if trade.psi > trade.omega:
        k = ONE
    elif trade.psi < trade.omega:
        k = curve.lambda_
    else:
        # On the boundary the direction of the next unit decides the regime
        rate_if_penalized = (ONE - g_in) / (ONE - g_out)
        k = ONE if g_in - g_out * rate_if_penalized > 0 else curve.lambda_

    rate = (ONE - k * g_in) / (ONE - k * g_out)
    if rate <= 0:
        raise CurveDomainError(f"Marginal rate is not positive: {rate}")
    return rate


def spot_price_after_swap(
    pair: FxPoolPairData,
    amount: int,
    swap_type: SwapType,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> Decimal:
    """Spot price (token_in per token_out) after swapping `amount`.

    Exact-in swaps charge epsilon on the output, exact-out swaps on the
    input, so the two directions quote slightly different prices.

    Args:
        pair: Pair data for the query
        amount: Raw amount of token_in (exact-in) or token_out (exact-out);
            zero gives the current price
        swap_type: Swap direction
        config: Curve math configuration

    Returns:
        Spot price in whole-token units

    Raises:
        MathError: If the curve cannot be solved at this point
    """
    if amount < 0:
        raise CannotSwap(f"Swap amount must be non-negative, got {amount}")
    if is_same_address(pair.token_in, pair.token_out):
        return ONE

    trade = solve_trade(pair, amount, swap_type, config)

    with curve_math_context():
        rate = marginal_rate(trade, pair.curve, config)
        rate_in = Decimal(pair.token_in_rate).scaleb(-pair.token_in_oracle_decimals)
        rate_out = Decimal(pair.token_out_rate).scaleb(-pair.token_out_oracle_decimals)
        epsilon = pair.curve.epsilon

        if swap_type == SwapType.EXACT_IN:
            return rate_out / (rate_in * rate * (ONE - epsilon))
        return rate_out * (ONE + epsilon) / (rate_in * rate)


def derivative_spot_price_after_swap(
    pair: FxPoolPairData,
    amount: int,
    swap_type: SwapType,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> Decimal:
    """Change in spot price per whole token traded, at `amount`.

    Forward difference over `config.derivative_step_tokens` whole tokens of
    the given side. Zero on flat stretches of the curve (inside the beta
    band the price does not move).

    Raises:
        MathError: If the curve cannot be solved at either point
    """
    decimals = pair.decimals_in if swap_type == SwapType.EXACT_IN else pair.decimals_out
    step_tokens = config.derivative_step_tokens
    step = step_tokens * 10**decimals

    price = spot_price_after_swap(pair, amount, swap_type, config)
    bumped_price = spot_price_after_swap(pair, amount + step, swap_type, config)

    with curve_math_context():
        return (bumped_price - price) / step_tokens


def normalized_liquidity(
    pair: FxPoolPairData,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> Decimal:
    """Liquidity metric in token_out: inverse of the zero-amount price derivative.

    Inside the fee-free band the derivative is exactly zero; the pool's total
    numeraire liquidity, expressed in whole token_out, is reported instead.

    Raises:
        MathError: If the derivative cannot be evaluated
    """
    derivative = derivative_spot_price_after_swap(pair, 0, SwapType.EXACT_IN, config)

    with curve_math_context():
        if derivative != 0:
            return ONE / abs(derivative)

        reserves = pool_balances_to_numeraire(pair)
        raw = numeraire_to_token_out(pair, reserves.total_liquidity)
        return raw.scaleb(-pair.decimals_out)
