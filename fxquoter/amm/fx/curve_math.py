"""FX pool curve math.

Replicates the FX pool's CurveMath contract over numeraire balances. The
pool targets equal numeraire weights; balances outside the beta band pay a
micro fee (psi), and balances outside the alpha band halt the pool. A trade
is solved with a bounded fixed-point iteration:

    out = -(in + (omega - psi))           if omega < psi
    out = -(in + lambda * (omega - psi))  otherwise

where omega is the fee of the pre-trade state and psi the fee of the
post-trade state. When neither state pays a fee the first step is the
exact answer.

Balances are ordered [token_in, token_out] throughout.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, Decimal, DecimalException, localcontext

from fxquoter.amm.base import SwapType
from fxquoter.constants import CURVEMATH_MAX, TWO_64
from fxquoter.math.fixed_point import div_trunc, fx_context
from fxquoter.models.types import is_same_address

from .config import DEFAULT_CURVE_CONFIG, FxCurveConfig
from .errors import (
    CannotSwap,
    CurveDomainError,
    LowerHalt,
    MathError,
    SwapConvergenceFailed,
    SwapInvariantViolation,
    UpperHalt,
)
from .numeraire import (
    given_amount_in_numeraire,
    numeraire_to_token_in,
    numeraire_to_token_out,
    pool_balances_to_numeraire,
)
from .pools import CurveParams, FxPoolPairData

ONE = Decimal(1)
ZERO = Decimal(0)


@dataclass(frozen=True)
class CurveState:
    """Pre-trade and initial post-trade numeraire state for one query.

    Attributes:
        old_liquidity: Total numeraire liquidity before the trade (oGLiq)
        new_liquidity: Initial guess for liquidity after the trade (nGLiq)
        old_balances: Numeraire balances before the trade
        new_balances: Initial guess for balances after the trade
        given_amount: The caller-fixed amount in numeraire
    """

    old_liquidity: Decimal
    new_liquidity: Decimal
    old_balances: tuple[Decimal, Decimal]
    new_balances: tuple[Decimal, Decimal]
    given_amount: Decimal


@dataclass(frozen=True)
class TradeResult:
    """Converged trade in numeraire.

    Attributes:
        amount: Signed amount applied to the output index (negative when the
            pool pays out, positive when the pool receives)
        new_liquidity: Total liquidity after the trade
        new_balances: Balances after the trade
        omega: Fee of the pre-trade state
        psi: Fee of the post-trade state
    """

    amount: Decimal
    new_liquidity: Decimal
    new_balances: tuple[Decimal, Decimal]
    omega: Decimal
    psi: Decimal


@contextmanager
def curve_math_context() -> Iterator[None]:
    """Run curve math under the FX decimal context.

    Decimal arithmetic faults (division by zero, invalid operations) are
    re-raised as MathError.
    """
    with localcontext(fx_context()):
        try:
            yield
        except (DecimalException, ZeroDivisionError) as e:
            raise MathError(f"Arithmetic fault in curve math: {e!r}") from e


def calculate_micro_fee(
    balance: Decimal,
    ideal: Decimal,
    beta: Decimal,
    delta: Decimal,
    max_fee: Decimal = CURVEMATH_MAX,
) -> Decimal:
    """Fee owed by one balance for sitting outside the beta band.

    Inside [ideal * (1 - beta), ideal * (1 + beta)] there is no fee. Outside,
    the fee is min(delta * margin / ideal, max_fee) * margin where margin is
    the distance to the band edge.
    """
    if balance < ideal:
        threshold = ideal * (ONE - beta)
        if balance >= threshold:
            return ZERO
        margin = threshold - balance
    else:
        threshold = ideal * (ONE + beta)
        if balance <= threshold:
            return ZERO
        margin = balance - threshold

    fee_rate = min(margin / ideal * delta, max_fee)
    return fee_rate * margin


def calculate_fee(
    liquidity: Decimal,
    balances: Sequence[Decimal],
    beta: Decimal,
    delta: Decimal,
    weights: Sequence[Decimal],
    max_fee: Decimal = CURVEMATH_MAX,
) -> Decimal:
    """Total micro fee of a pool state (omega before a trade, psi after)."""
    psi = ZERO
    for balance, weight in zip(balances, weights, strict=True):
        psi += calculate_micro_fee(balance, liquidity * weight, beta, delta, max_fee)
    return psi


def enforce_halts(
    old_liquidity: Decimal,
    new_liquidity: Decimal,
    old_balances: Sequence[Decimal],
    new_balances: Sequence[Decimal],
    weights: Sequence[Decimal],
    alpha: Decimal,
) -> None:
    """Reject trades that push a balance past the alpha band.

    A balance may end beyond its halt only if it was already beyond it and
    the trade moves it back toward the ideal.

    Raises:
        UpperHalt: A balance ends above (1 + alpha) * ideal
        LowerHalt: A balance ends below (1 - alpha) * ideal
    """
    for i, weight in enumerate(weights):
        new_ideal = new_liquidity * weight

        if new_balances[i] > new_ideal:
            upper = ONE + alpha
            new_halt = new_ideal * upper
            if new_balances[i] > new_halt:
                old_halt = old_liquidity * weight * upper
                if old_balances[i] < old_halt:
                    raise UpperHalt(f"Balance {i} crosses the upper halt")
                if new_balances[i] - new_halt > old_balances[i] - old_halt:
                    raise UpperHalt(f"Balance {i} moves further past the upper halt")
        else:
            lower = ONE - alpha
            new_halt = new_ideal * lower
            if new_balances[i] < new_halt:
                old_halt = old_liquidity * weight * lower
                if old_balances[i] > old_halt:
                    raise LowerHalt(f"Balance {i} crosses the lower halt")
                if new_halt - new_balances[i] > old_halt - old_balances[i]:
                    raise LowerHalt(f"Balance {i} moves further past the lower halt")


def enforce_swap_invariant(
    old_liquidity: Decimal,
    omega: Decimal,
    new_liquidity: Decimal,
    psi: Decimal,
    max_diff: Decimal = DEFAULT_CURVE_CONFIG.max_diff,
) -> None:
    """Reject trades that lower pool utility (liquidity minus fee) past max_diff.

    Raises:
        SwapInvariantViolation: If the utility drop exceeds the tolerance
    """
    next_util = new_liquidity - psi
    prev_util = old_liquidity - omega
    diff = next_util - prev_util

    if not (diff > 0 or diff >= max_diff):
        raise SwapInvariantViolation(f"Utility decreased by {-diff}")


def _ensure_in_domain(balances: Sequence[Decimal]) -> None:
    for i, balance in enumerate(balances):
        if balance <= 0:
            raise CurveDomainError(f"Numeraire balance {i} is not positive: {balance}")


def _convergence_key(amount: Decimal, divisor: int) -> int:
    """Truncate to 64.64 raw units, then divide like the contract's int128 math."""
    raw = int((amount * TWO_64).to_integral_value(rounding=ROUND_DOWN))
    return div_trunc(raw, divisor)


def calculate_trade(
    old_liquidity: Decimal,
    new_liquidity: Decimal,
    old_balances: Sequence[Decimal],
    new_balances: Sequence[Decimal],
    input_amount: Decimal,
    output_index: int,
    curve: CurveParams,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> TradeResult:
    """Solve the curve for the amount at output_index.

    Algorithm:
        1. omega = fee of the old state
        2. psi = fee of the current guess of the new state
        3. out = -(in + (omega - psi)) or -(in + lambda * (omega - psi))
        4. Update new liquidity and the output balance
        5. Stop when out agrees with the previous step at 1e13 64.64 units
        6. Max iterations: 32

    Args:
        old_liquidity: oGLiq
        new_liquidity: Initial guess for nGLiq
        old_balances: Balances before the trade
        new_balances: Initial guess for balances after the trade; the input
            side already includes input_amount
        input_amount: Signed numeraire amount entering the pool
        output_index: Index of the balance solved for
        curve: Decoded curve parameters
        config: Curve math configuration

    Returns:
        The converged TradeResult

    Raises:
        CurveDomainError: If a balance is zero or negative
        SwapConvergenceFailed: If the iteration doesn't converge
        UpperHalt, LowerHalt: If the trade enters a halt region
        SwapInvariantViolation: If pool utility decreases
    """
    _ensure_in_domain(old_balances)
    _ensure_in_domain(new_balances)

    weights = config.weights
    omega = calculate_fee(old_liquidity, old_balances, curve.beta, curve.delta, weights, config.max_fee)

    balances = list(new_balances)
    liquidity = new_liquidity
    output_amount = -input_amount

    for _ in range(config.max_iterations):
        psi = calculate_fee(liquidity, balances, curve.beta, curve.delta, weights, config.max_fee)

        prev_amount = output_amount
        if omega < psi:
            output_amount = -(input_amount + omega - psi)
        else:
            output_amount = -(input_amount + curve.lambda_ * (omega - psi))

        liquidity = old_liquidity + input_amount + output_amount
        balances[output_index] = old_balances[output_index] + output_amount

        if _convergence_key(output_amount, config.convergence_divisor) == _convergence_key(
            prev_amount, config.convergence_divisor
        ):
            _ensure_in_domain(balances)
            enforce_halts(old_liquidity, liquidity, old_balances, balances, weights, curve.alpha)
            enforce_swap_invariant(old_liquidity, omega, liquidity, psi, config.max_diff)
            return TradeResult(
                amount=output_amount,
                new_liquidity=liquidity,
                new_balances=(balances[0], balances[1]),
                omega=omega,
                psi=psi,
            )

    raise SwapConvergenceFailed(
        f"Curve trade did not converge after {config.max_iterations} iterations"
    )


def build_curve_state(
    pair: FxPoolPairData,
    amount: int | Decimal,
    swap_type: SwapType,
) -> CurveState:
    """Convert pair reserves and the given amount into the solver's starting state.

    The initial guess moves the given amount from token_out to token_in;
    the iteration then overwrites the side being solved for.
    """
    reserves = pool_balances_to_numeraire(pair)
    given = given_amount_in_numeraire(pair, amount, swap_type)
    old_balances = (reserves.token_in_reserves, reserves.token_out_reserves)
    return CurveState(
        old_liquidity=reserves.total_liquidity,
        new_liquidity=reserves.total_liquidity,
        old_balances=old_balances,
        new_balances=(old_balances[0] + given, old_balances[1] - given),
        given_amount=given,
    )


def solve_trade(
    pair: FxPoolPairData,
    amount: int | Decimal,
    swap_type: SwapType,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> TradeResult:
    """Solve the curve for a swap of `amount` in the given direction.

    Exact-in swaps feed token_in and solve for token_out (index 1).
    Exact-out swaps remove token_out and solve for token_in (index 0).
    """
    if amount < 0:
        raise CannotSwap(f"Swap amount must be non-negative, got {amount}")

    with curve_math_context():
        state = build_curve_state(pair, amount, swap_type)
        if swap_type == SwapType.EXACT_IN:
            input_amount, output_index = state.given_amount, 1
        else:
            input_amount, output_index = -state.given_amount, 0

        return calculate_trade(
            state.old_liquidity,
            state.new_liquidity,
            state.old_balances,
            state.new_balances,
            input_amount,
            output_index,
            pair.curve,
            config,
        )


def exact_token_in_for_token_out(
    pair: FxPoolPairData,
    amount: int,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> int:
    """Calculate the token_out received for an exact token_in amount (origin swap).

    The pool keeps epsilon of the numeraire output as its fee.

    Args:
        pair: Pair data for the query
        amount: Raw token_in amount
        config: Curve math configuration

    Returns:
        Raw token_out amount, rounded down

    Raises:
        MathError: If the curve cannot be solved for this trade
    """
    if amount < 0:
        raise CannotSwap(f"Swap amount must be non-negative, got {amount}")
    if is_same_address(pair.token_in, pair.token_out):
        return amount

    trade = solve_trade(pair, amount, SwapType.EXACT_IN, config)
    if trade.amount > 0:
        raise CannotSwap("Pool would receive token_out on an exact-in swap")

    with curve_math_context():
        amount_with_fee = -trade.amount * (ONE - pair.curve.epsilon)
        raw_out = numeraire_to_token_out(pair, amount_with_fee)
        return int(raw_out.to_integral_value(rounding=ROUND_FLOOR))


def token_in_for_exact_token_out(
    pair: FxPoolPairData,
    amount: int,
    config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
) -> int:
    """Calculate the token_in required for an exact token_out amount (target swap).

    The pool adds epsilon on top of the numeraire input as its fee.

    Args:
        pair: Pair data for the query
        amount: Raw token_out amount
        config: Curve math configuration

    Returns:
        Raw token_in amount, rounded up

    Raises:
        MathError: If the curve cannot be solved for this trade
    """
    if amount < 0:
        raise CannotSwap(f"Swap amount must be non-negative, got {amount}")
    if is_same_address(pair.token_in, pair.token_out):
        return amount

    trade = solve_trade(pair, amount, SwapType.EXACT_OUT, config)
    if trade.amount < 0:
        raise CannotSwap("Pool would pay token_in on an exact-out swap")

    with curve_math_context():
        amount_with_fee = trade.amount * (ONE + pair.curve.epsilon)
        raw_in = numeraire_to_token_in(pair, amount_with_fee)
        return int(raw_in.to_integral_value(rounding=ROUND_CEILING))
