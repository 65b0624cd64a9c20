"""Tests for FX pool curve math.

This module tests:
- Micro fee and total fee (omega/psi)
- Halt and swap invariant enforcement
- The trade fixed-point iteration
- Exact-in / exact-out quotes, including epsilon and rounding
"""

from decimal import Decimal

import pytest

from fxquoter.amm.base import SwapType
from fxquoter.amm.fx import (
    CannotSwap,
    CurveDomainError,
    CurveParams,
    FxCurveConfig,
    FxPool,
    FxPoolPairData,
    LowerHalt,
    MathError,
    SwapConvergenceFailed,
    SwapInvariantViolation,
    UpperHalt,
    calculate_fee,
    calculate_micro_fee,
    calculate_trade,
    enforce_halts,
    enforce_swap_invariant,
    exact_token_in_for_token_out,
    solve_trade,
    token_in_for_exact_token_out,
)
from tests.helpers import ONE_TOKEN, TOKEN_A, TOKEN_B

BETA = Decimal("0.48")
DELTA = Decimal("0.4")
ALPHA = Decimal("0.8")
HALF = (Decimal("0.5"), Decimal("0.5"))

CURVE = CurveParams(
    alpha=ALPHA,
    beta=BETA,
    lambda_=Decimal("0.3"),
    delta=DELTA,
    epsilon=Decimal("0.002"),
)


class TestMicroFee:
    """Tests for calculate_micro_fee and calculate_fee."""

    def test_inside_band_is_free(self) -> None:
        """Balances within ideal * (1 +/- beta) pay nothing."""
        assert calculate_micro_fee(Decimal(500), Decimal(800), BETA, DELTA) == 0
        assert calculate_micro_fee(Decimal(1100), Decimal(800), BETA, DELTA) == 0

    def test_below_band(self) -> None:
        """300 vs a lower threshold of 416: margin 116, rate 0.058."""
        assert calculate_micro_fee(Decimal(300), Decimal(800), BETA, DELTA) == Decimal("6.728")

    def test_above_band(self) -> None:
        """1300 vs an upper threshold of 1184: margin 116, rate 0.058."""
        assert calculate_micro_fee(Decimal(1300), Decimal(800), BETA, DELTA) == Decimal("6.728")

    def test_fee_rate_capped(self) -> None:
        """The per-unit rate never exceeds 0.25."""
        fee = calculate_micro_fee(Decimal(300), Decimal(800), BETA, Decimal(10))
        assert fee == Decimal("0.25") * 116

    def test_total_fee(self) -> None:
        """calculate_fee sums the micro fee of every balance."""
        psi = calculate_fee(Decimal(1600), [Decimal(1300), Decimal(300)], BETA, DELTA, HALF)
        assert psi == Decimal("13.456")

    def test_balanced_pool_has_no_fee(self) -> None:
        psi = calculate_fee(Decimal(2000), [Decimal(1000), Decimal(1000)], BETA, DELTA, HALF)
        assert psi == 0


class TestEnforceHalts:
    """Tests for enforce_halts."""

    def test_crossing_upper_halt(self) -> None:
        """A balance pushed above (1 + alpha) * ideal halts."""
        with pytest.raises(UpperHalt):
            enforce_halts(
                Decimal(1000),
                Decimal(1000),
                [Decimal(500), Decimal(500)],
                [Decimal(950), Decimal(50)],
                HALF,
                ALPHA,
            )

    def test_crossing_lower_halt(self) -> None:
        """A balance pushed below (1 - alpha) * ideal halts."""
        with pytest.raises(LowerHalt):
            enforce_halts(
                Decimal(1000),
                Decimal(1000),
                [Decimal(500), Decimal(500)],
                [Decimal(880), Decimal(80)],
                HALF,
                ALPHA,
            )

    def test_moving_back_from_halt_allowed(self) -> None:
        """A pool already past its halt may trade back toward the ideal."""
        enforce_halts(
            Decimal(1000),
            Decimal(1000),
            [Decimal(950), Decimal(50)],
            [Decimal(920), Decimal(80)],
            HALF,
            ALPHA,
        )

    def test_moving_further_past_halt(self) -> None:
        """A pool already past its halt may not move further away."""
        with pytest.raises(UpperHalt, match="further"):
            enforce_halts(
                Decimal(1000),
                Decimal(1000),
                [Decimal(920), Decimal(80)],
                [Decimal(950), Decimal(50)],
                HALF,
                ALPHA,
            )


class TestEnforceSwapInvariant:
    """Tests for enforce_swap_invariant."""

    def test_unchanged_utility_passes(self) -> None:
        enforce_swap_invariant(Decimal(100), Decimal(0), Decimal(100), Decimal(0))

    def test_tiny_decrease_tolerated(self) -> None:
        """Decreases smaller than MAX_DIFF (about 1e-6) pass."""
        enforce_swap_invariant(Decimal(100), Decimal(0), Decimal("99.9999999"), Decimal(0))

    def test_drop_of_exactly_max_diff_accepted(self) -> None:
        """A utility drop equal to MAX_DIFF is still accepted."""
        max_diff = FxCurveConfig().max_diff
        enforce_swap_invariant(Decimal(0), Decimal(0), max_diff, Decimal(0), max_diff)

    def test_drop_just_past_max_diff_rejected(self) -> None:
        max_diff = FxCurveConfig().max_diff
        with pytest.raises(SwapInvariantViolation):
            enforce_swap_invariant(
                Decimal(0), Decimal(0), max_diff - Decimal("1e-30"), Decimal(0), max_diff
            )

    def test_decrease_rejected(self) -> None:
        with pytest.raises(SwapInvariantViolation):
            enforce_swap_invariant(Decimal(100), Decimal(0), Decimal(99), Decimal(0))


class TestCalculateTrade:
    """Tests for the trade iteration."""

    def test_fee_free_trade_is_closed_form(self) -> None:
        """Inside the beta band the output equals the input."""
        result = calculate_trade(
            Decimal(2000),
            Decimal(2000),
            (Decimal(1000), Decimal(1000)),
            (Decimal(1100), Decimal(900)),
            Decimal(100),
            1,
            CURVE,
        )
        assert result.amount == -100
        assert result.new_liquidity == 2000
        assert result.new_balances == (Decimal(1100), Decimal(900))
        assert result.omega == 0
        assert result.psi == 0

    def test_convergence_failure(self) -> None:
        """Hitting the iteration bound raises SwapConvergenceFailed."""
        with pytest.raises(SwapConvergenceFailed):
            calculate_trade(
                Decimal(2000),
                Decimal(2000),
                (Decimal(1000), Decimal(1000)),
                (Decimal(1100), Decimal(900)),
                Decimal(100),
                1,
                CURVE,
                FxCurveConfig(max_iterations=0),
            )

    def test_empty_reserve_is_out_of_domain(self) -> None:
        with pytest.raises(CurveDomainError):
            calculate_trade(
                Decimal(1000),
                Decimal(1000),
                (Decimal(1000), Decimal(0)),
                (Decimal(1100), Decimal(-100)),
                Decimal(100),
                1,
                CURVE,
            )

    def test_penalized_trade_pays_fee(self, imbalanced_pair: FxPoolPairData) -> None:
        """Selling the surplus token returns less numeraire than it puts in."""
        result = solve_trade(imbalanced_pair, 1000 * ONE_TOKEN, SwapType.EXACT_IN)
        assert -1000 < result.amount < 0
        assert result.psi > result.omega

    def test_rebalancing_trade_earns_rebate(self, imbalanced_pool: FxPool) -> None:
        """Selling the scarce token returns more numeraire than it puts in."""
        pair = imbalanced_pool.parse_pool_pair_data(TOKEN_B, TOKEN_A)
        result = solve_trade(pair, 1000 * ONE_TOKEN, SwapType.EXACT_IN)
        assert result.amount < -1000
        assert result.psi < result.omega


class TestExactTokenInForTokenOut:
    """Tests for exact_token_in_for_token_out."""

    def test_reference_quote(self, pair_ab: FxPoolPairData) -> None:
        """1000 A -> 998 numeraire after epsilon -> 998 / 1.08 B, rounded down."""
        assert exact_token_in_for_token_out(pair_ab, 1000 * ONE_TOKEN) == 924_074_074_074_074_074_074

    def test_zero_amount(self, pair_ab: FxPoolPairData) -> None:
        assert exact_token_in_for_token_out(pair_ab, 0) == 0

    def test_negative_amount(self, pair_ab: FxPoolPairData) -> None:
        with pytest.raises(CannotSwap):
            exact_token_in_for_token_out(pair_ab, -1)

    def test_same_token_is_identity(self, fx_pool: FxPool) -> None:
        """Swapping a token for itself returns the amount unchanged."""
        pair = fx_pool.parse_pool_pair_data(TOKEN_A, TOKEN_A)
        assert exact_token_in_for_token_out(pair, 12345) == 12345

    def test_amount_beyond_reserves(self, pair_ab: FxPoolPairData) -> None:
        """An input worth more than the token_out reserve cannot be quoted."""
        with pytest.raises(MathError):
            exact_token_in_for_token_out(pair_ab, 2_000_000 * ONE_TOKEN)

    def test_amount_past_halt(self, pair_ab: FxPoolPairData) -> None:
        """An input well past the swap limit cannot be quoted."""
        with pytest.raises(MathError):
            exact_token_in_for_token_out(pair_ab, 960_000 * ONE_TOKEN)

    def test_penalized_direction(self, imbalanced_pair: FxPoolPairData) -> None:
        """Both tokens at 1.0: selling the surplus gives back fewer tokens."""
        assert 0 < exact_token_in_for_token_out(imbalanced_pair, 1000 * ONE_TOKEN) < 1000 * ONE_TOKEN


class TestTokenInForExactTokenOut:
    """Tests for token_in_for_exact_token_out."""

    def test_reference_quote(self, pair_ab: FxPoolPairData) -> None:
        """100 B = 108 numeraire, plus epsilon: 108.216 A."""
        assert token_in_for_exact_token_out(pair_ab, 100 * ONE_TOKEN) == 108_216 * 10**15

    def test_rounds_up(self, pair_ab: FxPoolPairData) -> None:
        """A fractional raw input is rounded up."""
        # 1 wei of B is 1.08 wei of numeraire; with epsilon 1.08216 wei of A
        assert token_in_for_exact_token_out(pair_ab, 1) == 2

    def test_negative_amount(self, pair_ab: FxPoolPairData) -> None:
        with pytest.raises(CannotSwap):
            token_in_for_exact_token_out(pair_ab, -1)

    def test_same_token_is_identity(self, fx_pool: FxPool) -> None:
        pair = fx_pool.parse_pool_pair_data(TOKEN_B, TOKEN_B)
        assert token_in_for_exact_token_out(pair, 777) == 777


class TestRoundTrip:
    """in_for_out(out_for_in(A)) never exceeds A."""

    @pytest.mark.parametrize("amount", [1, 10**6, ONE_TOKEN, 1000 * ONE_TOKEN, 50_000 * ONE_TOKEN])
    def test_reference_pool(self, pair_ab: FxPoolPairData, amount: int) -> None:
        out = exact_token_in_for_token_out(pair_ab, amount)
        assert token_in_for_exact_token_out(pair_ab, out) <= amount

    @pytest.mark.parametrize("amount", [ONE_TOKEN, 1000 * ONE_TOKEN, 10_000 * ONE_TOKEN])
    def test_imbalanced_pool(self, imbalanced_pair: FxPoolPairData, amount: int) -> None:
        out = exact_token_in_for_token_out(imbalanced_pair, amount)
        assert token_in_for_exact_token_out(imbalanced_pair, out) <= amount

    def test_imbalanced_pool_rebalancing_direction(self, imbalanced_pool: FxPool) -> None:
        pair = imbalanced_pool.parse_pool_pair_data(TOKEN_B, TOKEN_A)
        amount = 1000 * ONE_TOKEN
        out = exact_token_in_for_token_out(pair, amount)
        assert token_in_for_exact_token_out(pair, out) <= amount
