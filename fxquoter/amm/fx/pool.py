"""FX pool facade.

FxPool holds the pool state built from a snapshot and exposes the quote
interface the router consumes (see PoolBase). Curve math failures are
normal for pools near their halts; every quote method maps them to zero.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any, TypeVar

import structlog

from fxquoter.amm.base import PoolType, SwapType
from fxquoter.constants import CURVE_PARAM_DECIMALS
from fxquoter.math.fixed_point import format_fixed, parse_fixed
from fxquoter.models.snapshot import PoolSnapshot
from fxquoter.models.types import is_same_address, normalize_address

from . import curve_math, pricing
from .config import DEFAULT_CURVE_CONFIG, FxCurveConfig
from .errors import StructuralError
from .limits import max_swap_amount
from .numeraire import view_numeraire_amount
from .parsing import parse_curve_params, parse_pool_pair_data, parse_tokens, validate_snapshot
from .pools import CurveParams, FxPoolPairData, FxToken
from .result import evaluate

logger = structlog.get_logger()

T = TypeVar("T")


class FxPool:
    """An oracle-anchored FX curve pool.

    Attributes:
        id: Pool id
        address: Pool contract address (lowercase)
        swap_fee: Swap fee as an 18-decimal fixed int
        total_shares: Total pool shares as an 18-decimal fixed int
        tokens: Pool tokens
        tokens_list: Token addresses in pool order
        curve: Decoded curve parameters
        config: Curve math configuration
    """

    pool_type = PoolType.FX

    def __init__(
        self,
        id: str,
        address: str,
        swap_fee: str,
        total_shares: str,
        tokens: list[FxToken],
        tokens_list: list[str],
        curve: CurveParams,
        config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
    ) -> None:
        self.id = id
        self.address = normalize_address(address)
        self.swap_fee = parse_fixed(swap_fee, CURVE_PARAM_DECIMALS)
        self.total_shares = parse_fixed(total_shares, CURVE_PARAM_DECIMALS)
        self.tokens = tokens
        self.tokens_list = [normalize_address(t) for t in tokens_list]
        self.curve = curve
        self.config = config

    @classmethod
    def from_snapshot(
        cls,
        snapshot: PoolSnapshot | dict[str, Any],
        config: FxCurveConfig = DEFAULT_CURVE_CONFIG,
    ) -> FxPool:
        """Build a pool from a subgraph-shaped snapshot.

        Raises:
            StructuralError: If the snapshot is malformed or lacks a curve parameter
        """
        snapshot = validate_snapshot(snapshot)
        curve = parse_curve_params(snapshot)

        tokens_list = snapshot.tokens_list or [t.address for t in snapshot.tokens]
        try:
            return cls(
                id=snapshot.id,
                address=snapshot.address,
                swap_fee=snapshot.swap_fee,
                total_shares=snapshot.total_shares,
                tokens=parse_tokens(snapshot),
                tokens_list=tokens_list,
                curve=curve,
                config=config,
            )
        except ValueError as e:
            raise StructuralError(f"Invalid FX pool snapshot {snapshot.id}: {e}") from e

    def get_token(self, address: str) -> FxToken | None:
        """Find a pool token by address (case-insensitive)."""
        for token in self.tokens:
            if is_same_address(token.address, address):
                return token
        return None

    def parse_pool_pair_data(self, token_in: str, token_out: str) -> FxPoolPairData:
        """Derive the pair data for one token_in -> token_out query.

        Raises:
            StructuralError: If a token is not in the pool or lacks oracle data
        """
        return parse_pool_pair_data(self, token_in, token_out)

    def numeraire_reserves(self) -> dict[str, Decimal]:
        """Numeraire value of every pool token's balance, keyed by address.

        Raises:
            StructuralError: If a token lacks oracle data
        """
        reserves = {}
        for token in self.tokens:
            oracle = token.oracle
            if oracle is None or oracle.latest_fx_price is None or oracle.fx_oracle_decimals is None:
                raise StructuralError(f"FX Pool token {token.address} has no oracle data")
            try:
                balance = parse_fixed(token.balance, token.decimals)
                rate = parse_fixed(oracle.latest_fx_price, oracle.fx_oracle_decimals)
            except ValueError as e:
                raise StructuralError(f"Invalid FX pool token {token.address}: {e}") from e
            reserves[token.address] = view_numeraire_amount(
                balance, token.decimals, rate, oracle.fx_oracle_decimals
            )
        return reserves

    def total_numeraire_liquidity(self) -> Decimal:
        """Sum of all token reserves in numeraire."""
        return sum(self.numeraire_reserves().values(), Decimal(0))

    def _quote(self, method: str, default: T, fn: Callable[..., T], *args: Any) -> T:
        result = evaluate(fn, *args, self.config)
        if result.is_error:
            logger.debug(
                "fx_pool_quote_failed",
                pool_id=self.id,
                method=method,
                error=type(result.error).__name__,
                detail=str(result.error),
            )
        return result.unwrap_or(default)

    def exact_token_in_for_token_out(self, pair_data: FxPoolPairData, amount: int) -> int:
        """Raw token_out received for an exact raw token_in amount; 0 if not computable."""
        return self._quote(
            "exact_token_in_for_token_out",
            0,
            curve_math.exact_token_in_for_token_out,
            pair_data,
            amount,
        )

    def token_in_for_exact_token_out(self, pair_data: FxPoolPairData, amount: int) -> int:
        """Raw token_in required for an exact raw token_out amount; 0 if not computable."""
        return self._quote(
            "token_in_for_exact_token_out",
            0,
            curve_math.token_in_for_exact_token_out,
            pair_data,
            amount,
        )

    def spot_price_after_swap_exact_token_in_for_token_out(
        self, pair_data: FxPoolPairData, amount: int
    ) -> Decimal:
        return self._quote(
            "spot_price_after_swap_exact_token_in_for_token_out",
            Decimal(0),
            pricing.spot_price_after_swap,
            pair_data,
            amount,
            SwapType.EXACT_IN,
        )

    def spot_price_after_swap_token_in_for_exact_token_out(
        self, pair_data: FxPoolPairData, amount: int
    ) -> Decimal:
        return self._quote(
            "spot_price_after_swap_token_in_for_exact_token_out",
            Decimal(0),
            pricing.spot_price_after_swap,
            pair_data,
            amount,
            SwapType.EXACT_OUT,
        )

    def derivative_spot_price_after_swap_exact_token_in_for_token_out(
        self, pair_data: FxPoolPairData, amount: int
    ) -> Decimal:
        return self._quote(
            "derivative_spot_price_after_swap_exact_token_in_for_token_out",
            Decimal(0),
            pricing.derivative_spot_price_after_swap,
            pair_data,
            amount,
            SwapType.EXACT_IN,
        )

    def derivative_spot_price_after_swap_token_in_for_exact_token_out(
        self, pair_data: FxPoolPairData, amount: int
    ) -> Decimal:
        return self._quote(
            "derivative_spot_price_after_swap_token_in_for_exact_token_out",
            Decimal(0),
            pricing.derivative_spot_price_after_swap,
            pair_data,
            amount,
            SwapType.EXACT_OUT,
        )

    def get_normalized_liquidity(self, pair_data: FxPoolPairData) -> Decimal:
        """Inverse price-impact steepness in token_out; 0 if not computable."""
        return self._quote(
            "get_normalized_liquidity",
            Decimal(0),
            pricing.normalized_liquidity,
            pair_data,
        )

    def get_limit_amount_swap(self, pair_data: FxPoolPairData, swap_type: SwapType) -> int:
        """Largest raw amount of the given side before the pool halts; never negative."""
        return max_swap_amount(pair_data, swap_type)

    def update_token_balance_for_pool(self, token: str, new_balance: int) -> None:
        """Apply a post-trade balance.

        The pool's own address updates total_shares; a member token's balance
        is stored as a decimal string in that token's decimals.

        Raises:
            StructuralError: If the address is neither the pool nor a member token
        """
        if is_same_address(token, self.address):
            self.total_shares = new_balance
        else:
            member = self.get_token(token)
            if member is None:
                raise StructuralError(f"Token {token} is not in FX pool {self.id}")
            member.balance = format_fixed(new_balance, member.decimals)

        logger.debug(
            "fx_pool_balance_updated",
            pool_id=self.id,
            token=normalize_address(token),
            new_balance=new_balance,
        )

    # Joins and exits are not supported for FX pools
    def calc_tokens_out_given_exact_bpt_in(self, bpt_amount_in: int) -> list[int]:
        return [0] * len(self.tokens)

    def calc_bpt_out_given_exact_tokens_in(self, amounts_in: list[int]) -> int:
        return 0
