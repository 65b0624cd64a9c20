"""FX pool dataclasses.

Data structures for pool tokens, curve parameters and per-query pair data.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from fxquoter.amm.base import PoolType


@dataclass(frozen=True)
class CurveParams:
    """Decoded curve parameters (see parse_fixed_curve_param).

    Attributes:
        alpha: Halt band half-width; swaps stop beyond (1 +/- alpha) * ideal
        beta: Fee-free band half-width around the ideal balance
        lambda_: Share of the imbalance rebate paid back to the trader
        delta: Slope of the micro fee outside the beta band
        epsilon: Proportional swap fee retained by the pool
    """

    alpha: Decimal
    beta: Decimal
    lambda_: Decimal
    delta: Decimal
    epsilon: Decimal


@dataclass(frozen=True)
class OracleQuote:
    """Latest FX oracle reading for a token.

    Attributes:
        latest_fx_price: Price in numeraire as a decimal string (e.g. "1.08")
        fx_oracle_decimals: Decimals the oracle reports the price with
    """

    latest_fx_price: str | None
    fx_oracle_decimals: int | None


@dataclass
class FxToken:
    """A token held by an FX pool.

    Only `balance` changes after construction, through
    FxPool.update_token_balance_for_pool.

    Attributes:
        address: Token address
        balance: Balance in whole token units as a decimal string
        decimals: Token decimals; always used together with `balance`
        oracle: Oracle quote, or None if the data layer supplied none
    """

    address: str
    balance: str
    decimals: int
    oracle: OracleQuote | None = None


@dataclass(frozen=True)
class FxPoolPairData:
    """Per-query view of an FX pool for one (token_in, token_out) pair.

    Balances are raw integers in each token's own decimals. Oracle rates are
    raw integers scaled by the oracle decimals (1.08 at 8 decimals is
    108000000).
    """

    id: str
    address: str
    pool_type: PoolType
    token_in: str
    token_out: str
    decimals_in: int
    decimals_out: int
    balance_in: int
    balance_out: int
    swap_fee: int
    curve: CurveParams
    token_in_rate: int
    token_in_oracle_decimals: int
    token_out_rate: int
    token_out_oracle_decimals: int
