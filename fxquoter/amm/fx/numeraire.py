"""Numeraire conversion for FX pools.

The curve compares assets in a shared accounting unit (the numeraire)
using each token's oracle FX rate. Conversions mirror the contract's
assimilators:

    to numeraire:   amount * rate / 10^oracleDecimals / 10^tokenDecimals
    from numeraire: amount * 10^tokenDecimals * 10^oracleDecimals / rate

Results are unrounded Decimals; rounding to raw token units happens once,
at the quote boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext

from fxquoter.amm.base import SwapType
from fxquoter.math.fixed_point import fx_context

from .pools import FxPoolPairData


@dataclass(frozen=True)
class ReservesInNumeraire:
    """Pair reserves expressed in numeraire.

    Attributes:
        token_in_reserves: token_in balance in numeraire
        token_out_reserves: token_out balance in numeraire
        total_liquidity: Sum of both (oGLiq)
    """

    token_in_reserves: Decimal
    token_out_reserves: Decimal
    total_liquidity: Decimal


def view_numeraire_amount(
    amount: int | Decimal,
    token_decimals: int,
    rate: int,
    oracle_decimals: int,
) -> Decimal:
    """Convert a raw token amount to numeraire.

    Args:
        amount: Amount in the token's raw units
        token_decimals: Token decimals
        rate: Oracle rate scaled by 10^oracle_decimals
        oracle_decimals: Oracle decimals

    Returns:
        Amount in numeraire
    """
    with localcontext(fx_context()):
        return Decimal(amount) * rate / Decimal(10) ** oracle_decimals / Decimal(10) ** token_decimals


def view_raw_amount(
    amount: Decimal,
    token_decimals: int,
    rate: int,
    oracle_decimals: int,
) -> Decimal:
    """Convert a numeraire amount back to raw token units (unrounded).

    Raises:
        decimal.DivisionByZero: If rate is zero
    """
    with localcontext(fx_context()):
        return Decimal(amount) * Decimal(10) ** token_decimals * Decimal(10) ** oracle_decimals / rate


def token_in_to_numeraire(pair: FxPoolPairData, amount: int | Decimal) -> Decimal:
    """Convert a raw token_in amount to numeraire."""
    return view_numeraire_amount(
        amount, pair.decimals_in, pair.token_in_rate, pair.token_in_oracle_decimals
    )


def token_out_to_numeraire(pair: FxPoolPairData, amount: int | Decimal) -> Decimal:
    """Convert a raw token_out amount to numeraire."""
    return view_numeraire_amount(
        amount, pair.decimals_out, pair.token_out_rate, pair.token_out_oracle_decimals
    )


def numeraire_to_token_in(pair: FxPoolPairData, amount: Decimal) -> Decimal:
    """Convert a numeraire amount to raw token_in units."""
    return view_raw_amount(amount, pair.decimals_in, pair.token_in_rate, pair.token_in_oracle_decimals)


def numeraire_to_token_out(pair: FxPoolPairData, amount: Decimal) -> Decimal:
    """Convert a numeraire amount to raw token_out units."""
    return view_raw_amount(
        amount, pair.decimals_out, pair.token_out_rate, pair.token_out_oracle_decimals
    )


def given_amount_in_numeraire(
    pair: FxPoolPairData,
    amount: int | Decimal,
    swap_type: SwapType,
) -> Decimal:
    """Convert the caller-fixed side of a swap to numeraire.

    token_in is given for exact-in swaps, token_out for exact-out swaps.
    """
    if swap_type == SwapType.EXACT_IN:
        return token_in_to_numeraire(pair, amount)
    return token_out_to_numeraire(pair, amount)


def pool_balances_to_numeraire(pair: FxPoolPairData) -> ReservesInNumeraire:
    """Express both pair reserves and their sum (oGLiq) in numeraire."""
    token_in_reserves = token_in_to_numeraire(pair, pair.balance_in)
    token_out_reserves = token_out_to_numeraire(pair, pair.balance_out)
    with localcontext(fx_context()):
        total = token_in_reserves + token_out_reserves
    return ReservesInNumeraire(
        token_in_reserves=token_in_reserves,
        token_out_reserves=token_out_reserves,
        total_liquidity=total,
    )
