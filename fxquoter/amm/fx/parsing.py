"""FX pool parsing.

Functions to build pool state from upstream snapshots and to derive the
per-query pair data the curve math runs on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from fxquoter.amm.base import PoolType
from fxquoter.math.fixed_point import parse_fixed, parse_fixed_curve_param
from fxquoter.models.snapshot import PoolSnapshot
from fxquoter.models.types import normalize_address

from .errors import StructuralError
from .pools import CurveParams, FxPoolPairData, FxToken, OracleQuote

if TYPE_CHECKING:
    from .pool import FxPool

_CURVE_FIELDS = ("alpha", "beta", "lambda_", "delta", "epsilon")


def validate_snapshot(snapshot: PoolSnapshot | dict[str, Any]) -> PoolSnapshot:
    """Validate a raw snapshot dict, passing models through unchanged.

    Raises:
        StructuralError: If the snapshot does not match the subgraph shape
    """
    if isinstance(snapshot, PoolSnapshot):
        return snapshot
    try:
        return PoolSnapshot.model_validate(snapshot)
    except ValidationError as e:
        raise StructuralError(f"Invalid FX pool snapshot: {e}") from e


def parse_curve_params(snapshot: PoolSnapshot) -> CurveParams:
    """Decode the five curve parameters as the contract stores them.

    Raises:
        StructuralError: If any curve parameter is missing or malformed
    """
    raw = {name: getattr(snapshot, name) for name in _CURVE_FIELDS}
    if any(value is None for value in raw.values()):
        raise StructuralError("FX Pool Missing Subgraph Field")

    try:
        decoded = {name: parse_fixed_curve_param(value) for name, value in raw.items()}
    except ValueError as e:
        raise StructuralError(f"Invalid FX pool curve parameter: {e}") from e
    return CurveParams(**decoded)


def parse_tokens(snapshot: PoolSnapshot) -> list[FxToken]:
    """Convert snapshot tokens to FxToken, keeping oracle data as reported."""
    tokens = []
    for token in snapshot.tokens:
        oracle = None
        if token.token is not None:
            oracle = OracleQuote(
                latest_fx_price=token.token.latest_fx_price,
                fx_oracle_decimals=token.token.fx_oracle_decimals,
            )
        tokens.append(
            FxToken(
                address=normalize_address(token.address),
                balance=token.balance,
                decimals=token.decimals,
                oracle=oracle,
            )
        )
    return tokens


def _parse_amount(value: str, decimals: int, what: str) -> int:
    try:
        return parse_fixed(value, decimals)
    except ValueError as e:
        raise StructuralError(f"Invalid {what}: {e}") from e


def parse_pool_pair_data(pool: FxPool, token_in: str, token_out: str) -> FxPoolPairData:
    """Build the pair data for one (token_in, token_out) query.

    Args:
        pool: The FX pool
        token_in: Address of the token sent to the pool
        token_out: Address of the token received from the pool

    Returns:
        FxPoolPairData with raw balances and raw oracle rates

    Raises:
        StructuralError: If a token is not in the pool or lacks oracle data
    """
    t_in = pool.get_token(token_in)
    t_out = pool.get_token(token_out)
    if t_in is None or t_out is None:
        raise StructuralError("Pool does not contain tokenIn/tokenOut")

    if (
        t_in.oracle is None
        or t_out.oracle is None
        or t_in.oracle.latest_fx_price is None
        or t_out.oracle.latest_fx_price is None
    ):
        raise StructuralError("FX Pool Missing LatestFxPrice")

    if t_in.oracle.fx_oracle_decimals is None or t_out.oracle.fx_oracle_decimals is None:
        raise StructuralError("FX Pool Missing tokenIn or tokenOut fxOracleDecimals")

    return FxPoolPairData(
        id=pool.id,
        address=pool.address,
        pool_type=PoolType.FX,
        token_in=t_in.address,
        token_out=t_out.address,
        decimals_in=t_in.decimals,
        decimals_out=t_out.decimals,
        balance_in=_parse_amount(t_in.balance, t_in.decimals, "tokenIn balance"),
        balance_out=_parse_amount(t_out.balance, t_out.decimals, "tokenOut balance"),
        swap_fee=pool.swap_fee,
        curve=pool.curve,
        token_in_rate=_parse_amount(
            t_in.oracle.latest_fx_price, t_in.oracle.fx_oracle_decimals, "tokenIn FX price"
        ),
        token_in_oracle_decimals=t_in.oracle.fx_oracle_decimals,
        token_out_rate=_parse_amount(
            t_out.oracle.latest_fx_price, t_out.oracle.fx_oracle_decimals, "tokenOut FX price"
        ),
        token_out_oracle_decimals=t_out.oracle.fx_oracle_decimals,
    )
