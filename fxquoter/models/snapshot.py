"""Pydantic models for upstream FX pool snapshots.

The data layer supplies pools in the subgraph's shape (camelCase keys,
decimal strings for balances and prices). These models validate that
shape before an FxPool is built from it.
"""

from pydantic import BaseModel, Field

from fxquoter.models.types import Address, DecimalString


class TokenOracleSnapshot(BaseModel):
    """Oracle quote attached to a pool token.

    Both fields are optional in the snapshot; pair parsing rejects a token
    that lacks either one.
    """

    latest_fx_price: DecimalString | None = Field(default=None, alias="latestFXPrice")
    fx_oracle_decimals: int | None = Field(default=None, alias="fxOracleDecimals", ge=0, le=77)

    model_config = {"populate_by_name": True}


class TokenSnapshot(BaseModel):
    """A token held by the pool."""

    address: Address
    balance: DecimalString = Field(description="Balance in whole token units, e.g. '1000000.5'")
    decimals: int = Field(ge=0, le=77)
    token: TokenOracleSnapshot | None = None

    model_config = {"populate_by_name": True}


class PoolSnapshot(BaseModel):
    """An FX pool as reported by the data layer.

    Curve parameters are optional here because the data layer may omit them;
    FxPool.from_snapshot raises StructuralError when any is missing.
    """

    id: str
    address: Address
    swap_fee: DecimalString = Field(alias="swapFee")
    total_shares: DecimalString = Field(alias="totalShares")
    tokens: list[TokenSnapshot]
    tokens_list: list[Address] = Field(default_factory=list, alias="tokensList")
    alpha: DecimalString | None = None
    beta: DecimalString | None = None
    lambda_: DecimalString | None = Field(default=None, alias="lambda")
    delta: DecimalString | None = None
    epsilon: DecimalString | None = None

    model_config = {"populate_by_name": True}
