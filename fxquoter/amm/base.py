"""Base types shared by pool implementations at the router boundary."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class SwapType(str, Enum):
    """Which side of the swap is fixed by the caller."""

    EXACT_IN = "exactIn"
    EXACT_OUT = "exactOut"


class PoolType(str, Enum):
    """Pool variants known to the router. This package implements FX only."""

    FX = "Fx"


@runtime_checkable
class PoolBase(Protocol):
    """Capability set the router expects from every pool variant.

    Pair data is derived per query and passed back into every quote method,
    so a pool never keeps per-query state. Quote methods return zero when a
    quote cannot be computed.
    """

    pool_type: PoolType
    id: str
    address: str

    def parse_pool_pair_data(self, token_in: str, token_out: str) -> Any:
        """Derive the per-query pair data for token_in -> token_out."""
        ...

    def get_normalized_liquidity(self, pair_data: Any) -> Decimal:
        """Liquidity metric: inverse of the price-impact steepness."""
        ...

    def get_limit_amount_swap(self, pair_data: Any, swap_type: SwapType) -> int:
        """Largest amount tradable in the given direction."""
        ...

    def update_token_balance_for_pool(self, token: str, new_balance: int) -> None:
        """Apply a balance change (pool token updates total shares)."""
        ...

    def exact_token_in_for_token_out(self, pair_data: Any, amount: int) -> int:
        """Output amount for an exact input."""
        ...

    def token_in_for_exact_token_out(self, pair_data: Any, amount: int) -> int:
        """Input amount for an exact output."""
        ...

    def spot_price_after_swap_exact_token_in_for_token_out(
        self, pair_data: Any, amount: int
    ) -> Decimal:
        """Marginal price after an exact-input swap of `amount`."""
        ...

    def spot_price_after_swap_token_in_for_exact_token_out(
        self, pair_data: Any, amount: int
    ) -> Decimal:
        """Marginal price after an exact-output swap of `amount`."""
        ...

    def derivative_spot_price_after_swap_exact_token_in_for_token_out(
        self, pair_data: Any, amount: int
    ) -> Decimal:
        """Rate of change of the exact-input spot price."""
        ...

    def derivative_spot_price_after_swap_token_in_for_exact_token_out(
        self, pair_data: Any, amount: int
    ) -> Decimal:
        """Rate of change of the exact-output spot price."""
        ...
