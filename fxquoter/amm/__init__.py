"""Pool implementations and the router-facing pool interface."""

from fxquoter.amm.base import PoolBase, PoolType, SwapType

__all__ = ["PoolBase", "PoolType", "SwapType"]
