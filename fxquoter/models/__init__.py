"""Pydantic models for upstream pool snapshots."""

from fxquoter.models.snapshot import PoolSnapshot, TokenOracleSnapshot, TokenSnapshot
from fxquoter.models.types import Address, DecimalString, is_same_address, normalize_address

__all__ = [
    "PoolSnapshot",
    "TokenSnapshot",
    "TokenOracleSnapshot",
    "Address",
    "DecimalString",
    "normalize_address",
    "is_same_address",
]
