"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token addresses and the reference pool parameters
- factories: Snapshot and pool factory functions
"""

from tests.helpers.constants import (
    ONE_TOKEN,
    POOL_ADDRESS,
    POOL_ID,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    UNKNOWN_TOKEN,
)
from tests.helpers.factories import make_fx_pool, make_pool_snapshot, make_token_snapshot

__all__ = [
    # Constants
    "POOL_ID",
    "POOL_ADDRESS",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "UNKNOWN_TOKEN",
    "ONE_TOKEN",
    # Factories
    "make_pool_snapshot",
    "make_token_snapshot",
    "make_fx_pool",
]
