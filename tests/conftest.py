"""Pytest configuration and fixtures."""

import pytest

from fxquoter.amm.fx import FxPool, FxPoolPairData
from tests.helpers import TOKEN_A, TOKEN_B, make_fx_pool


@pytest.fixture
def fx_pool() -> FxPool:
    """The reference pool: A (1,000,000 at 1.0) and B (900,000 at 1.08)."""
    return make_fx_pool()


@pytest.fixture
def pair_ab(fx_pool: FxPool) -> FxPoolPairData:
    """Pair data for A -> B on the reference pool."""
    return fx_pool.parse_pool_pair_data(TOKEN_A, TOKEN_B)


@pytest.fixture
def imbalanced_pool() -> FxPool:
    """Pool holding 1,300,000 A and 300,000 B, both at 1.0.

    Both balances sit outside the beta band, so every trade pays or earns
    the micro fee.
    """
    return make_fx_pool(balance_a="1300000", balance_b="300000", price_b="1.0")


@pytest.fixture
def imbalanced_pair(imbalanced_pool: FxPool) -> FxPoolPairData:
    """Pair data for A -> B on the imbalanced pool (selling the surplus token)."""
    return imbalanced_pool.parse_pool_pair_data(TOKEN_A, TOKEN_B)
