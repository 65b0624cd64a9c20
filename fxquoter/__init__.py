"""FX pool quoter - off-chain swap quotes for oracle-anchored FX curve pools."""

from fxquoter.amm.base import PoolBase, PoolType, SwapType
from fxquoter.amm.fx import FxPool

__version__ = "0.1.0"
__all__ = ["FxPool", "PoolBase", "PoolType", "SwapType", "__version__"]
