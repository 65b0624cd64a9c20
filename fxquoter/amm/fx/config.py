"""Curve math configuration for the FX pool."""

from dataclasses import dataclass
from decimal import Decimal

from fxquoter.constants import (
    CURVEMATH_CONVERGENCE_DIVISOR,
    CURVEMATH_MAX,
    CURVEMATH_MAX_DIFF_RAW,
    CURVEMATH_MAX_ITERATIONS,
    TWO_64,
)


@dataclass(frozen=True)
class FxCurveConfig:
    """Centralized configuration for FX curve math.

    Defaults replicate the deployed CurveMath contract; changing them makes
    quotes diverge from on-chain execution, so overrides are meant for tests.

    Attributes:
        max_iterations: Bound on the trade fixed-point iteration (default: 32)
        convergence_divisor: Successive outputs are compared after truncating
            to 64.64 raw units and dividing by this value (default: 1e13)
        max_diff: Largest utility decrease tolerated by the swap invariant
            check (default: -0x10C6F7A0B5EE / 2^64)
        max_fee: Cap on the per-unit micro fee rate (default: 0.25)
        weights: Target weight of each token (default: 0.5 / 0.5)
        derivative_step_tokens: Step, in whole tokens, for the spot price
            forward difference (default: 1)
    """

    max_iterations: int = CURVEMATH_MAX_ITERATIONS
    convergence_divisor: int = CURVEMATH_CONVERGENCE_DIVISOR
    max_diff: Decimal = Decimal(CURVEMATH_MAX_DIFF_RAW) / Decimal(TWO_64)
    max_fee: Decimal = CURVEMATH_MAX
    weights: tuple[Decimal, Decimal] = (Decimal("0.5"), Decimal("0.5"))
    derivative_step_tokens: int = 1


# Default configuration instance
DEFAULT_CURVE_CONFIG = FxCurveConfig()
