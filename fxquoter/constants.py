"""Protocol constants for the FX pool quoter.

Centralizes fixed-point scales and the constants baked into the FX pool's
CurveMath contract.
"""

from decimal import Decimal

# Fixed-point scales
ONE_18 = 10**18
ONE_36 = 10**36

# 64.64 fixed point (ABDK): 64 integer bits, 64 fractional bits
FIXED_64X64_SHIFT = 64
TWO_64 = 1 << FIXED_64X64_SHIFT

# Curve parameters keep three fractional digits after the contract round trip
CURVE_PARAM_DECIMALS = 18
CURVE_PARAM_PLACES = 3

# CurveMath.MAX: 0x4000000000000000 in 64.64, i.e. 0.25
CURVEMATH_MAX = Decimal("0.25")

# CurveMath.MAX_DIFF: int128 -0x10C6F7A0B5EE in 64.64 (about -1e-6)
CURVEMATH_MAX_DIFF_RAW = -0x10C6F7A0B5EE

# CurveMath.calculateTrade loop bound and convergence granularity
CURVEMATH_MAX_ITERATIONS = 32
CURVEMATH_CONVERGENCE_DIVISOR = 10**13

# Significant digits for Decimal arithmetic: raw amounts reach ~1e27 with
# 18 fractional digits, oracle rates add up to another 18.
FX_DECIMAL_PRECISION = 80
