"""Fixed-point helpers."""

from fxquoter.math.fixed_point import (
    div_trunc,
    format_fixed,
    from_64x64,
    fx_context,
    parse_fixed,
    parse_fixed_curve_param,
    replicated_value,
    to_64x64,
)

__all__ = [
    "fx_context",
    "parse_fixed",
    "format_fixed",
    "div_trunc",
    "to_64x64",
    "from_64x64",
    "replicated_value",
    "parse_fixed_curve_param",
]
