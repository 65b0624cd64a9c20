"""Shared type definitions for snapshot models.

These types are used across the snapshot models and the FX pool package.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

_DECIMAL_STRING_RE = re.compile(r"^-?\d*(\.\d*)?$")


def validate_decimal_string(value: Any) -> str:
    """Validate that a value is a plain decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid decimal string

    Raises:
        ValueError: If value is a float, exponent notation, or not numeric
    """
    # Accept int directly; floats are rejected to keep amounts exact
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"Decimal amount must be string or int, got {type(value).__name__}")

    stripped = value.strip()
    if stripped in ("", ".", "-") or not _DECIMAL_STRING_RE.match(stripped):
        raise ValueError(f"Decimal amount must be a plain decimal string: '{value}'")

    return stripped


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Decimal amount as string, e.g. "1000000.5" (validated)
DecimalString = Annotated[
    str,
    BeforeValidator(validate_decimal_string),
    Field(description="Decimal amount as plain decimal string"),
]


def normalize_address(address: str) -> str:
    """Lowercase an address and ensure the 0x prefix."""
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    return addr


def is_same_address(a: str, b: str) -> bool:
    """Compare two addresses case-insensitively."""
    return normalize_address(a) == normalize_address(b)
